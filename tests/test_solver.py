from concurrent.futures import ThreadPoolExecutor
import logging
import math

import pytest

from springcurve.handle import spring
from springcurve.models import SpringConfig, SpringState, normalize
from springcurve.solver_numpy import (
    SpringIntegrator,
    advance_state,
    integrate_spring,
    resolve_precision,
)


def test_first_step_from_rest(default_config):
    integrator = SpringIntegrator(0, 100, default_config)
    # one 1 ms step: a = 170e-6 * 100, v = a, x = v
    assert integrator.advance(1) == pytest.approx(0.017)
    assert integrator.last_velocity == pytest.approx(0.017)
    assert not integrator.done


def test_zero_elapsed_does_not_move(default_config):
    integrator = SpringIntegrator(0, 100, default_config)
    assert integrator.advance(0) == 0
    assert integrator.last_velocity == 0.0
    assert not integrator.done


def test_fractional_elapsed_rounds_steps_up(default_config):
    a = SpringIntegrator(0, 100, default_config)
    b = SpringIntegrator(0, 100, default_config)
    assert a.advance(1 / 6) == b.advance(1)


def test_zero_tension_never_moves():
    integrator = SpringIntegrator(0, 1, normalize({"tension": 0}))
    assert integrator.advance(1000) == 0
    assert integrator.done
    # at rest for good: further advances report the target
    assert integrator.advance(1000) == 1


@pytest.mark.parametrize("to_value", [-50.0, 0.0, 3.0, 1e6])
def test_negative_tension_is_done_at_from(to_value):
    integrator = SpringIntegrator(7.0, to_value, SpringConfig(tension=-1.0))
    assert integrator.advance(10) == 7.0
    assert integrator.done
    assert integrator.last_velocity is None


def test_same_endpoints_settle_on_first_advance(default_config):
    integrator = SpringIntegrator(5, 5, default_config)
    assert integrator.advance(0.5) == 5
    assert integrator.done


def test_settles_at_target(default_config):
    integrator = SpringIntegrator(0, 100, default_config)
    position = integrator.advance(10_000)
    assert integrator.done
    assert abs(position - 100) <= default_config.precision


def test_done_returns_exact_target_without_mutation(default_config):
    integrator = SpringIntegrator(0, 100, default_config)
    integrator.advance(10_000)
    snapshot = integrator.state
    assert integrator.advance(1) == 100
    assert integrator.advance(50_000) == 100
    assert integrator.state is snapshot


def test_same_inputs_give_same_positions(default_config):
    a = SpringIntegrator(-20, 80, default_config)
    b = SpringIntegrator(-20, 80, default_config)
    elapsed = [0.3, 1, 2.5, 17, 40, 40, 200]
    assert [a.advance(t) for t in elapsed] == [b.advance(t) for t in elapsed]


def test_initial_velocity_override(default_config):
    integrator = SpringIntegrator(0, 100, default_config, v0=1.0)
    # a = 0.017 spring - 0.026 damping, so v = 1 - 0.009
    assert integrator.advance(1) == pytest.approx(0.991)


def test_nan_forces_completion_with_warning(caplog):
    integrator = SpringIntegrator(0, 100, SpringConfig(mass=0.0))
    with caplog.at_level(logging.WARNING, logger="springcurve"):
        position = integrator.advance(2)
    assert math.isnan(position)
    assert integrator.done
    assert "NaN" in caplog.text
    assert integrator.advance(1) == 100


def test_non_finite_elapsed_takes_no_steps(default_config):
    integrator = SpringIntegrator(0, 100, default_config)
    assert integrator.advance(float("nan")) == 0
    assert integrator.advance(float("inf")) == 0


def test_precision_fallbacks():
    derived = SpringConfig(precision=0.0)
    assert resolve_precision(1, 1, derived) == 0.005
    assert resolve_precision(0, 100, derived) == pytest.approx(0.1)
    assert resolve_precision(0, 5000, derived) == 1.0
    assert resolve_precision(0, 100, SpringConfig(precision=0.3)) == 0.3


def test_advance_state_is_pure(default_config):
    start = SpringState(position=0.0)
    first = advance_state(start, 0, 100, default_config, 5)
    second = advance_state(start, 0, 100, default_config, 5)
    assert first == second
    assert start == SpringState(position=0.0)
    assert first.position > 0


def test_kernel_breaks_at_rest():
    position, velocity, finished = integrate_spring(
        1.0, 0.0, 1.0, 170.0, 26.0, 1.0, 0.001, 0.0001, 1000
    )
    assert finished
    assert position == 1.0
    assert velocity == 0.0


@pytest.mark.parametrize("elapsed", [1e19, 1e20, 1e300])
def test_huge_elapsed_settles_at_target(default_config, elapsed):
    integrator = SpringIntegrator(0, 100, default_config)
    position = integrator.advance(elapsed)
    assert integrator.done
    assert abs(position - 100) <= default_config.precision


def test_concurrent_advances_match_serial_run(cache):
    ease, _ = spring(0, 100, cache=cache).to_easing_function()
    workers, calls = 8, 25
    with ThreadPoolExecutor(max_workers=workers) as pool:
        list(pool.map(lambda _: [ease(1) for _ in range(calls)], range(workers)))

    serial = SpringIntegrator(0, 100, normalize())
    for _ in range(workers * calls):
        serial.advance(1)

    shared = spring(0, 100, cache=cache).integrator
    assert not serial.done
    assert shared.state == serial.state
