# solver_numpy.py
"""
Scalar damped-spring integrator.

Fixed 1 ms forward Euler steps, velocity first and then position, with a
numba kernel for the inner loop.
"""

from __future__ import annotations

from dataclasses import replace
import logging
import math
import threading

from numba import njit  # type: ignore
import numpy as np

from springcurve.models import SpringConfig, SpringState

logger = logging.getLogger(__name__)

STEP_MS = 1.0
# int64 bound of the kernel loop counter
MAX_STEPS = int(np.iinfo(np.int64).max)

# ===============================
# PHYSICS KERNEL
# ===============================


# No fastmath: NaN has to survive the loop so the caller can detect it.
# error_model="numpy" gives inf/nan on division by zero mass instead of raising.
@njit(cache=True, error_model="numpy")  # type: ignore
def integrate_spring(
    position: float,
    velocity: float,
    to: float,
    tension: float,
    friction: float,
    mass: float,
    precision: float,
    rest_velocity: float,
    num_steps: int,
) -> tuple[float, float, bool]:
    """Advance position and velocity by ``num_steps`` steps of STEP_MS.

    Stops early once the spring is slow and close enough to ``to``.
    """
    finished = False
    for _ in range(num_steps):
        is_moving = abs(velocity) > rest_velocity

        if not is_moving:
            finished = abs(to - position) <= precision
            if finished:
                break

        spring_force = -tension * 0.000001 * (position - to)
        damping_force = -friction * 0.001 * velocity
        acceleration = (spring_force + damping_force) / mass  # pt/ms^2

        velocity = velocity + acceleration * STEP_MS  # pt/ms
        position = position + velocity * STEP_MS

    return position, velocity, finished


def resolve_precision(from_value: float, to_value: float, config: SpringConfig) -> float:
    """The smallest distance from ``to`` before being treated like ``to``."""
    if config.precision:
        return config.precision
    if from_value == to_value:
        return 0.005
    return min(1.0, abs(to_value - from_value) * 0.001)


def _step_count(elapsed: float) -> int:
    if not math.isfinite(elapsed) or elapsed <= 0:
        return 0
    return min(math.ceil(elapsed / STEP_MS), MAX_STEPS)


def advance_state(
    state: SpringState,
    from_value: float,
    to_value: float,
    config: SpringConfig,
    elapsed: float,
    v0: float | None = None,
) -> SpringState:
    """Return the snapshot reached after integrating ``elapsed`` ms from ``state``."""
    if state.done:
        return state

    # Loose springs never move.
    if config.tension <= 0:
        return replace(state, done=True)

    precision = resolve_precision(from_value, to_value, config)
    rest_velocity = precision / 10

    if state.velocity is not None:
        velocity = state.velocity
    else:
        velocity = v0 if v0 is not None else 0.0

    position, velocity, finished = integrate_spring(
        float(state.position),
        float(velocity),
        float(to_value),
        float(config.tension),
        float(config.friction),
        float(config.mass),
        float(precision),
        float(rest_velocity),
        _step_count(elapsed),
    )
    position = float(position)

    if math.isnan(position):
        logger.warning(
            "Got NaN while animating from %s to %s with %s", from_value, to_value, config
        )
        finished = True

    return SpringState(position=position, velocity=float(velocity), done=bool(finished))


# ===============================
# INTEGRATOR CLASS
# ===============================


class SpringIntegrator:
    """
    Stateful spring between two scalar values.

    Every ``advance(elapsed)`` integrates ``ceil(elapsed)`` more milliseconds
    from wherever the previous call left off. Once ``done`` the spring stays
    at rest and ``advance`` returns ``to_value``.
    """

    def __init__(
        self,
        from_value: float,
        to_value: float,
        config: SpringConfig,
        v0: float | None = None,
    ) -> None:
        self.from_value = from_value
        self.to_value = to_value
        self.config = config
        self.v0 = v0  # initial velocity override, only read before the first advance

        self._state = SpringState(position=from_value)
        self._lock = threading.Lock()

    @property
    def state(self) -> SpringState:
        return self._state

    @property
    def last_position(self) -> float:
        return self._state.position

    @property
    def last_velocity(self) -> float | None:
        return self._state.velocity

    @property
    def done(self) -> bool:
        return self._state.done

    def advance(self, elapsed: float) -> float:
        """Integrate ``elapsed`` ms and return the new position."""
        with self._lock:
            if self._state.done:
                return self.to_value

            self._state = advance_state(
                self._state,
                self.from_value,
                self.to_value,
                self.config,
                elapsed,
                self.v0,
            )
            return self._state.position

    def __repr__(self) -> str:
        return (
            f"SpringIntegrator(from_value={self.from_value!r}, to_value={self.to_value!r}, "
            f"config={self.config!r}, state={self._state!r})"
        )
