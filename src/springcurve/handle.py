"""Public entry point: build a spring between two values."""

from __future__ import annotations

import logging

from springcurve.cache import SpringCache, default_cache
from springcurve.models import (
    ConfigLike,
    FrameSequence,
    KeyframeData,
    SpringConfig,
    cache_key,
    normalize,
)
from springcurve.solver_numpy import SpringIntegrator
from springcurve.types import EasingFunction

logger = logging.getLogger(__name__)


class SpringHandle:
    """A cached spring exposed as an easing function or as keyframes."""

    def __init__(self, key: str, integrator: SpringIntegrator, frames: FrameSequence) -> None:
        self.key = key
        self.integrator = integrator
        self.frames = frames

    @property
    def config(self) -> SpringConfig:
        return self.integrator.config

    @property
    def duration(self) -> float:
        return self.frames.duration

    def to_easing_function(self) -> tuple[EasingFunction, float]:
        """Return ``(fn, duration_ms)``; ``fn(t)`` advances the shared integrator."""
        integrator = self.integrator
        return (lambda t: integrator.advance(t)), self.frames.duration

    def to_keyframes(self, key: str) -> tuple[KeyframeData, float]:
        """Return the sampled frames under the animation name ``key``."""
        return KeyframeData(name=key, frames=self.frames.frames), self.frames.duration

    def __repr__(self) -> str:
        return f"SpringHandle(key={self.key!r}, frames={len(self.frames)}, duration={self.duration!r})"


def spring(
    from_value: float,
    to_value: float,
    config: ConfigLike = None,
    *,
    cache: SpringCache | None = None,
) -> SpringHandle:
    """Get the spring from ``from_value`` to ``to_value``.

    Springs with the same endpoints and normalized config share one
    integrator and one frame sequence per cache.
    """
    if cache is None:
        cache = default_cache()

    actual_config = normalize(config)
    key = cache_key(from_value, to_value, actual_config)

    integrator = cache.get_integrator(key, from_value, to_value, actual_config)
    frames = cache.get_frames(key, from_value, to_value, actual_config)
    logger.debug("Spring %s ready (%d frames)", key, len(frames))

    return SpringHandle(key, integrator, frames)


create_spring = spring
