"""
Spring Curve Package

Damped-spring motion between two scalar values, available as an easing
function or as precomputed keyframes, with the simulation and the sampled
frames cached per (from, to, config).
"""

from .cache import SpringCache, default_cache
from .handle import SpringHandle, create_spring, spring
from .logging_config import setup_logging
from .models import (
    FrameSequence,
    KeyframeData,
    PartialSpringConfig,
    SpringConfig,
    SpringState,
    cache_key,
    normalize,
)
from .sampler import sample_frames
from .solver_numpy import SpringIntegrator, advance_state

__version__ = "0.1.0"

__all__ = [
    "FrameSequence",
    "KeyframeData",
    "PartialSpringConfig",
    "SpringCache",
    "SpringConfig",
    "SpringHandle",
    "SpringIntegrator",
    "SpringState",
    "advance_state",
    "cache_key",
    "create_spring",
    "default_cache",
    "normalize",
    "sample_frames",
    "setup_logging",
    "spring",
]
