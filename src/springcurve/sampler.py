"""Frame sampling: run a spring to rest and record its positions."""

from __future__ import annotations

import logging

import numpy as np

from springcurve.models import FrameSequence
from springcurve.solver_numpy import SpringIntegrator

logger = logging.getLogger(__name__)

FRAME = 1 / 6
INFINITE_LOOP_LIMIT = 100_000


def sample_frames(integrator: SpringIntegrator) -> FrameSequence:
    """Advance ``integrator`` at a cadence of FRAME until it settles.

    The loop always runs to INFINITE_LOOP_LIMIT; positions are only
    recorded while the integrator is not done. ``integrator`` is consumed,
    so pass one that nothing else advances.
    """
    frames: list[float] = []

    elapsed = 0.0
    count = 1
    while count < INFINITE_LOOP_LIMIT:
        elapsed += FRAME
        if not integrator.done:
            frames.append(integrator.advance(elapsed))
        count += 1

    # elapsed is already counted in FRAME units; kept as-is for parity
    duration = elapsed * FRAME * 1000

    if not integrator.done:
        logger.debug(
            "Spring %s -> %s did not settle within %d iterations",
            integrator.from_value,
            integrator.to_value,
            INFINITE_LOOP_LIMIT,
        )

    data = np.array(frames, dtype=np.float64)
    data.setflags(write=False)
    logger.debug("Sampled %d frames, duration %.3f ms", len(data), duration)

    return FrameSequence(duration=duration, frames=data)
