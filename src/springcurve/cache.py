"""Spring caches.

Two size-bound least-recently-used stores share one identity key derived
from ``(from, to, config)``:

 - integrators: the stateful ``SpringIntegrator`` handed to easing functions.
 - frames: the ``FrameSequence`` sampled once per identity.

Get-or-create is serialized per key through a small pool of striped locks,
so two threads asking for the same spring build it once.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
import logging
import threading
from typing import Generic, TypeVar

from springcurve.models import FrameSequence, SpringConfig
from springcurve.sampler import sample_frames
from springcurve.solver_numpy import SpringIntegrator

logger = logging.getLogger(__name__)

__all__ = ["CacheStats", "LRUStore", "SpringCache", "default_cache"]

DEFAULT_CAPACITY = 256
LOCK_STRIPES = 32

V = TypeVar("V")


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    evictions: int = 0


class LRUStore(Generic[V]):
    """String-keyed LRU store. ``capacity=None`` disables eviction."""

    def __init__(self, capacity: int | None = DEFAULT_CAPACITY) -> None:
        if capacity is not None and capacity <= 0:
            capacity = 1
        self.capacity = capacity
        self.stats = CacheStats()
        self._store: "OrderedDict[str, V]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> V | None:
        """Return the stored value and mark it as recently used."""
        with self._lock:
            value = self._store.get(key)
            if value is None:
                self.stats.misses += 1
                return None
            self._store.move_to_end(key, last=True)
            self.stats.hits += 1
            return value

    def put(self, key: str, value: V) -> None:
        with self._lock:
            if key in self._store:
                self._store.move_to_end(key, last=True)
            self._store[key] = value
            if self.capacity is not None and len(self._store) > self.capacity:
                evicted, _ = self._store.popitem(last=False)
                self.stats.evictions += 1
                logger.debug("Evicted %s", evicted)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._store.keys())


class SpringCache:
    """Integrator and frame caches for one owner (a process, a test, a view)."""

    def __init__(self, capacity: int | None = DEFAULT_CAPACITY) -> None:
        self.integrators: LRUStore[SpringIntegrator] = LRUStore(capacity)
        self.frames: LRUStore[FrameSequence] = LRUStore(capacity)
        self._stripes = [threading.Lock() for _ in range(LOCK_STRIPES)]

    @property
    def capacity(self) -> int | None:
        return self.integrators.capacity

    def _key_lock(self, key: str) -> threading.Lock:
        return self._stripes[hash(key) % LOCK_STRIPES]

    def _get_or_create(self, store: LRUStore[V], key: str, create: Callable[[], V]) -> V:
        with self._key_lock(key):
            value = store.get(key)
            if value is None:
                value = create()
                store.put(key, value)
            return value

    def get_integrator(
        self, key: str, from_value: float, to_value: float, config: SpringConfig
    ) -> SpringIntegrator:
        """Return the shared integrator for ``key``, creating it on a miss."""
        return self._get_or_create(
            self.integrators, key, lambda: SpringIntegrator(from_value, to_value, config)
        )

    def get_frames(
        self, key: str, from_value: float, to_value: float, config: SpringConfig
    ) -> FrameSequence:
        """Return the frames for ``key``, sampling a fresh integrator on a miss.

        The shared integrator is never used for sampling, so easing functions
        handed out for the same key start from rest.
        """

        def create() -> FrameSequence:
            logger.debug("Sampling frames for %s", key)
            return sample_frames(SpringIntegrator(from_value, to_value, config))

        return self._get_or_create(self.frames, key, create)

    def clear(self) -> None:
        self.integrators.clear()
        self.frames.clear()

    def stats(self) -> dict[str, CacheStats]:
        return {"integrators": self.integrators.stats, "frames": self.frames.stats}

    def __contains__(self, key: object) -> bool:
        return key in self.integrators or key in self.frames

    def __len__(self) -> int:
        return len(self.integrators)


_default_cache = SpringCache()


def default_cache() -> SpringCache:
    """Process-wide cache used when no cache is passed to ``spring()``."""
    return _default_cache
