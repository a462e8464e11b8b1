# models.py
from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from decimal import Decimal
import math
from typing import Any, Union

from springcurve.types import FRAMES

FIELD_ORDER = ("mass", "tension", "friction", "precision")

DEFAULTS: dict[str, float] = {
    "mass": 1.0,
    "tension": 170.0,
    "friction": 26.0,
    "precision": 0.001,
}


@dataclass(frozen=True)
class SpringConfig:
    """Complete spring configuration.

    ``precision`` of 0 means the rest threshold is derived from the
    distance between the endpoints.
    """

    mass: float = DEFAULTS["mass"]
    tension: float = DEFAULTS["tension"]
    friction: float = DEFAULTS["friction"]
    precision: float = DEFAULTS["precision"]

    def __iter__(self) -> Iterator[float]:
        yield self.mass
        yield self.tension
        yield self.friction
        yield self.precision


@dataclass(frozen=True)
class PartialSpringConfig:
    """Configuration with any subset of fields set. ``None`` means absent."""

    mass: float | None = None
    tension: float | None = None
    friction: float | None = None
    precision: float | None = None


ConfigLike = Union[SpringConfig, PartialSpringConfig, Mapping[str, Any], None]


@dataclass(frozen=True)
class SpringState:
    position: float
    velocity: float | None = None  # None until the first advance
    done: bool = False


@dataclass(frozen=True, eq=False)
class FrameSequence:
    """Sampled positions of a spring plus the duration they cover (ms)."""

    duration: float
    frames: FRAMES

    def __len__(self) -> int:
        return len(self.frames)

    def __iter__(self) -> Iterator[float]:
        return iter(self.frames.tolist())


@dataclass(frozen=True, eq=False)
class KeyframeData:
    """Frame payload handed to a presentation layer under an animation name."""

    name: str
    frames: FRAMES


def normalize(config: ConfigLike = None) -> SpringConfig:
    """Fill every absent field of ``config`` with its default.

    Only missing or ``None`` fields are defaulted; an explicit ``0`` is kept.
    """
    if config is None:
        return SpringConfig()
    if isinstance(config, SpringConfig):
        return config
    if isinstance(config, Mapping):
        values = {name: config.get(name) for name in FIELD_ORDER}
    else:
        values = {name: getattr(config, name, None) for name in FIELD_ORDER}

    return SpringConfig(
        **{
            name: DEFAULTS[name] if value is None else float(value)
            for name, value in values.items()
        }
    )


def _format_number(value: float) -> str:
    # Match how a JavaScript number prints: 170.0 -> "170", 1e-05 -> "0.00001",
    # 1e21 -> "1e+21", nan -> "NaN"
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"

    magnitude = abs(value)
    if value.is_integer() and magnitude < 1e16:
        return str(int(value))

    # repr gives the shortest round-tripping digits, as JavaScript does
    text = repr(value)
    if 1e-6 <= magnitude < 1e21:
        return format(Decimal(text), "f")
    mantissa, _, exponent = text.partition("e")
    return f"{mantissa}e{int(exponent):+d}"


def cache_key(from_value: float, to_value: float, config: SpringConfig) -> str:
    """Identity string shared by the integrator and frame caches."""
    values = ",".join(_format_number(v) for v in config)
    return f"{_format_number(from_value)}-{_format_number(to_value)}-{values}"
