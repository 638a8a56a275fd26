"""Modelos tipados para eventos del registro diario y puntos de la curva."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class InsulinKind(str, Enum):
    """Insulin action profile."""

    RAPID = "rapida"
    LONG = "lenta"


class Intensity(str, Enum):
    """Exercise intensity level."""

    LOW = "baja"
    MODERATE = "moderada"
    HIGH = "alta"


_INSULIN_KIND_ALIASES: dict[str, InsulinKind] = {
    "rapida": InsulinKind.RAPID,
    "rápida": InsulinKind.RAPID,
    "rapid": InsulinKind.RAPID,
}

_INTENSITY_ALIASES: dict[str, Intensity] = {
    "baja": Intensity.LOW,
    "low": Intensity.LOW,
    "moderada": Intensity.MODERATE,
    "moderate": Intensity.MODERATE,
    "alta": Intensity.HIGH,
    "high": Intensity.HIGH,
}


def parse_insulin_kind(raw: object) -> InsulinKind:
    """Solo rapida es rapida; cualquier otro valor se trata como lenta."""
    if isinstance(raw, InsulinKind):
        return raw
    return _INSULIN_KIND_ALIASES.get(str(raw or "").strip().lower(), InsulinKind.LONG)


def parse_intensity(raw: object) -> Intensity:
    """Spanish or English intensity label; unknown values are moderate."""
    if isinstance(raw, Intensity):
        return raw
    return _INTENSITY_ALIASES.get(str(raw or "").strip().lower(), Intensity.MODERATE)


@dataclass(frozen=True)
class GlucoseReading:
    """One real glucose measurement (mg/dL)."""

    timestamp: str
    value: float


@dataclass(frozen=True)
class Meal:
    """Meal with its carbohydrate load."""

    timestamp: str
    carbs_grams: float | None = None


@dataclass(frozen=True)
class InsulinDose:
    """Rapid or long acting insulin dose."""

    timestamp: str
    units: float | None = None
    kind: InsulinKind = InsulinKind.RAPID


@dataclass(frozen=True)
class Exercise:
    """Exercise session starting at ``timestamp``."""

    timestamp: str
    duration_minutes: float | None = None
    intensity: Intensity = Intensity.MODERATE


Event = GlucoseReading | Meal | InsulinDose | Exercise


@dataclass(frozen=True)
class Point:
    """One sample of the day curve, real or estimated."""

    minute: int
    value: float
    is_real: bool
    real_value: float | None = None

    @property
    def time_str(self) -> str:
        """Return the sample time as ``HH:MM``."""
        hours, minutes = divmod(self.minute, 60)
        return f"{hours:02d}:{minutes:02d}"
