"""Modelos de efecto glucemico por evento (comida, insulina, ejercicio).

Every model maps the elapsed minutes ``dt`` since an event to a signed
glucose effect in mg/dL and is zero for ``dt <= 0``.
"""

from __future__ import annotations

import math

from glucemia_tool.config import EstimatorConfig
from glucemia_tool.model import (
    Exercise,
    GlucoseReading,
    InsulinDose,
    InsulinKind,
    Intensity,
    Meal,
    parse_insulin_kind,
    parse_intensity,
)

MEAL_ONSET_MIN = 15
MEAL_PEAK_MIN = 60
MEAL_END_MIN = 180

RAPID_ONSET_MIN = 15
RAPID_PEAK_MIN = 90
RAPID_END_MIN = 300

LONG_MAX_HOURS = 24

POST_EXERCISE_WINDOW_MIN = 60
POST_EXERCISE_EXTRA = 0.2

EXERCISE_RATES: dict[Intensity, float] = {
    Intensity.LOW: 1.0,
    Intensity.MODERATE: 1.5,
    Intensity.HIGH: 2.0,
}


def smoothstep(x: float) -> float:
    """Cubic ease ``3t^2 - 2t^3`` with ``t`` clamped to [0, 1]."""
    t = max(0.0, min(1.0, x))
    return t * t * (3 - 2 * t)


def meal_effect(dt: float, total_rise: float) -> float:
    """Carb absorption: onset 15 min, peak 60 min, back to baseline at 180."""
    if dt < MEAL_ONSET_MIN:
        return 0.0
    if dt < MEAL_PEAK_MIN:
        return total_rise * smoothstep(
            (dt - MEAL_ONSET_MIN) / (MEAL_PEAK_MIN - MEAL_ONSET_MIN)
        )
    if dt < MEAL_END_MIN:
        return total_rise * (
            1 - smoothstep((dt - MEAL_PEAK_MIN) / (MEAL_END_MIN - MEAL_PEAK_MIN))
        )
    return 0.0


def rapid_insulin_effect(dt: float, total_drop: float) -> float:
    """Rapid insulin: onset 15 min, peak 90 min, gone after 5 h."""
    if dt < RAPID_ONSET_MIN:
        return 0.0
    if dt < RAPID_PEAK_MIN:
        return -total_drop * smoothstep(
            (dt - RAPID_ONSET_MIN) / (RAPID_PEAK_MIN - RAPID_ONSET_MIN)
        )
    if dt < RAPID_END_MIN:
        return -total_drop * (
            1 - smoothstep((dt - RAPID_PEAK_MIN) / (RAPID_END_MIN - RAPID_PEAK_MIN))
        )
    return 0.0


def long_insulin_effect(dt: float, units: float, sensitivity_per_hour: float) -> float:
    """Long insulin: linear drop per hour, capped at 24 h."""
    if dt <= 0:
        return 0.0
    hours = min(dt / 60, LONG_MAX_HOURS)
    return -(units * sensitivity_per_hour * hours)


def exercise_effect(dt: float, duration_minutes: float, intensity: Intensity) -> float:
    """Exercise drop.

    Linear during the activity, up to 20% extra over the following hour, then
    held at ``1.2 * peak_drop`` (no recovery inside a day).
    """
    if dt <= 0:
        return 0.0
    rate = EXERCISE_RATES.get(intensity, EXERCISE_RATES[Intensity.MODERATE])
    peak_drop = rate * duration_minutes

    if dt < duration_minutes:
        return -(rate * dt)

    post_dt = dt - duration_minutes
    if post_dt < POST_EXERCISE_WINDOW_MIN:
        return -(
            peak_drop
            + peak_drop
            * POST_EXERCISE_EXTRA
            * smoothstep(post_dt / POST_EXERCISE_WINDOW_MIN)
        )
    return -(peak_drop * (1 + POST_EXERCISE_EXTRA))


def compute_event_effect(event: object, dt: float, config: EstimatorConfig) -> float:
    """Glucose effect of one event ``dt`` minutes after it happened.

    Malformed numeric fields and non-positive exercise durations count as
    zero. Kind and intensity accept Spanish or English labels. Readings and
    unknown objects contribute nothing.

    Args:
        event: Logged event.
        dt: Minutes elapsed since the event timestamp.
        config: Estimator profile.

    Returns:
        Signed effect in mg/dL.
    """
    match event:
        case Meal(carbs_grams=carbs):
            return meal_effect(dt, as_number(carbs) * config.carb_ratio)
        case InsulinDose(units=units, kind=kind):
            if parse_insulin_kind(kind) is InsulinKind.RAPID:
                return rapid_insulin_effect(
                    dt, as_number(units) * config.rapid_sensitivity
                )
            return long_insulin_effect(
                dt, as_number(units), config.long_sensitivity_per_hour
            )
        case Exercise(duration_minutes=duration, intensity=intensity):
            minutes = as_number(duration)
            if minutes <= 0:
                return 0.0
            return exercise_effect(dt, minutes, parse_intensity(intensity))
        case GlucoseReading():
            return 0.0
        case _:
            return 0.0


def as_number(value: object) -> float:
    """Coerce a logged numeric field; anything unusable becomes 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number
