"""Estimacion puntual de glucosa anclada a mediciones reales."""

from __future__ import annotations

from collections.abc import Sequence

from glucemia_tool.config import EstimatorConfig
from glucemia_tool.effects import compute_event_effect
from glucemia_tool.model import Event, GlucoseReading

MIN_GLUCOSE = 20.0
MAX_GLUCOSE = 600.0


def ts_to_minutes(timestamp: str | None) -> int:
    """Minutes since midnight read from the ``HH:MM`` digits of a timestamp.

    Only characters ``[11:16]`` are used (``2024-01-15T14:30:00Z`` -> 870);
    date and timezone are ignored. Short or unparseable timestamps give 0.
    """
    if not timestamp or len(timestamp) < 16:
        return 0
    hh, _, mm = timestamp[11:16].partition(":")
    try:
        return int(hh) * 60 + int(mm)
    except ValueError:
        return 0


def clamp_glucose(value: float) -> float:
    """Clamp a glucose value to the physiological range."""
    return max(MIN_GLUCOSE, min(MAX_GLUCOSE, value))


def sorted_readings(events: Sequence[Event]) -> list[GlucoseReading]:
    """Real readings of the day ordered by minute (stable for ties)."""
    readings = [e for e in events if isinstance(e, GlucoseReading)]
    return sorted(readings, key=lambda r: ts_to_minutes(r.timestamp))


def estimate_at(
    events: Sequence[Event],
    target_minute: float,
    config: EstimatorConfig,
) -> float | None:
    """Estimate glucose at ``target_minute``.

    The estimate starts from the last reading at or before the target (the
    anchor) and adds, for every other event, the change of its effect between
    the anchor and the target. When a later reading exists, the model error
    at that reading is blended in linearly so the result meets it exactly.

    Args:
        events: All events of one day.
        target_minute: Minutes since midnight (0..1440).
        config: Estimator profile.

    Returns:
        Estimated mg/dL clamped to [20, 600], or None when there is no
        reading at or before ``target_minute``.
    """
    readings = sorted_readings(events)
    if not readings:
        return None

    anchor = None
    for reading in reversed(readings):
        if ts_to_minutes(reading.timestamp) <= target_minute:
            anchor = reading
            break
    if anchor is None:
        return None

    anchor_minute = ts_to_minutes(anchor.timestamp)
    others = [e for e in events if not isinstance(e, GlucoseReading)]

    estimated = anchor.value + _effect_delta(
        others, anchor_minute, target_minute, config
    )

    next_reading = next(
        (r for r in readings if ts_to_minutes(r.timestamp) > target_minute), None
    )
    if next_reading is not None:
        next_minute = ts_to_minutes(next_reading.timestamp)
        predicted_at_next = anchor.value + _effect_delta(
            others, anchor_minute, next_minute, config
        )
        if next_minute > anchor_minute:
            t = (target_minute - anchor_minute) / (next_minute - anchor_minute)
            estimated += (next_reading.value - predicted_at_next) * t

    return clamp_glucose(estimated)


def _effect_delta(
    events: Sequence[Event],
    anchor_minute: float,
    target_minute: float,
    config: EstimatorConfig,
) -> float:
    # Incremental effect between anchor and target; effects already present
    # at the anchor are part of its measured value.
    total = 0.0
    for event in events:
        event_minute = ts_to_minutes(event.timestamp)
        total += compute_event_effect(
            event, target_minute - event_minute, config
        ) - compute_event_effect(event, anchor_minute - event_minute, config)
    return total
