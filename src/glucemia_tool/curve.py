"""Curva de glucosa del dia: grilla regular + instantes de medicion."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from glucemia_tool.config import EstimatorConfig
from glucemia_tool.estimator import estimate_at, sorted_readings, ts_to_minutes
from glucemia_tool.model import Event, GlucoseReading, Point

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 1440
DEFAULT_INTERVAL_MINUTES = 15


def generate_day_curve(
    events: Sequence[Event],
    config: EstimatorConfig,
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES,
) -> list[Point]:
    """Build the day curve from the first reading until midnight.

    Sample minutes are a regular grid starting at the first reading plus the
    exact minute of every reading. Reading minutes emit the logged value
    verbatim; the rest are estimated and rounded to whole mg/dL.

    Args:
        events: All events of one day.
        config: Estimator profile.
        interval_minutes: Grid step in minutes.

    Returns:
        Points ordered by minute; empty when the day has no reading.

    Raises:
        ValueError: If ``interval_minutes`` is not positive.
    """
    if interval_minutes <= 0:
        raise ValueError(f"interval_minutes must be positive: {interval_minutes}")

    readings = sorted_readings(events)
    if not readings:
        return []

    # Last reading wins on duplicated minutes, same as the estimator anchor.
    real_by_minute: dict[int, GlucoseReading] = {
        ts_to_minutes(r.timestamp): r for r in readings
    }
    first_minute = ts_to_minutes(readings[0].timestamp)
    minutes = set(range(first_minute, MINUTES_PER_DAY + 1, interval_minutes))
    minutes.update(real_by_minute)

    points: list[Point] = []
    for minute in sorted(minutes):
        real = real_by_minute.get(minute)
        if real is not None:
            points.append(
                Point(
                    minute=minute,
                    value=real.value,
                    is_real=True,
                    real_value=real.value,
                )
            )
            continue
        estimated = estimate_at(events, minute, config)
        if estimated is None:
            continue
        points.append(
            Point(minute=minute, value=_round_half_up(estimated), is_real=False)
        )

    logger.debug(
        "Day curve: %d points (%d real) every %d min",
        len(points),
        len(real_by_minute),
        interval_minutes,
    )
    return points


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))
