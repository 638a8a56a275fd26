"""Resumenes diarios y por periodo a partir de la curva estimada."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass
from datetime import date
from typing import cast

import pandas as pd

from glucemia_tool.config import EstimatorConfig
from glucemia_tool.curve import generate_day_curve
from glucemia_tool.effects import as_number
from glucemia_tool.model import (
    Event,
    Exercise,
    GlucoseReading,
    InsulinDose,
    InsulinKind,
    Meal,
    Point,
    parse_insulin_kind,
)

SUMMARY_INTERVAL_MINUTES = 15


@dataclass(frozen=True)
class DaySummary:
    """Aggregates for one calendar day."""

    day: date
    avg_glucose: float | None
    time_in_range: float | None
    time_below_range: float | None
    time_above_range: float | None
    rapid_units: float
    long_units: float
    total_carbs: float
    exercise_minutes: int
    glucose_count: int
    has_curve: bool


@dataclass(frozen=True)
class PeriodSummary:
    """Aggregates over consecutive days (empty days included)."""

    days: int
    avg_glucose: float | None
    time_in_range: float | None
    time_below_range: float | None
    time_above_range: float | None
    avg_readings_per_day: float | None
    avg_rapid_per_day: float | None
    avg_long_per_day: float | None
    avg_carbs_per_day: float | None
    total_exercise: int
    days_with_data: int


def group_events_by_day(events: Iterable[Event]) -> dict[date, list[Event]]:
    """Group events by the ``YYYY-MM-DD`` prefix of their timestamp.

    Events whose timestamp does not start with a valid date are dropped.
    """
    grouped: dict[date, list[Event]] = defaultdict(list)
    for event in events:
        try:
            day = date.fromisoformat(event.timestamp[:10])
        except (TypeError, ValueError):
            continue
        grouped[day].append(event)
    return dict(grouped)


def date_range(end: date, days: int) -> list[date]:
    """Inclusive calendar of ``days`` days ending at ``end`` (oldest first)."""
    if days <= 0:
        return []
    days_index = pd.date_range(end=end, periods=days, freq="D")
    return [cast(date, d.date()) for d in days_index]


def day_summary(
    day: date, events: Sequence[Event], config: EstimatorConfig
) -> DaySummary:
    """Reduce one day of events and its estimated curve.

    Range fractions are computed over the 15-minute curve points; the average
    uses only real readings.

    Args:
        day: Calendar day the events belong to.
        events: Events of that day.
        config: Estimator profile (target range included).

    Returns:
        Daily summary.
    """
    readings = [e for e in events if isinstance(e, GlucoseReading)]
    values = [as_number(r.value) for r in readings]
    avg_glucose = sum(values) / len(values) if values else None

    curve = generate_day_curve(events, config, SUMMARY_INTERVAL_MINUTES)
    below = sum(1 for p in curve if p.value < config.target_min)
    above = sum(1 for p in curve if p.value > config.target_max)
    in_range = len(curve) - below - above
    total = len(curve)

    doses = [e for e in events if isinstance(e, InsulinDose)]
    rapid_units = sum(
        as_number(d.units)
        for d in doses
        if parse_insulin_kind(d.kind) is InsulinKind.RAPID
    )
    long_units = sum(
        as_number(d.units)
        for d in doses
        if parse_insulin_kind(d.kind) is InsulinKind.LONG
    )
    total_carbs = sum(
        as_number(m.carbs_grams) for m in events if isinstance(m, Meal)
    )
    exercise_minutes = sum(
        int(as_number(x.duration_minutes))
        for x in events
        if isinstance(x, Exercise)
    )

    return DaySummary(
        day=day,
        avg_glucose=avg_glucose,
        time_in_range=in_range / total if total else None,
        time_below_range=below / total if total else None,
        time_above_range=above / total if total else None,
        rapid_units=rapid_units,
        long_units=long_units,
        total_carbs=total_carbs,
        exercise_minutes=exercise_minutes,
        glucose_count=len(readings),
        has_curve=total > 0,
    )


def period_summaries(
    events_by_day: dict[date, list[Event]],
    config: EstimatorConfig,
    *,
    end: date,
    days: int,
) -> list[DaySummary]:
    """Daily summaries for every day of the period, empty days included."""
    return [
        day_summary(day, events_by_day.get(day, []), config)
        for day in date_range(end, days)
    ]


def period_summary(summaries: Sequence[DaySummary]) -> PeriodSummary:
    """Average the daily summaries of a period.

    Glucose averages only consider days with readings and range fractions
    only days with a curve; per-day totals divide by every day.
    """
    days = len(summaries)
    with_glucose = [s for s in summaries if s.glucose_count > 0]
    with_curve = [s for s in summaries if s.has_curve]

    return PeriodSummary(
        days=days,
        avg_glucose=_mean(s.avg_glucose for s in with_glucose),
        time_in_range=_mean(s.time_in_range for s in with_curve),
        time_below_range=_mean(s.time_below_range for s in with_curve),
        time_above_range=_mean(s.time_above_range for s in with_curve),
        avg_readings_per_day=(
            sum(s.glucose_count for s in with_glucose) / days
            if with_glucose
            else None
        ),
        avg_rapid_per_day=_mean(s.rapid_units for s in summaries),
        avg_long_per_day=_mean(s.long_units for s in summaries),
        avg_carbs_per_day=(
            sum(s.total_carbs for s in summaries) / days if days else None
        ),
        total_exercise=sum(s.exercise_minutes for s in summaries),
        days_with_data=len(with_glucose),
    )


def curve_to_frame(day: date, points: Sequence[Point]) -> pd.DataFrame:
    """Day curve as a DataFrame (date, time, glucose, real flag)."""
    columns = ["date", "time", "glucose_mg_dl", "is_real", "real_mg_dl"]
    if not points:
        return pd.DataFrame(columns=columns)
    rows = [
        {
            "date": day,
            "time": p.time_str,
            "glucose_mg_dl": p.value,
            "is_real": p.is_real,
            "real_mg_dl": p.real_value,
        }
        for p in points
    ]
    return pd.DataFrame(rows, columns=columns)


def summaries_to_frame(summaries: Sequence[DaySummary]) -> pd.DataFrame:
    """Daily summaries as a DataFrame ordered by date."""
    columns = list(DaySummary.__dataclass_fields__)
    if not summaries:
        return pd.DataFrame(columns=columns)
    out = pd.DataFrame([asdict(s) for s in summaries], columns=columns)
    return out.sort_values("day").reset_index(drop=True)


def _mean(values: Iterable[float | None]) -> float | None:
    valid = [v for v in values if v is not None]
    if not valid:
        return None
    return sum(valid) / len(valid)
