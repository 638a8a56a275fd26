"""Tests for the anchored point estimator."""

from __future__ import annotations

import pytest

from glucemia_tool.config import EstimatorConfig
from glucemia_tool.estimator import clamp_glucose, estimate_at, ts_to_minutes
from glucemia_tool.model import (
    Event,
    Exercise,
    GlucoseReading,
    InsulinDose,
    InsulinKind,
    Intensity,
    Meal,
)


def _ts(hh: int, mm: int) -> str:
    return f"2025-03-03T{hh:02d}:{mm:02d}:00.000Z"


def _normal_day() -> list[Event]:
    return [
        GlucoseReading(_ts(7, 0), 118),
        Meal(_ts(7, 25), 45),
        InsulinDose(_ts(7, 35), 5, InsulinKind.RAPID),
        InsulinDose(_ts(8, 0), 20, InsulinKind.LONG),
        GlucoseReading(_ts(12, 0), 92),
        Exercise(_ts(18, 0), 40, Intensity.MODERATE),
        GlucoseReading(_ts(21, 30), 131),
    ]


def test_ts_to_minutes_reads_hh_mm_digits() -> None:
    assert ts_to_minutes("2024-01-15T14:30:00.000Z") == 870
    assert ts_to_minutes("2024-01-15 07:05") == 425
    assert ts_to_minutes("2024-01-15T00:00:00+05:00") == 0


def test_ts_to_minutes_invalid_is_zero() -> None:
    assert ts_to_minutes("") == 0
    assert ts_to_minutes(None) == 0
    assert ts_to_minutes("14:30") == 0
    assert ts_to_minutes("2024-01-15Txx:30:00") == 0


def test_clamp_glucose() -> None:
    assert clamp_glucose(5) == 20
    assert clamp_glucose(120) == 120
    assert clamp_glucose(900) == 600


def test_empty_events_returns_none() -> None:
    assert estimate_at([], 600, EstimatorConfig()) is None


def test_without_readings_returns_none() -> None:
    events: list[Event] = [Meal(_ts(8, 0), 40)]
    assert estimate_at(events, 600, EstimatorConfig()) is None


def test_before_first_reading_returns_none() -> None:
    assert estimate_at(_normal_day(), 419, EstimatorConfig()) is None


def test_pure_linear_interpolation_between_readings() -> None:
    events: list[Event] = [
        GlucoseReading(_ts(0, 0), 100),
        GlucoseReading(_ts(2, 0), 140),
    ]
    assert estimate_at(events, 60, EstimatorConfig()) == 120


def test_anchor_value_is_reproduced_exactly() -> None:
    events = _normal_day()
    config = EstimatorConfig(carb_ratio=4, rapid_sensitivity=35)
    assert estimate_at(events, 420, config) == 118
    assert estimate_at(events, 720, config) == 92
    assert estimate_at(events, 1290, config) == 131


def test_effects_before_anchor_are_not_double_counted() -> None:
    events: list[Event] = [
        Meal(_ts(6, 0), 30),
        GlucoseReading(_ts(7, 0), 150),
    ]
    # meal effect goes from its 90 mg/dL peak at 07:00 down to 45 at 08:00
    assert estimate_at(events, 480, EstimatorConfig()) == pytest.approx(105.0)


def test_forward_simulation_after_last_reading() -> None:
    events: list[Event] = [
        GlucoseReading(_ts(8, 0), 100),
        Meal(_ts(8, 0), 20),
    ]
    assert estimate_at(events, 540, EstimatorConfig()) == pytest.approx(160.0)


def test_autocorrection_blends_error_toward_next_reading() -> None:
    events: list[Event] = [
        GlucoseReading(_ts(0, 0), 100),
        Meal(_ts(0, 0), 20),
        GlucoseReading(_ts(3, 0), 130),
    ]
    # model alone: 160 at 01:00 and 100 at 03:00 (error +30 at the next reading)
    assert estimate_at(events, 60, EstimatorConfig()) == pytest.approx(170.0)
    assert estimate_at(events, 179, EstimatorConfig()) == pytest.approx(130.0, abs=1)


def test_values_are_clamped() -> None:
    low: list[Event] = [
        GlucoseReading(_ts(8, 0), 50),
        InsulinDose(_ts(8, 0), 10, InsulinKind.RAPID),
    ]
    assert estimate_at(low, 570, EstimatorConfig()) == 20
    high: list[Event] = [
        GlucoseReading(_ts(8, 0), 550),
        Meal(_ts(8, 0), 100),
    ]
    assert estimate_at(high, 540, EstimatorConfig()) == 600


def test_every_estimate_in_range() -> None:
    events = _normal_day()
    values = [estimate_at(events, m, EstimatorConfig()) for m in range(420, 1441, 5)]
    assert all(v is not None and 20 <= v <= 600 for v in values)
