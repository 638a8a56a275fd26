"""Tests for CLI entrypoints."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, cast

import pandas as pd
import pytest

from glucemia_tool import cli
from glucemia_tool.model import Event, GlucoseReading, InsulinDose, InsulinKind, Meal


@dataclass(frozen=True)
class _Args:
    base_dir: str
    days: int
    end_date: date | None
    interval: int
    verbose: bool = False


def test_parse_args_custom_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "sys.argv",
        [
            "prog",
            "--base-dir",
            "/tmp/base",
            "--days",
            "10",
            "--end-date",
            "2025-03-03",
            "--interval",
            "5",
            "-v",
        ],
    )
    ns = cli.parse_args()
    assert ns.base_dir == "/tmp/base"
    assert ns.days == 10
    assert ns.end_date == date(2025, 3, 3)
    assert ns.interval == 5
    assert ns.verbose is True


def test_parse_args_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.argv", ["prog"])
    ns = cli.parse_args()
    assert ns.days == 7
    assert ns.end_date is None
    assert ns.interval == 15


@pytest.mark.parametrize("value", ["0", "-15", "abc"])
def test_parse_args_rejects_non_positive_interval(
    monkeypatch: pytest.MonkeyPatch, value: str
) -> None:
    monkeypatch.setattr("sys.argv", ["prog", "--interval", value])
    with pytest.raises(SystemExit) as exc:
        cli.parse_args()
    assert exc.value.code == 2


def test_main_happy_path(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    class _EventLogSource:
        def __init__(self, paths: Any) -> None:
            self.paths = paths

        def validate(self) -> None:
            return None

        def newest_export(self) -> Path:
            return Path("registros.json")

        def load_events(self, _: Path) -> list[Event]:
            return [
                GlucoseReading("2025-03-02T21:00:00.000Z", 150),
                Meal("2025-03-03T07:30:00.000Z", 35),
                GlucoseReading("2025-03-03T07:05:00.000Z", 103),
                InsulinDose("2025-03-03T07:40:00.000Z", 4, InsulinKind.RAPID),
            ]

    captured: dict[str, object] = {}

    def _write_glucose_xlsx(
        summary_df: pd.DataFrame, curve_df: pd.DataFrame, out_path: Path, _: Any
    ) -> None:
        captured["summary_df"] = summary_df
        captured["curve_df"] = curve_df
        captured["out_path"] = out_path

    class _FixedDatetime(datetime):
        @classmethod
        def now(cls, tz: Any | None = None) -> _FixedDatetime:
            return cls(2025, 3, 3, 23, 59, 1, tzinfo=tz)

    (tmp_path / "ajustes.json").write_text(
        json.dumps({"target_max": "140"}), encoding="utf-8"
    )
    monkeypatch.setattr(
        cli, "parse_args", lambda: _Args(str(tmp_path), 3, date(2025, 3, 3), 30)
    )
    monkeypatch.setattr(cli, "EventLogSource", _EventLogSource)
    monkeypatch.setattr(cli, "write_glucose_xlsx", _write_glucose_xlsx)
    monkeypatch.setattr(cli, "datetime", _FixedDatetime)

    code = cli.main()
    assert code == 0

    summary_df = cast(pd.DataFrame, captured["summary_df"])
    curve_df = cast(pd.DataFrame, captured["curve_df"])
    out_path = cast(Path, captured["out_path"])
    assert list(summary_df["day"]) == [
        date(2025, 3, 1),
        date(2025, 3, 2),
        date(2025, 3, 3),
    ]
    assert list(summary_df["glucose_count"]) == [0, 1, 1]
    assert set(curve_df["date"]) == {date(2025, 3, 2), date(2025, 3, 3)}
    assert curve_df["is_real"].sum() == 2
    assert out_path.name == "glucemia_resumen_2025-03-03_23-59-01.xlsx"
    assert out_path.parent == tmp_path.resolve() / "salidas"


def test_main_propagates_validation_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    class _EventLogSource:
        def __init__(self, paths: Any) -> None:
            self.paths = paths

        def validate(self) -> None:
            raise FileNotFoundError("missing")

    monkeypatch.setattr(cli, "parse_args", lambda: _Args(str(tmp_path), 7, None, 15))
    monkeypatch.setattr(cli, "EventLogSource", _EventLogSource)

    with pytest.raises(FileNotFoundError):
        cli.main()
