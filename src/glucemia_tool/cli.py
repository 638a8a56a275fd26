"""CLI para estimar la curva de glucosa diaria y exportar el resumen a Excel."""

from __future__ import annotations

import argparse
import logging
from datetime import date, datetime
from pathlib import Path

import pandas as pd
from dateutil import tz

from glucemia_tool.config import EstimatorConfig, load_settings
from glucemia_tool.curve import DEFAULT_INTERVAL_MINUTES, generate_day_curve
from glucemia_tool.excel_writer import ExcelLayout, write_glucose_xlsx
from glucemia_tool.sources.event_log import EventLogPaths, EventLogSource
from glucemia_tool.stats import (
    curve_to_frame,
    date_range,
    group_events_by_day,
    period_summaries,
    period_summary,
    summaries_to_frame,
)

_LOCAL_TZ = tz.gettz("America/Argentina/Buenos_Aires")

logger = logging.getLogger(__name__)


def _positive_int(raw: str) -> int:
    """Argparse type for strictly positive integers."""
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"no es un entero: {raw!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"debe ser mayor que 0: {value}")
    return value


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description=(
            "Curva de glucosa estimada (ilustrativa, no apta para dosificar) "
            "y resumen por período."
        )
    )
    parser.add_argument(
        "--base-dir",
        default=str(Path.home() / "proyectos" / "glucemia"),
        help="Directorio base (default: ~/proyectos/glucemia).",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=7,
        help="Cantidad de días del período, terminando en --end-date.",
    )
    parser.add_argument(
        "--end-date",
        type=date.fromisoformat,
        default=None,
        help="Último día del período, YYYY-MM-DD (default: hoy).",
    )
    parser.add_argument(
        "--interval",
        type=_positive_int,
        default=DEFAULT_INTERVAL_MINUTES,
        help="Minutos entre puntos de la curva exportada (default: 15).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log de depuración.",
    )
    return parser.parse_args()


def main() -> int:
    """Run the estimation CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    base = Path(ns.base_dir).expanduser().resolve()

    source = EventLogSource(EventLogPaths(root=base / "registros"))
    source.validate()
    log_file = source.newest_export()
    events = source.load_events(log_file)

    config = EstimatorConfig.from_settings(load_settings(base / "ajustes.json"))
    logger.debug("Estimator config: %s", config)

    end = ns.end_date or datetime.now(tz=_LOCAL_TZ).date()
    events_by_day = group_events_by_day(events)
    summaries = period_summaries(events_by_day, config, end=end, days=ns.days)
    period = period_summary(summaries)

    curve_frames = []
    for day in date_range(end, ns.days):
        points = generate_day_curve(events_by_day.get(day, []), config, ns.interval)
        if points:
            curve_frames.append(curve_to_frame(day, points))
    curve_df = (
        pd.concat(curve_frames, ignore_index=True)
        if curve_frames
        else curve_to_frame(end, [])
    )

    out_dir = base / "salidas"
    ts = datetime.now(tz=_LOCAL_TZ).strftime("%Y-%m-%d_%H-%M-%S")
    out_path = out_dir / f"glucemia_resumen_{ts}.xlsx"

    write_glucose_xlsx(summaries_to_frame(summaries), curve_df, out_path, ExcelLayout())

    print(f"OK: Event log: {log_file}")
    print(f"OK: Days with data: {period.days_with_data}/{period.days}")
    if period.avg_glucose is not None:
        print(f"OK: Average glucose: {period.avg_glucose:.1f} mg/dL")
    if period.time_in_range is not None:
        print(f"OK: Time in range: {period.time_in_range:.0%}")
    print(f"OK: Output: {out_path}")
    return 0
