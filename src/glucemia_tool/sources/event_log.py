"""Lectura de exportaciones JSON del registro diario (glucosa, comidas, etc.)."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from glucemia_tool.model import (
    Event,
    Exercise,
    GlucoseReading,
    InsulinDose,
    Meal,
    parse_insulin_kind,
    parse_intensity,
)
from glucemia_tool.sources.base import EventSource, SourcePaths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventLogPaths(SourcePaths):
    """Paths for event log exports."""

    # root: folder containing registros_*.json


class EventLogSource(EventSource):
    """Event log JSON source (rows tagged with ``entry_type``)."""

    pattern = "registros_*.json"

    def load_events(self, path: Path) -> list[Event]:
        """Parse an event log export into typed events.

        Args:
            path: Path to JSON file.

        Returns:
            Events ordered by timestamp text.

        Raises:
            ValueError: If JSON shape is invalid.
        """
        text = path.read_text(encoding="utf-8")
        raw = _extract_json_list(text)
        if not isinstance(raw, list):
            raise ValueError("Event log JSON must be a list")

        out: list[Event] = []
        for item in raw:
            event = row_to_event(item)
            if event is None:
                logger.warning("Skipping unparseable row in %s: %r", path.name, item)
                continue
            out.append(event)
        out.sort(key=lambda e: e.timestamp)
        logger.info("Loaded %d events from %s", len(out), path)
        return out


def row_to_event(item: Any) -> Event | None:
    """Convert one loosely typed row into an event; None if unusable."""
    if not isinstance(item, dict):
        return None
    timestamp = item.get("timestamp")
    if not isinstance(timestamp, str) or not timestamp.strip():
        return None

    entry_type = str(item.get("entry_type", "")).strip().lower()
    if entry_type == "glucose":
        value = _to_number(item.get("value"))
        if value is None:
            return None
        return GlucoseReading(timestamp=timestamp, value=value)
    if entry_type == "meal":
        return Meal(
            timestamp=timestamp, carbs_grams=_to_number(item.get("carbs_grams"))
        )
    if entry_type == "insulin":
        return InsulinDose(
            timestamp=timestamp,
            units=_to_number(item.get("units")),
            kind=parse_insulin_kind(item.get("insulin_type")),
        )
    if entry_type == "exercise":
        return Exercise(
            timestamp=timestamp,
            duration_minutes=_to_number(item.get("duration_minutes")),
            intensity=parse_intensity(item.get("intensity")),
        )
    return None


def _to_number(raw: Any) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def _extract_json_list(text: str) -> Any:
    """Extract JSON array from text, tolerating leading non-JSON (e.g. log lines)."""
    start = text.find("[")
    if start >= 0:
        return json.loads(text[start:])
    return json.loads(text)
