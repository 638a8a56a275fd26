"""Perfil de configuracion del estimador y lectura de ajustes."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_CARB_RATIO = 3.0
DEFAULT_RAPID_SENSITIVITY = 30.0
DEFAULT_LONG_SENSITIVITY_PER_HOUR = 0.5
DEFAULT_TARGET_MIN = 80.0
DEFAULT_TARGET_MAX = 130.0


@dataclass(frozen=True)
class EstimatorConfig:
    """Physiological profile used by the estimator.

    ``target_min``/``target_max`` only matter to the summaries, never to the
    effect models.
    """

    carb_ratio: float = DEFAULT_CARB_RATIO
    rapid_sensitivity: float = DEFAULT_RAPID_SENSITIVITY
    long_sensitivity_per_hour: float = DEFAULT_LONG_SENSITIVITY_PER_HOUR
    target_min: float = DEFAULT_TARGET_MIN
    target_max: float = DEFAULT_TARGET_MAX

    @classmethod
    def from_settings(cls, settings: Mapping[str, object] | None) -> EstimatorConfig:
        """Build a profile from a flat settings mapping.

        Values may be numbers or numeric strings. Absent, zero or
        non-numeric sensitivities fall back to the defaults; target bounds
        accept zero but fall back when absent or non-numeric.

        Args:
            settings: Key/value settings as read from storage.

        Returns:
            Frozen estimator configuration.
        """
        values = dict(settings or {})
        return cls(
            carb_ratio=_setting(values, "carb_ratio", DEFAULT_CARB_RATIO),
            rapid_sensitivity=_setting(
                values, "rapid_sensitivity", DEFAULT_RAPID_SENSITIVITY
            ),
            long_sensitivity_per_hour=_setting(
                values,
                "long_sensitivity_per_hour",
                DEFAULT_LONG_SENSITIVITY_PER_HOUR,
            ),
            target_min=_setting(
                values, "target_min", DEFAULT_TARGET_MIN, allow_zero=True
            ),
            target_max=_setting(
                values, "target_max", DEFAULT_TARGET_MAX, allow_zero=True
            ),
        )


def load_settings(path: Path) -> dict[str, object]:
    """Read a JSON settings object; missing file means defaults.

    Args:
        path: Path to ``ajustes.json``.

    Returns:
        Flat settings mapping (empty when missing or invalid).
    """
    if not path.exists():
        return {}
    try:
        parsed: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        logger.warning("Invalid settings JSON in %s, using defaults", path)
        return {}
    if not isinstance(parsed, dict):
        logger.warning("Settings in %s are not a JSON object, using defaults", path)
        return {}
    return {str(key): value for key, value in parsed.items()}


def _setting(
    values: Mapping[str, object],
    key: str,
    default: float,
    *,
    allow_zero: bool = False,
) -> float:
    raw = values.get(key)
    if raw is None or isinstance(raw, bool):
        return default
    try:
        number = float(str(raw).strip())
    except ValueError:
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    if number == 0 and not allow_zero:
        return default
    return number
