"""Clases base para fuentes de registros."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from glucemia_tool.model import Event


@dataclass(frozen=True)
class SourcePaths:
    """Directory holding the exported files."""

    root: Path


class EventSource(ABC):
    """Abstract source of logged events."""

    pattern: str = "*.json"

    def __init__(self, paths: SourcePaths) -> None:
        """Create an event source.

        Args:
            paths: Source paths configuration.
        """
        self._paths = paths

    def validate(self) -> None:
        """Validate that the export directory exists.

        Raises:
            FileNotFoundError: If the directory is missing.
        """
        if not self._paths.root.exists():
            raise FileNotFoundError(str(self._paths.root))

    def newest_export(self) -> Path:
        """Return the newest file matching ``pattern`` by mtime."""
        files = sorted(
            self._paths.root.glob(self.pattern),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )
        if not files:
            raise FileNotFoundError(f"No {self.pattern} in {self._paths.root}")
        return files[0]

    @abstractmethod
    def load_events(self, path: Path) -> Sequence[Event]:
        """Parse one export into typed events.

        Raises:
            ValueError: If the export shape is invalid.
        """
