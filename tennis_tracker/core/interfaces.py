"""
Abstract base classes defining contracts between modules.

Loaders feed point events into the controller; exporters consume the
read-only snapshot it hands out. Neither side touches scoring state.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from tennis_tracker.core.schema import MatchSnapshot, PointEvent


class BaseLoader(ABC):
    """Contract: raw file → list[PointEvent]."""

    @abstractmethod
    def load(self) -> list[PointEvent]:
        """Load and return validated point events."""
        ...

    @abstractmethod
    def validate(self, events: list[PointEvent]) -> list[str]:
        """Return list of validation warnings (empty = clean)."""
        ...


class BaseExporter(ABC):
    """Contract: MatchSnapshot → file on disk."""

    suffix: str = ""

    @abstractmethod
    def export(self, snapshot: MatchSnapshot, output_dir: Path, base_name: str) -> list[str]:
        """Write the snapshot. Return paths of the files written."""
        ...
