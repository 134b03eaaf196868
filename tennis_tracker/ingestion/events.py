"""
Point-event CSV loader for replaying a match.

One row per point, in order. Columns (alternative spellings accepted):
  serve           1st | 2nd | -            (default 1st)
  serve_outcome   in | ace | service_winner | double_fault   (default in)
  return_outcome  in | winner | unforced_error | forced_error
  rally_outcome   winner | unforced_error | forced_error
  rally_side      server | returner       (who hit the rally-ending shot)
  net             1 | 2                   (player marked at net)
  winner          1 | 2                   (only for points with no decisive outcome)
  description     free text
"""

import logging
from pathlib import Path

import pandas as pd

from tennis_tracker.core.interfaces import BaseLoader
from tennis_tracker.core.schema import (
    Player, PointEvent, RallyOutcome, ReturnOutcome, ServeOutcome, ServeType, Side,
)
from tennis_tracker.ingestion.base import find_column, get_value, safe_int, safe_str

log = logging.getLogger(__name__)

COLUMNS = {
    "serve": ["serve", "serve_type", "Serve", "ServeType"],
    "serve_outcome": ["serve_outcome", "ServeOutcome", "serve_result"],
    "return_outcome": ["return_outcome", "ReturnOutcome", "return"],
    "rally_outcome": ["rally_outcome", "RallyOutcome", "rally"],
    "rally_side": ["rally_side", "RallySide", "rally_by"],
    "net": ["net", "net_player", "Net"],
    "winner": ["winner", "Winner", "point_winner"],
    "description": ["description", "event", "Event"],
}

SERVE_MAP = {
    "1st": ServeType.FIRST, "1": ServeType.FIRST, "first": ServeType.FIRST,
    "2nd": ServeType.SECOND, "2": ServeType.SECOND, "second": ServeType.SECOND,
    "-": ServeType.NONE, "none": ServeType.NONE,
}

PLAYER_MAP = {1: Player.ONE, 2: Player.TWO}


def _enum_or_none(enum_cls, raw: str):
    if not raw:
        return None
    try:
        return enum_cls(raw)
    except ValueError:
        raise ValueError(f"unknown {enum_cls.__name__} '{raw}'")


def parse_event_row(row: pd.Series) -> PointEvent:
    """Build a PointEvent from one CSV row. Raises ValueError on bad codes."""
    raw_serve = safe_str(get_value(row, COLUMNS["serve"]), "1st")
    if raw_serve not in SERVE_MAP:
        raise ValueError(f"unknown serve '{raw_serve}'")

    serve_outcome = _enum_or_none(
        ServeOutcome, safe_str(get_value(row, COLUMNS["serve_outcome"]))
    ) or ServeOutcome.IN_PLAY
    net = get_value(row, COLUMNS["net"])
    winner = get_value(row, COLUMNS["winner"])
    description = get_value(row, COLUMNS["description"])

    return PointEvent(
        serve=SERVE_MAP[raw_serve],
        serve_outcome=serve_outcome,
        return_outcome=_enum_or_none(ReturnOutcome, safe_str(get_value(row, COLUMNS["return_outcome"]))),
        rally_outcome=_enum_or_none(RallyOutcome, safe_str(get_value(row, COLUMNS["rally_outcome"]))),
        rally_side=_enum_or_none(Side, safe_str(get_value(row, COLUMNS["rally_side"]))),
        net_player=PLAYER_MAP.get(safe_int(net)) if net is not None else None,
        winner=PLAYER_MAP.get(safe_int(winner)) if winner is not None else None,
        description=str(description).strip() if description is not None else "",
    )


class EventLoader(BaseLoader):
    """Loads a point-event CSV into PointEvent objects."""

    def __init__(self, csv_path: str):
        self.csv_path = Path(csv_path)
        self.skipped: list[str] = []

    def load(self) -> list[PointEvent]:
        if not self.csv_path.exists():
            raise FileNotFoundError(f"Event file not found: {self.csv_path}")

        df = pd.read_csv(self.csv_path, dtype=str, keep_default_na=False)
        present = {key: find_column(df, names) for key, names in COLUMNS.items()}
        if not any(present[k] for k in ("serve_outcome", "return_outcome", "rally_outcome", "winner")):
            raise ValueError(f"{self.csv_path}: no outcome or winner column")
        log.debug("Event columns: " + ", ".join(f"{k}={v}" for k, v in present.items() if v))

        events = []
        self.skipped = []
        for i, row in df.iterrows():
            try:
                events.append(parse_event_row(row))
            except ValueError as e:
                msg = f"row {i + 2}: {e}"
                self.skipped.append(msg)
                log.warning(f"Skipping event {msg}")

        log.info(f"Loaded {len(events)} point events from {self.csv_path}")
        return events

    def validate(self, events: list[PointEvent]) -> list[str]:
        warnings = list(self.skipped)
        if not events:
            warnings.append(f"{self.csv_path}: no point events")
        for i, e in enumerate(events):
            if e.serve is ServeType.NONE and e.serve_outcome in (ServeOutcome.ACE, ServeOutcome.SERVICE_WINNER):
                warnings.append(f"event {i + 1}: {e.serve_outcome.value} with unknown serve is not counted")
        return warnings
