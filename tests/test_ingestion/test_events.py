"""Tests for the point-event CSV loader."""

import pandas as pd
import pytest

from tennis_tracker.core.schema import (
    Player, RallyOutcome, ReturnOutcome, ServeOutcome, ServeType, Side,
)
from tennis_tracker.ingestion.base import find_column, get_value, safe_int, safe_str
from tennis_tracker.ingestion.events import EventLoader, parse_event_row

CSV = """serve,serve_outcome,return_outcome,rally_outcome,rally_side,net,winner,description
1st,ace,,,,,,
2nd,double_fault,,,,,,
1st,in,in,winner,returner,2,,
1st,in,winner,,,,,
1st,bogus,,,,,,
-,,,,,,1,manual
"""


def _write(tmp_path, text=CSV):
    p = tmp_path / "points.csv"
    p.write_text(text)
    return str(p)


class TestHelpers:
    def test_find_column(self):
        df = pd.DataFrame(columns=["Winner", "event"])
        assert find_column(df, ["winner", "Winner"]) == "Winner"
        assert find_column(df, ["serve"]) is None

    def test_get_value_skips_blank(self):
        row = pd.Series({"a": "", "b": "x"})
        assert get_value(row, ["a", "b"]) == "x"
        assert get_value(row, ["c"]) is None

    def test_safe_int(self):
        assert safe_int("2") == 2
        assert safe_int("2.0") == 2
        assert safe_int("x", default=-1) == -1
        assert safe_int(None) == 0

    def test_safe_str(self):
        assert safe_str(" ACE ") == "ace"
        assert safe_str(None, "1st") == "1st"


class TestParseEventRow:
    def test_rally_row(self):
        row = pd.Series({"serve": "2nd", "rally_outcome": "forced_error",
                         "rally_side": "server", "net": "1"})
        e = parse_event_row(row)
        assert e.serve is ServeType.SECOND
        assert e.return_outcome is None
        assert e.rally_outcome is RallyOutcome.FORCED_ERROR
        assert e.rally_side is Side.SERVER
        assert e.net_player is Player.ONE

    def test_alternative_headers(self):
        row = pd.Series({"serve_type": "first", "return": "unforced_error"})
        e = parse_event_row(row)
        assert e.serve is ServeType.FIRST
        assert e.return_outcome is ReturnOutcome.UNFORCED_ERROR

    def test_unknown_serve(self):
        with pytest.raises(ValueError, match="unknown serve"):
            parse_event_row(pd.Series({"serve": "3rd", "winner": "1"}))

    def test_structurally_invalid(self):
        with pytest.raises(ValueError, match="double fault"):
            parse_event_row(pd.Series({"serve": "1st", "serve_outcome": "double_fault"}))


class TestEventLoader:
    def test_load(self, tmp_path):
        events = EventLoader(_write(tmp_path)).load()
        assert len(events) == 5
        assert events[0].serve_outcome is ServeOutcome.ACE
        assert events[1].serve_outcome is ServeOutcome.DOUBLE_FAULT
        assert events[2].net_player is Player.TWO
        assert events[2].return_outcome is ReturnOutcome.IN_PLAY
        assert events[3].return_outcome is ReturnOutcome.WINNER
        assert events[4].serve is ServeType.NONE
        assert events[4].winner is Player.ONE
        assert events[4].description == "manual"

    def test_bad_row_skipped_with_warning(self, tmp_path, caplog):
        loader = EventLoader(_write(tmp_path))
        with caplog.at_level("WARNING"):
            events = loader.load()
        assert "ServeOutcome 'bogus'" in caplog.text
        warnings = loader.validate(events)
        assert len(warnings) == 1
        assert warnings[0].startswith("row 6:")

    def test_validate_flags_unknown_serve_ace(self, tmp_path):
        path = _write(tmp_path, "serve,serve_outcome\n-,ace\n")
        loader = EventLoader(path)
        warnings = loader.validate(loader.load())
        assert warnings == ["event 1: ace with unknown serve is not counted"]

    def test_validate_empty(self, tmp_path):
        loader = EventLoader(_write(tmp_path, "serve,winner\n"))
        warnings = loader.validate(loader.load())
        assert any("no point events" in w for w in warnings)

    def test_no_outcome_columns(self, tmp_path):
        with pytest.raises(ValueError, match="no outcome or winner column"):
            EventLoader(_write(tmp_path, "serve,description\n1st,x\n")).load()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Event file not found"):
            EventLoader(str(tmp_path / "missing.csv")).load()
