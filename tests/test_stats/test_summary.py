"""Tests for stats summary tables."""

import math

from tennis_tracker.core.schema import Player, PointEvent, PlayerStats, RallyOutcome, Side, get_format
from tennis_tracker.orchestration.controller import MatchController
from tennis_tracker.stats.summary import (
    COUNTER_NAMES, RATES, counters_frame, match_totals_frame, per_set_frame,
    point_log_frame, rate_frame, ratio, safe_percent, summary_frame, summary_lines,
)

A, B = Player.ONE, Player.TWO
NAMES = {A: "Ana", B: "Bea"}


def _make_snapshot():
    ctl = MatchController(get_format(1), "Ana", "Bea")
    ctl.apply_point(PointEvent.ace())
    ctl.apply_point(PointEvent.double_fault())
    ctl.apply_point(PointEvent.rally(Side.RETURNER, RallyOutcome.WINNER, net_player=B))
    return ctl.snapshot()


class TestPercentages:
    def test_zero_denominator(self):
        assert safe_percent(0, 0) == "--"

    def test_percent(self):
        assert safe_percent(3, 4) == "75.0%"

    def test_ratio(self):
        assert ratio(12, 20) == "12/20 (60.0%)"
        assert ratio(0, 0) == "0/0 (--)"


class TestSummaryLines:
    def test_order_and_values(self):
        s = PlayerStats(first_serves_attempted=4, first_serves_in=3, double_faults=2)
        lines = summary_lines(s)
        assert list(lines)[0] == "First serve"
        assert lines["First serve"] == "3/4 (75.0%)"
        assert lines["Double faults"] == "2"
        assert lines["Net points"] == "0/0 (--)"

    def test_summary_frame_columns(self):
        snap = _make_snapshot()
        df = summary_frame(snap.state.match_stats, NAMES)
        assert list(df.columns) == ["Ana", "Bea"]
        assert df.loc["Total points", "Bea"] == "2/3 (66.7%)"


class TestFrames:
    def test_counters_frame(self):
        snap = _make_snapshot()
        df = counters_frame(snap.state.match_stats, NAMES)
        assert list(df.index) == ["Ana", "Bea"]
        assert df.index.name == "player"
        assert list(df.columns) == COUNTER_NAMES
        assert df.loc["Ana", "aces_first"] == 1
        assert df.loc["Bea", "net_points_won"] == 1

    def test_rate_frame_nan_when_undefined(self):
        snap = _make_snapshot()
        rates = rate_frame(counters_frame(snap.state.match_stats, NAMES))
        assert list(rates.columns) == list(RATES)
        assert rates.loc["Ana", "first_serve_pct"] == 66.7
        assert math.isnan(rates.loc["Bea", "first_serve_pct"])

    def test_match_totals_has_counters_and_rates(self):
        df = match_totals_frame(_make_snapshot())
        assert "points_won" in df.columns
        assert "points_won_pct" in df.columns

    def test_per_set_long_format(self):
        df = per_set_frame(_make_snapshot())
        assert list(df.columns[:2]) == ["set", "player"]
        assert list(df["set"]) == [1, 1]
        assert list(df["player"]) == ["Ana", "Bea"]

    def test_point_log_frame(self):
        snap = _make_snapshot()
        df = point_log_frame(snap.log, snap.player_names)
        assert len(df) == 3
        assert list(df["idx"]) == [1, 2, 3]
        assert list(df["winner"]) == ["Ana", "Bea", "Bea"]
        assert df.loc[1, "serve_type"] == "2nd"

    def test_point_log_frame_empty(self):
        df = point_log_frame((), NAMES)
        assert df.empty
        assert "event" in df.columns
