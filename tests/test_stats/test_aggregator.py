"""Tests for point attribution into match and per-set stats."""

from tennis_tracker.core.schema import (
    FormatConfig, Player, PointEvent, RallyOutcome, ReturnOutcome, ServeType, Side,
)
from tennis_tracker.scoring.score import new_match_state, start_new_set
from tennis_tracker.stats.aggregator import StatsAggregator

A, B = Player.ONE, Player.TWO


def _record(event, server=A, was_break_point=False, state=None):
    state = state or new_match_state(FormatConfig(), "A", "B")
    winner = event.resolve_winner(server)
    StatsAggregator().record(state, event, server, winner, was_break_point)
    return state


class TestServe:
    def test_first_serve_ace(self):
        state = _record(PointEvent.ace())
        s = state.match_stats[A]
        assert s.first_serves_attempted == 1
        assert s.first_serves_in == 1
        assert s.aces_first == 1
        assert s.points_won_on_first_serve == 1
        assert s.points_won == 1

    def test_second_serve_ace_counts_first_fault(self):
        s = _record(PointEvent.ace(ServeType.SECOND)).match_stats[A]
        assert s.first_serves_attempted == 1
        assert s.first_serves_in == 0
        assert s.second_serves_in == 1
        assert s.aces_second == 1
        assert s.points_won_on_second_serve == 1

    def test_double_fault(self):
        state = _record(PointEvent.double_fault())
        server, receiver = state.match_stats[A], state.match_stats[B]
        assert server.double_faults == 1
        assert server.second_serves_attempted == 1
        assert server.second_serves_in == 0
        assert server.points_won == 0
        assert receiver.points_won == 1
        assert receiver.return_points_won_vs_second == 0

    def test_unknown_serve_type_skips_serve_counters(self):
        s = _record(PointEvent.ace(ServeType.NONE)).match_stats[A]
        assert s.aces == 0
        assert s.first_serves_attempted == 0
        assert s.points_won == 1


class TestReturnAndRally:
    def test_return_forced_error(self):
        state = _record(PointEvent.return_shot(ReturnOutcome.FORCED_ERROR, ServeType.SECOND))
        assert state.match_stats[B].return_forced_errors == 1
        assert state.match_stats[B].return_forced_errors_vs_second == 1
        assert state.match_stats[A].forced_errors_drawn == 1
        assert state.match_stats[A].points_won_on_second_serve == 1

    def test_return_winner(self):
        state = _record(PointEvent.return_shot(ReturnOutcome.WINNER))
        assert state.match_stats[B].return_winners_vs_first == 1
        assert state.match_stats[B].return_points_won_vs_first == 1

    def test_rally_unforced_error_to_hitter(self):
        state = _record(PointEvent.rally(Side.SERVER, RallyOutcome.UNFORCED_ERROR))
        assert state.match_stats[A].unforced_errors == 1
        assert state.match_stats[B].points_won == 1

    def test_rally_forced_error_drawn_by_opponent(self):
        state = _record(PointEvent.rally(Side.RETURNER, RallyOutcome.FORCED_ERROR))
        assert state.match_stats[A].forced_errors_drawn == 1
        assert state.match_stats[B].forced_errors_drawn == 0

    def test_rally_winner(self):
        state = _record(PointEvent.rally(Side.RETURNER, RallyOutcome.WINNER), server=B)
        assert state.match_stats[A].rally_winners == 1
        assert state.match_stats[A].return_points_won_vs_first == 1


class TestNetAndPressure:
    def test_net_point_won(self):
        state = _record(PointEvent.rally(Side.RETURNER, RallyOutcome.WINNER, net_player=B))
        assert state.match_stats[B].net_points_played == 1
        assert state.match_stats[B].net_points_won == 1

    def test_net_point_lost_still_counted(self):
        state = _record(PointEvent.rally(Side.RETURNER, RallyOutcome.WINNER, net_player=A))
        assert state.match_stats[A].net_points_played == 1
        assert state.match_stats[A].net_points_won == 0

    def test_break_point_converted(self):
        state = _record(PointEvent.double_fault(), was_break_point=True)
        assert state.match_stats[B].break_points_faced == 1
        assert state.match_stats[B].break_points_won == 1
        assert state.match_stats[A].break_points_faced == 0

    def test_break_point_saved(self):
        state = _record(PointEvent.ace(), was_break_point=True)
        assert state.match_stats[B].break_points_faced == 1
        assert state.match_stats[B].break_points_won == 0


class TestTotals:
    def test_points_played_for_both(self):
        state = _record(PointEvent.point_to(B))
        assert state.match_stats[A].points_played == 1
        assert state.match_stats[B].points_played == 1
        assert state.match_stats[B].points_won == 1

    def test_per_set_mirrors_match(self):
        state = _record(PointEvent.ace())
        assert state.set_stats[0][A] == state.match_stats[A]
        assert state.set_stats[0][B] == state.match_stats[B]

    def test_current_set_slot_only(self):
        state = new_match_state(FormatConfig(), "A", "B")
        _record(PointEvent.ace(), state=state)
        start_new_set(state)
        _record(PointEvent.ace(), state=state)
        assert state.set_stats[0][A].aces_first == 1
        assert state.set_stats[1][A].aces_first == 1
        assert state.match_stats[A].aces_first == 2
