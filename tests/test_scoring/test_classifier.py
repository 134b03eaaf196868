"""Tests for pre-point significance flags."""

import pytest

from tennis_tracker.core.schema import FormatConfig, Player
from tennis_tracker.scoring.classifier import (
    PointSignificance, classify, is_break_point_if_receiver_wins,
    is_game_point_for, is_match_point_if_player_wins, is_set_point_if_player_wins,
)
from tennis_tracker.scoring.score import new_match_state


def _make_state(points=(0, 0), games=(0, 0), sets_won=(0, 0), server=Player.ONE):
    state = new_match_state(FormatConfig(), "A", "B", "", server)
    state.game_points = {Player.ONE: points[0], Player.TWO: points[1]}
    state.current_set.games = {Player.ONE: games[0], Player.TWO: games[1]}
    state.sets_won = {Player.ONE: sets_won[0], Player.TWO: sets_won[1]}
    return state


class TestGamePoint:
    @pytest.mark.parametrize("leader,trailer,expected", [
        (3, 0, True),
        (3, 2, True),
        (2, 0, False),
        (3, 3, False),
        (4, 3, True),
        (6, 5, True),
        (4, 4, False),
        (3, 4, False),
    ])
    def test_is_game_point_for(self, leader, trailer, expected):
        assert is_game_point_for(leader, trailer) is expected


class TestBreakPoint:
    def test_receiver_at_forty(self):
        assert is_break_point_if_receiver_wins(_make_state(points=(1, 3)))

    def test_server_at_forty(self):
        assert not is_break_point_if_receiver_wins(_make_state(points=(3, 1)))

    def test_receiver_advantage(self):
        assert is_break_point_if_receiver_wins(_make_state(points=(4, 5)))

    def test_follows_server(self):
        assert is_break_point_if_receiver_wins(_make_state(points=(3, 0), server=Player.TWO))


class TestSetAndMatchPoint:
    def test_set_point_at_five_three(self):
        state = _make_state(points=(3, 0), games=(5, 3))
        assert is_set_point_if_player_wins(state, Player.ONE)
        assert not is_set_point_if_player_wins(state, Player.TWO)

    def test_no_set_point_at_five_all(self):
        assert not is_set_point_if_player_wins(_make_state(points=(3, 0), games=(5, 5)), Player.ONE)

    def test_set_point_at_six_five(self):
        assert is_set_point_if_player_wins(_make_state(points=(3, 0), games=(6, 5)), Player.ONE)

    def test_no_set_point_without_game_point(self):
        assert not is_set_point_if_player_wins(_make_state(points=(2, 0), games=(5, 0)), Player.ONE)

    def test_match_point_needs_one_set(self):
        state = _make_state(points=(3, 0), games=(5, 0))
        assert not is_match_point_if_player_wins(state, Player.ONE)
        state.sets_won[Player.ONE] = 1
        assert is_match_point_if_player_wins(state, Player.ONE)


class TestClassify:
    def test_all_flags(self):
        state = _make_state(points=(0, 3), games=(0, 5), sets_won=(0, 1))
        assert classify(state) == PointSignificance(
            break_point=True, game_point=True, set_point=True, match_point=True,
        )

    def test_plain_point(self):
        assert classify(_make_state()) == PointSignificance()

    def test_tiebreak_points_carry_no_flags(self):
        state = _make_state(games=(6, 6), sets_won=(1, 0))
        state.in_set_tiebreak = True
        state.tiebreak_points = {Player.ONE: 6, Player.TWO: 2}
        assert classify(state) == PointSignificance()
        assert not is_set_point_if_player_wins(state, Player.ONE)
