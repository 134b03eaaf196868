"""
Set tiebreak and match tiebreak-10.

Service follows the 1-2-2 pattern: with 0-based index i of points already
played, the opening server serves when i % 4 is 0 or 3.
"""

import logging
from typing import Optional

from tennis_tracker.core.schema import MatchState, Player, SetRecord
from tennis_tracker.scoring.score import ScoreUpdate, close_set

log = logging.getLogger(__name__)

ENDS_CHANGE_EVERY = 6


def tiebreak_server(start_server: Player, points_played: int) -> Player:
    return start_server if points_played % 4 in (0, 3) else start_server.other


def ends_change_in_tiebreak(points_played: int) -> bool:
    return points_played > 0 and points_played % ENDS_CHANGE_EVERY == 0


def tiebreak_winner(points: dict[Player, int], target: int) -> Optional[Player]:
    p1, p2 = points[Player.ONE], points[Player.TWO]
    if (p1 >= target or p2 >= target) and abs(p1 - p2) >= 2:
        return Player.ONE if p1 > p2 else Player.TWO
    return None


def tiebreak_target(state: MatchState) -> int:
    if state.in_match_tiebreak10:
        return state.format.decider_tiebreak_points
    return state.format.set_tiebreak_points


def points_played(state: MatchState) -> int:
    return state.tiebreak_points[Player.ONE] + state.tiebreak_points[Player.TWO]


def point_server(state: MatchState) -> Player:
    """Who serves the next point in the current mode."""
    if state.in_tiebreak:
        return tiebreak_server(state.tiebreak_start_server, points_played(state))
    return state.current_server


def award_point_tiebreak(state: MatchState, winner: Player) -> ScoreUpdate:
    """Add one tiebreak point; close the set or the match when it is won."""
    state.tiebreak_points[winner] += 1
    played = points_played(state)
    update = ScoreUpdate(change_ends=ends_change_in_tiebreak(played))
    if update.change_ends:
        log.info(f"Change ends (tiebreak, after {played} points)")

    won = tiebreak_winner(state.tiebreak_points, tiebreak_target(state))
    if won is None:
        return update

    score = f"{state.tiebreak_points[Player.ONE]}-{state.tiebreak_points[Player.TWO]}"
    if state.in_set_tiebreak:
        current = state.current_set
        current.tiebreak_points = dict(state.tiebreak_points)
        current.games[won] += 1
        state.in_set_tiebreak = False
        # The tiebreak counts as a game: its receiver opens the next set.
        state.current_server = state.tiebreak_start_server.other
        update.game_winner = won
        update.change_ends = True
        log.info(f"Tiebreak to {state.name_of(won)} {score}")
        close_set(state, won, update)
        return update

    state.sets_won[won] += 1
    state.in_match_tiebreak10 = False
    last = state.sets[-1]
    state.sets.append(SetRecord(
        games=dict(last.games),
        finished=True,
        tiebreak_played=True,
        tiebreak_points=dict(state.tiebreak_points),
        winner=won,
        is_match_tiebreak=True,
    ))
    update.set_winner = won
    update.match_ended = True
    log.info(f"Match tiebreak to {state.name_of(won)} {score}")
    return update
