"""
Pre-point significance: would the next point decide a game, set or match?

All predicates are pure and read the state as it is *before* the point.
Tiebreak points never carry these flags.
"""

from dataclasses import dataclass

from tennis_tracker.core.schema import MatchState, Player


@dataclass(frozen=True)
class PointSignificance:
    break_point: bool = False
    game_point: bool = False
    set_point: bool = False
    match_point: bool = False


def is_game_point_for(leader_points: int, trailer_points: int) -> bool:
    """True when the leader wins the game by winning the next point."""
    if leader_points < 3:
        return False
    return trailer_points <= 2 or leader_points == trailer_points + 1


def is_break_point_if_receiver_wins(state: MatchState) -> bool:
    receiver = state.current_server.other
    return is_game_point_for(state.game_points[receiver], state.game_points[receiver.other])


def is_set_point_if_player_wins(state: MatchState, player: Player) -> bool:
    if state.in_tiebreak:
        return False
    if not is_game_point_for(state.game_points[player], state.game_points[player.other]):
        return False
    games = state.current_set.games
    after = games[player] + 1
    return after >= state.format.games_to_win_set and after - games[player.other] >= 2


def is_match_point_if_player_wins(state: MatchState, player: Player) -> bool:
    if not is_set_point_if_player_wins(state, player):
        return False
    return state.sets_won[player] == state.format.sets_to_win - 1


def classify(state: MatchState) -> PointSignificance:
    if state.in_tiebreak:
        return PointSignificance()
    players = (Player.ONE, Player.TWO)
    return PointSignificance(
        break_point=is_break_point_if_receiver_wins(state),
        game_point=any(
            is_game_point_for(state.game_points[p], state.game_points[p.other]) for p in players
        ),
        set_point=any(is_set_point_if_player_wins(state, p) for p in players),
        match_point=any(is_match_point_if_player_wins(state, p) for p in players),
    )
