"""
Regular game and set progression.

Games are won at four or more points with a two-point lead; sets at
`games_to_win_set` with a two-game lead, unless both players reach
`tiebreak_at_games`, in which case a set tiebreak is entered. Closing a
set runs decider selection (next regular set or match tiebreak-10).
"""

import logging
from dataclasses import dataclass
from typing import Optional

from tennis_tracker.core.schema import (
    FormatConfig, MatchState, Player, PlayMode, PlayerStats, SetRecord,
)

log = logging.getLogger(__name__)

POINT_LABELS = {0: "0", 1: "15", 2: "30", 3: "40"}


@dataclass
class ScoreUpdate:
    """What one point changed beyond the point count itself."""
    game_winner: Optional[Player] = None
    set_winner: Optional[Player] = None
    entered: Optional[PlayMode] = None
    match_ended: bool = False
    change_ends: bool = False


# ── Pure helpers ───────────────────────────────────────────────────────

def point_label(points: int) -> str:
    return POINT_LABELS.get(max(points, 0), "40")


def game_score_labels(state: MatchState) -> tuple[str, str]:
    """Scoreboard labels for the current game, player one first.

    Deuce shows as 40-40; advantage as "Ad" against an empty label.
    Inside a tiebreak the raw tiebreak points are shown.
    """
    if state.in_tiebreak:
        return str(state.tiebreak_points[Player.ONE]), str(state.tiebreak_points[Player.TWO])
    p1, p2 = state.game_points[Player.ONE], state.game_points[Player.TWO]
    if p1 >= 3 and p2 >= 3:
        if p1 == p2:
            return "40", "40"
        if p1 == p2 + 1:
            return "Ad", ""
        if p2 == p1 + 1:
            return "", "Ad"
    return point_label(p1), point_label(p2)


def game_winner(points: dict[Player, int]) -> Optional[Player]:
    p1, p2 = points[Player.ONE], points[Player.TWO]
    if (p1 >= 4 or p2 >= 4) and abs(p1 - p2) >= 2:
        return Player.ONE if p1 > p2 else Player.TWO
    return None


def set_winner(games: dict[Player, int], fmt: FormatConfig) -> Optional[Player]:
    g1, g2 = games[Player.ONE], games[Player.TWO]
    if (g1 >= fmt.games_to_win_set or g2 >= fmt.games_to_win_set) and abs(g1 - g2) >= 2:
        return Player.ONE if g1 > g2 else Player.TWO
    return None


def should_enter_tiebreak(games: dict[Player, int], fmt: FormatConfig) -> bool:
    return games[Player.ONE] == fmt.tiebreak_at_games and games[Player.TWO] == fmt.tiebreak_at_games


def ends_change_after_game(games_in_set: int) -> bool:
    """Players change ends after every odd game of a set."""
    return games_in_set % 2 == 1


# ── State transitions ──────────────────────────────────────────────────

def new_match_state(
    fmt: FormatConfig,
    player1: str = "Player 1",
    player2: str = "Player 2",
    location: str = "",
    first_server: Player = Player.ONE,
) -> MatchState:
    """Fresh match with set one open and `first_server` to serve."""
    state = MatchState(
        format=fmt, player1=player1, player2=player2,
        location=location, current_server=first_server,
    )
    start_new_set(state)
    return state


def start_new_set(state: MatchState) -> None:
    state.sets.append(SetRecord())
    state.set_stats.append({Player.ONE: PlayerStats(), Player.TWO: PlayerStats()})
    state.game_points = {Player.ONE: 0, Player.TWO: 0}
    state.tiebreak_points = {Player.ONE: 0, Player.TWO: 0}
    state.in_set_tiebreak = False


def enter_set_tiebreak(state: MatchState) -> None:
    """The player due to serve the next game opens the tiebreak."""
    state.in_set_tiebreak = True
    state.current_set.tiebreak_played = True
    state.tiebreak_points = {Player.ONE: 0, Player.TWO: 0}
    state.tiebreak_start_server = state.current_server
    log.info(f"Set {len(state.sets)}: tiebreak at {state.current_set.score_string()}")


def enter_match_tiebreak(state: MatchState) -> None:
    """Replace the deciding set with a tiebreak; no set record is opened for it."""
    state.in_match_tiebreak10 = True
    state.tiebreak_points = {Player.ONE: 0, Player.TWO: 0}
    state.tiebreak_start_server = state.current_server
    state.set_stats.append({Player.ONE: PlayerStats(), Player.TWO: PlayerStats()})
    log.info("Sets level at 1-1: match tiebreak decides")


def close_set(state: MatchState, winner: Player, update: ScoreUpdate) -> None:
    """Freeze the current set and decide what is played next."""
    current = state.current_set
    current.finished = True
    current.winner = winner
    state.sets_won[winner] += 1
    update.set_winner = winner
    log.info(
        f"Set {len(state.sets)} to {state.name_of(winner)} {current.score_string()}; "
        f"sets {state.sets_won[Player.ONE]}-{state.sets_won[Player.TWO]}"
    )

    if state.match_over:
        update.match_ended = True
        return

    completed = sum(1 for s in state.sets if s.finished)
    level = state.sets_won[Player.ONE] == 1 and state.sets_won[Player.TWO] == 1
    if completed == 2 and level and state.format.has_match_tiebreak:
        enter_match_tiebreak(state)
        update.entered = PlayMode.MATCH_TIEBREAK_10
    else:
        start_new_set(state)
        update.entered = PlayMode.REGULAR_GAME


def award_point_regular(state: MatchState, winner: Player) -> ScoreUpdate:
    """Add one point in a regular game and roll game/set state forward."""
    update = ScoreUpdate()
    state.game_points[winner] += 1
    won = game_winner(state.game_points)
    if won is None:
        return update

    current = state.current_set
    current.games[won] += 1
    state.current_server = state.current_server.other
    state.game_points = {Player.ONE: 0, Player.TWO: 0}
    update.game_winner = won
    update.change_ends = ends_change_after_game(current.games[Player.ONE] + current.games[Player.TWO])
    log.debug(f"Game {state.name_of(won)}; games {current.score_string()}")

    if should_enter_tiebreak(current.games, state.format):
        enter_set_tiebreak(state)
        update.entered = PlayMode.SET_TIEBREAK
        return update

    set_won = set_winner(current.games, state.format)
    if set_won is not None:
        close_set(state, set_won, update)
    return update
