"""
Tennis Tracker domain objects.

Every module in the project depends on this file; this file depends on
nothing else inside the package.

Validation rules are enforced at construction time via __post_init__.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


# ── Enums ──────────────────────────────────────────────────────────────

class Player(Enum):
    ONE = 1
    TWO = 2

    @property
    def other(self) -> "Player":
        return Player.TWO if self is Player.ONE else Player.ONE


class ServeType(Enum):
    NONE = "-"
    FIRST = "1st"
    SECOND = "2nd"


class DeciderKind(Enum):
    REGULAR_THIRD_SET = "regular"
    MATCH_TIEBREAK_10 = "tb10"


class PlayMode(Enum):
    REGULAR_GAME = "regular"
    SET_TIEBREAK = "set_tiebreak"
    MATCH_TIEBREAK_10 = "match_tiebreak"


class ServeOutcome(Enum):
    IN_PLAY = "in"
    ACE = "ace"
    SERVICE_WINNER = "service_winner"
    DOUBLE_FAULT = "double_fault"


class ReturnOutcome(Enum):
    IN_PLAY = "in"
    WINNER = "winner"
    UNFORCED_ERROR = "unforced_error"
    FORCED_ERROR = "forced_error"


class RallyOutcome(Enum):
    WINNER = "winner"
    UNFORCED_ERROR = "unforced_error"
    FORCED_ERROR = "forced_error"


class Side(Enum):
    SERVER = "server"
    RETURNER = "returner"


def _pair(a: int = 0, b: int = 0) -> dict[Player, int]:
    return {Player.ONE: a, Player.TWO: b}


# ── Format ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FormatConfig:
    """Static match-format parameters, fixed before the first point."""
    games_to_win_set: int = 6
    tiebreak_at_games: int = 6
    set_tiebreak_points: int = 7
    decider_kind: DeciderKind = DeciderKind.REGULAR_THIRD_SET
    decider_tiebreak_points: int = 10
    best_of_sets: int = 3

    def __post_init__(self):
        for name in ("games_to_win_set", "tiebreak_at_games",
                     "set_tiebreak_points", "decider_tiebreak_points"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1, got {getattr(self, name)}")
        if self.best_of_sets < 1 or self.best_of_sets % 2 == 0:
            raise ValueError(f"best_of_sets must be odd and >= 1, got {self.best_of_sets}")

    @property
    def sets_to_win(self) -> int:
        return self.best_of_sets // 2 + 1

    @property
    def has_match_tiebreak(self) -> bool:
        return self.decider_kind is DeciderKind.MATCH_TIEBREAK_10

    def describe(self) -> str:
        text = (
            f"Best-of-{self.best_of_sets}; sets to {self.games_to_win_set} "
            f"(TB{self.set_tiebreak_points} at "
            f"{self.tiebreak_at_games}-{self.tiebreak_at_games})"
        )
        if self.has_match_tiebreak:
            text += f"; deciding TB{self.decider_tiebreak_points}"
        return text


FORMAT_PRESETS: dict[int, FormatConfig] = {
    1: FormatConfig(),
    2: FormatConfig(decider_kind=DeciderKind.MATCH_TIEBREAK_10),
    3: FormatConfig(games_to_win_set=4, tiebreak_at_games=4),
}


def get_format(choice: int) -> FormatConfig:
    """Return one of the fixed format presets (1, 2 or 3)."""
    if choice not in FORMAT_PRESETS:
        available = ", ".join(str(k) for k in sorted(FORMAT_PRESETS))
        raise ValueError(f"Unknown format preset {choice}. Available: {available}")
    return FORMAT_PRESETS[choice]


# ── Score records ──────────────────────────────────────────────────────

@dataclass
class SetRecord:
    """Games of one set. Tiebreak points are frozen once the set closes."""
    games: dict[Player, int] = field(default_factory=_pair)
    finished: bool = False
    tiebreak_played: bool = False
    tiebreak_points: dict[Player, int] = field(default_factory=_pair)
    winner: Optional[Player] = None
    is_match_tiebreak: bool = False

    def score_string(self) -> str:
        """Set score from player one's side, e.g. "7-5", "6-7(5)", "[10-8]"."""
        if self.is_match_tiebreak:
            return f"[{self.tiebreak_points[Player.ONE]}-{self.tiebreak_points[Player.TWO]}]"
        text = f"{self.games[Player.ONE]}-{self.games[Player.TWO]}"
        if self.tiebreak_played and self.finished and self.winner is not None:
            text += f"({self.tiebreak_points[self.winner.other]})"
        return text


@dataclass
class PlayerStats:
    """Counters for one player, either over the match or over one set."""
    # Serve
    first_serves_attempted: int = 0
    first_serves_in: int = 0
    second_serves_attempted: int = 0
    second_serves_in: int = 0
    aces_first: int = 0
    aces_second: int = 0
    service_winners_first: int = 0
    service_winners_second: int = 0
    double_faults: int = 0
    points_won_on_first_serve: int = 0
    points_won_on_second_serve: int = 0

    # Return
    return_points_won_vs_first: int = 0
    return_points_won_vs_second: int = 0
    return_winners: int = 0
    return_unforced_errors: int = 0
    return_forced_errors: int = 0
    return_winners_vs_first: int = 0
    return_winners_vs_second: int = 0
    return_unforced_errors_vs_first: int = 0
    return_unforced_errors_vs_second: int = 0
    return_forced_errors_vs_first: int = 0
    return_forced_errors_vs_second: int = 0

    # Rally
    rally_winners: int = 0
    unforced_errors: int = 0
    forced_errors_drawn: int = 0

    # Net
    net_points_played: int = 0
    net_points_won: int = 0

    # Pressure
    break_points_faced: int = 0
    break_points_won: int = 0

    # Totals
    points_won: int = 0
    points_played: int = 0

    @property
    def aces(self) -> int:
        return self.aces_first + self.aces_second

    @property
    def service_winners(self) -> int:
        return self.service_winners_first + self.service_winners_second

    @property
    def points_lost(self) -> int:
        return self.points_played - self.points_won


def _stats_pair() -> dict[Player, PlayerStats]:
    return {Player.ONE: PlayerStats(), Player.TWO: PlayerStats()}


# ── Point events ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class PointEvent:
    """What happened on one point, as entered by the caller.

    The outcome path (serve → return → rally) decides the point winner.
    `winner` is only consulted when the path ends without a decisive
    outcome, e.g. a point recorded as just "won by X".
    """
    serve: ServeType = ServeType.FIRST
    serve_outcome: ServeOutcome = ServeOutcome.IN_PLAY
    return_outcome: Optional[ReturnOutcome] = None
    rally_outcome: Optional[RallyOutcome] = None
    rally_side: Optional[Side] = None
    net_player: Optional[Player] = None
    winner: Optional[Player] = None
    description: str = ""

    def __post_init__(self):
        if self.serve_outcome is ServeOutcome.DOUBLE_FAULT and self.serve is ServeType.FIRST:
            raise ValueError("double fault must be recorded on the second serve")
        if self.serve_outcome is not ServeOutcome.IN_PLAY:
            if self.return_outcome is not None or self.rally_outcome is not None:
                raise ValueError(
                    f"serve outcome {self.serve_outcome.value} ends the point; "
                    f"no return or rally outcome allowed"
                )
            return
        if self.rally_outcome is not None:
            if self.return_outcome not in (None, ReturnOutcome.IN_PLAY):
                raise ValueError(
                    f"return outcome {self.return_outcome.value} ends the point; "
                    f"no rally outcome allowed"
                )
            if self.rally_side is None:
                raise ValueError("rally_outcome requires rally_side")
            return
        if self.return_outcome in (None, ReturnOutcome.IN_PLAY) and self.winner is None:
            raise ValueError("cannot decide point winner: no decisive outcome and no winner")

    # Constructors for the common point shapes

    @classmethod
    def ace(cls, serve: ServeType = ServeType.FIRST, **kwargs) -> "PointEvent":
        return cls(serve=serve, serve_outcome=ServeOutcome.ACE, **kwargs)

    @classmethod
    def service_winner(cls, serve: ServeType = ServeType.FIRST, **kwargs) -> "PointEvent":
        return cls(serve=serve, serve_outcome=ServeOutcome.SERVICE_WINNER, **kwargs)

    @classmethod
    def double_fault(cls, **kwargs) -> "PointEvent":
        return cls(serve=ServeType.SECOND, serve_outcome=ServeOutcome.DOUBLE_FAULT, **kwargs)

    @classmethod
    def return_shot(cls, outcome: ReturnOutcome,
                    serve: ServeType = ServeType.FIRST, **kwargs) -> "PointEvent":
        return cls(serve=serve, return_outcome=outcome, **kwargs)

    @classmethod
    def rally(cls, side: Side, outcome: RallyOutcome,
              serve: ServeType = ServeType.FIRST, **kwargs) -> "PointEvent":
        return cls(
            serve=serve, return_outcome=ReturnOutcome.IN_PLAY,
            rally_outcome=outcome, rally_side=side, **kwargs,
        )

    @classmethod
    def point_to(cls, winner: Player,
                 serve: ServeType = ServeType.FIRST, **kwargs) -> "PointEvent":
        return cls(serve=serve, winner=winner, **kwargs)

    def resolve_winner(self, server: Player) -> Player:
        """Point winner given who served it."""
        returner = server.other
        if self.serve_outcome in (ServeOutcome.ACE, ServeOutcome.SERVICE_WINNER):
            return server
        if self.serve_outcome is ServeOutcome.DOUBLE_FAULT:
            return returner
        if self.return_outcome is ReturnOutcome.WINNER:
            return returner
        if self.return_outcome in (ReturnOutcome.UNFORCED_ERROR, ReturnOutcome.FORCED_ERROR):
            return server
        if self.rally_outcome is not None:
            hitter = server if self.rally_side is Side.SERVER else returner
            return hitter if self.rally_outcome is RallyOutcome.WINNER else hitter.other
        return self.winner

    def describe(self) -> str:
        """Event chain text, e.g. "1st fault -> 2nd in; Return in; Rally: server winner."."""
        parts = []
        if self.serve is ServeType.SECOND:
            parts.append("1st fault -> ")
        if self.serve_outcome is ServeOutcome.DOUBLE_FAULT:
            return "".join(parts) + "double fault."
        if self.serve_outcome is ServeOutcome.ACE:
            return "".join(parts) + f"Ace ({self.serve.value})."
        if self.serve_outcome is ServeOutcome.SERVICE_WINNER:
            return "".join(parts) + f"Service winner ({self.serve.value})."
        if self.serve is not ServeType.NONE:
            parts.append(f"{self.serve.value} in; ")
        if self.return_outcome is ReturnOutcome.WINNER:
            parts.append("Return winner.")
        elif self.return_outcome is ReturnOutcome.UNFORCED_ERROR:
            parts.append("Return UE.")
        elif self.return_outcome is ReturnOutcome.FORCED_ERROR:
            parts.append("Return FE (drawn by server).")
        elif self.rally_outcome is not None:
            parts.append("Return in; ")
            side = self.rally_side.value
            if self.rally_outcome is RallyOutcome.WINNER:
                parts.append(f"Rally: {side} winner.")
            elif self.rally_outcome is RallyOutcome.UNFORCED_ERROR:
                parts.append(f"Rally: {side} UE.")
            else:
                drawn_by = Side.RETURNER if self.rally_side is Side.SERVER else Side.SERVER
                parts.append(f"Rally: {side} FE (drawn by {drawn_by.value}).")
        else:
            parts.append("Point recorded.")
        return "".join(parts)


@dataclass(frozen=True)
class PointLogEntry:
    """Immutable record of one completed point.

    Significance flags are computed before the point was applied.
    `point_in_game` counts within the game, or within the tiebreak.
    """
    index: int
    set_index: int
    game_index: int
    in_tiebreak: bool
    point_in_game: int
    server: Player
    serve_type: ServeType
    winner: Player
    was_break_point: bool = False
    was_game_point: bool = False
    was_set_point: bool = False
    was_match_point: bool = False
    description: str = ""

    def __post_init__(self):
        if self.index < 0:
            raise ValueError(f"index must be >= 0, got {self.index}")
        if self.point_in_game < 1:
            raise ValueError(f"point_in_game must be >= 1, got {self.point_in_game}")

    @property
    def pressure_tags(self) -> str:
        tags = [
            tag for tag, flag in (
                ("BP", self.was_break_point), ("GP", self.was_game_point),
                ("SP", self.was_set_point), ("MP", self.was_match_point),
            ) if flag
        ]
        return " ".join(tags)


# ── Match state ────────────────────────────────────────────────────────

@dataclass
class MatchState:
    """The whole mutable state of one match, owned by one controller."""
    format: FormatConfig = field(default_factory=FormatConfig)
    player1: str = "Player 1"
    player2: str = "Player 2"
    location: str = ""

    sets: list[SetRecord] = field(default_factory=list)
    set_stats: list[dict[Player, PlayerStats]] = field(default_factory=list)
    match_stats: dict[Player, PlayerStats] = field(default_factory=_stats_pair)

    game_points: dict[Player, int] = field(default_factory=_pair)
    tiebreak_points: dict[Player, int] = field(default_factory=_pair)
    in_set_tiebreak: bool = False
    in_match_tiebreak10: bool = False

    current_server: Player = Player.ONE
    tiebreak_start_server: Player = Player.ONE
    sets_won: dict[Player, int] = field(default_factory=_pair)

    log: list[PointLogEntry] = field(default_factory=list)
    ended_early: bool = False

    def __post_init__(self):
        if not self.player1 or not self.player2:
            raise ValueError("player names cannot be empty")

    @property
    def mode(self) -> PlayMode:
        assert not (self.in_set_tiebreak and self.in_match_tiebreak10), \
            "set tiebreak and match tiebreak active at once"
        if self.in_set_tiebreak:
            return PlayMode.SET_TIEBREAK
        if self.in_match_tiebreak10:
            return PlayMode.MATCH_TIEBREAK_10
        return PlayMode.REGULAR_GAME

    @property
    def in_tiebreak(self) -> bool:
        return self.in_set_tiebreak or self.in_match_tiebreak10

    @property
    def current_set_index(self) -> int:
        """Index of the set the next point belongs to (the decider slot during a match tiebreak)."""
        return len(self.set_stats) - 1

    @property
    def current_set(self) -> SetRecord:
        return self.sets[-1]

    @property
    def match_over(self) -> bool:
        target = self.format.sets_to_win
        return self.sets_won[Player.ONE] >= target or self.sets_won[Player.TWO] >= target

    @property
    def is_finished(self) -> bool:
        return self.match_over or self.ended_early

    @property
    def winner(self) -> Optional[Player]:
        if not self.match_over:
            return None
        return Player.ONE if self.sets_won[Player.ONE] > self.sets_won[Player.TWO] else Player.TWO

    def name_of(self, player: Player) -> str:
        return self.player1 if player is Player.ONE else self.player2


@dataclass(frozen=True)
class MatchSnapshot:
    """Read-only view handed to renderers and exporters.

    `state` is an independent deep copy; `log` preserves point order.
    """
    state: MatchState
    log: tuple[PointLogEntry, ...]
    next_server: Player

    @property
    def player_names(self) -> dict[Player, str]:
        return {Player.ONE: self.state.player1, Player.TWO: self.state.player2}

    @property
    def sets(self) -> list[SetRecord]:
        return self.state.sets

    @property
    def n_points(self) -> int:
        return len(self.log)
