"""
Match controller: the only writer of the match state.

One point runs in strict order:
    snapshot for undo → classify → attribute stats → append log entry
    → apply to game/tiebreak state → set/match closure and mode change.

Interactive callers use the two-phase form (begin_point / complete_point)
so that undo can be requested while a point is still being entered.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Optional

from tennis_tracker.core.errors import MatchOverError
from tennis_tracker.core.schema import (
    FormatConfig, MatchSnapshot, MatchState, Player, PointEvent, PointLogEntry,
    ServeOutcome, ServeType,
)
from tennis_tracker.orchestration.history import HistoryManager
from tennis_tracker.scoring.classifier import PointSignificance, classify
from tennis_tracker.scoring.score import award_point_regular, new_match_state
from tennis_tracker.scoring.tiebreak import award_point_tiebreak, point_server, points_played
from tennis_tracker.stats.aggregator import StatsAggregator

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingPoint:
    """Context fixed when a point starts, before anything is applied."""
    server: Player
    significance: PointSignificance
    set_index: int
    game_index: int
    in_tiebreak: bool
    point_in_game: int


@dataclass(frozen=True)
class PointResult:
    state: MatchState
    entry: PointLogEntry
    match_ended: bool
    set_ended: bool = False
    change_ends: bool = False


class MatchController:
    """Owns one match: applies point events, keeps history, serves snapshots."""

    def __init__(
        self,
        fmt: Optional[FormatConfig] = None,
        player1: str = "Player 1",
        player2: str = "Player 2",
        location: str = "",
        first_server: Player = Player.ONE,
    ):
        self.state = new_match_state(
            fmt or FormatConfig(), player1, player2, location, first_server,
        )
        self.history = HistoryManager()
        self.stats = StatsAggregator()
        self._pending: Optional[PendingPoint] = None
        log.info(
            f"New match: {player1} vs {player2}, {self.state.format.describe()}; "
            f"{self.state.name_of(first_server)} to serve"
        )

    @property
    def pending(self) -> Optional[PendingPoint]:
        return self._pending

    @property
    def next_server(self) -> Player:
        return point_server(self.state)

    # ── Point entry ──

    def choose_tiebreak_server(self, player: Player) -> None:
        """Pick who opens the current tiebreak; only before its first point."""
        if not self.state.in_tiebreak or points_played(self.state) > 0 or self._pending:
            raise ValueError("tiebreak server can only be chosen before the first tiebreak point")
        self.state.tiebreak_start_server = player
        log.info(f"{self.state.name_of(player)} opens the tiebreak")

    def begin_point(self) -> PendingPoint:
        if self.state.is_finished:
            raise MatchOverError("match is over; no further points can be recorded")
        if self._pending is not None:
            raise RuntimeError("a point is already being entered")

        self.history.push(self.state)
        state = self.state
        in_tiebreak = state.in_tiebreak
        if in_tiebreak:
            game_index = 0 if state.in_match_tiebreak10 else sum(state.current_set.games.values())
            point_in_game = points_played(state) + 1
        else:
            game_index = sum(state.current_set.games.values())
            point_in_game = sum(state.game_points.values()) + 1

        self._pending = PendingPoint(
            server=point_server(state),
            significance=classify(state),
            set_index=state.current_set_index,
            game_index=game_index,
            in_tiebreak=in_tiebreak,
            point_in_game=point_in_game,
        )
        return self._pending

    def complete_point(self, event: PointEvent) -> PointResult:
        pending = self._pending
        if pending is None:
            raise RuntimeError("begin_point() must be called before complete_point()")

        state = self.state
        server = pending.server
        winner = event.resolve_winner(server)
        sig = pending.significance

        self.stats.record(state, event, server, winner, sig.break_point)

        serve_type = event.serve
        if event.serve_outcome is ServeOutcome.DOUBLE_FAULT:
            serve_type = ServeType.SECOND
        entry = PointLogEntry(
            index=len(state.log),
            set_index=pending.set_index,
            game_index=pending.game_index,
            in_tiebreak=pending.in_tiebreak,
            point_in_game=pending.point_in_game,
            server=server,
            serve_type=serve_type,
            winner=winner,
            was_break_point=sig.break_point,
            was_game_point=sig.game_point,
            was_set_point=sig.set_point,
            was_match_point=sig.match_point,
            description=event.description or event.describe(),
        )
        state.log.append(entry)

        if state.in_tiebreak:
            update = award_point_tiebreak(state, winner)
        else:
            update = award_point_regular(state, winner)

        self._pending = None
        self._check_invariants()

        log.debug(
            f"Point {entry.index + 1}: {state.name_of(winner)} "
            f"({entry.description}) {entry.pressure_tags}".rstrip()
        )
        if update.match_ended:
            log.info(
                f"Match to {state.name_of(state.winner)}: "
                + " ".join(s.score_string() for s in state.sets)
            )
        return PointResult(
            state=state,
            entry=entry,
            match_ended=update.match_ended,
            set_ended=update.set_winner is not None,
            change_ends=update.change_ends,
        )

    def apply_point(self, event: PointEvent) -> PointResult:
        """Record one point in a single step."""
        self.begin_point()
        return self.complete_point(event)

    # ── Undo / end ──

    def undo(self) -> bool:
        """Revert the last completed point.

        Called mid-entry, the speculative snapshot of the pending point is
        popped first and then the previous completed point is reverted, so
        two snapshots leave the stack.
        """
        if self._pending is not None:
            self._pending = None
            self.state = self.history.pop()
        restored = self.history.pop()
        if restored is None:
            log.warning("Nothing to undo")
            return False
        self.state = restored
        log.info(f"Undid last point ({len(self.state.log)} points remain)")
        return True

    def end_match(self) -> None:
        """Stop recording. A point being entered is discarded."""
        if self._pending is not None:
            self._pending = None
            self.state = self.history.pop()
        if not self.state.match_over:
            self.state.ended_early = True
        log.info(f"Match ended after {len(self.state.log)} points")

    # ── Export boundary ──

    def snapshot(self) -> MatchSnapshot:
        state = copy.deepcopy(self.state)
        return MatchSnapshot(state=state, log=tuple(state.log), next_server=point_server(state))

    def _check_invariants(self) -> None:
        state = self.state
        assert not (state.in_set_tiebreak and state.in_match_tiebreak10), "two tiebreak modes active"
        n = len(state.log)
        p1, p2 = state.match_stats[Player.ONE], state.match_stats[Player.TWO]
        assert p1.points_played == p2.points_played == n, "points_played out of step with log"
        assert p1.points_won + p2.points_won == n, "points_won out of step with log"
        assert max(state.sets_won.values()) <= state.format.sets_to_win, "sets_won past target"
        assert state.log[-1].index == n - 1, "log index not increasing"
