"""
Point attribution into match-level and per-set counters.

Each fact about a completed point is credited to the same player in both
the match totals and the current set's totals. Whatever path the point
took, the winner's points_won and both players' points_played move by
exactly one.
"""

import logging

from tennis_tracker.core.schema import (
    MatchState, Player, PlayerStats, PointEvent,
    ServeType, ServeOutcome, ReturnOutcome, RallyOutcome, Side,
)

log = logging.getLogger(__name__)

_SERVE_SUFFIX = {ServeType.FIRST: "first", ServeType.SECOND: "second"}


class StatsAggregator:
    """Credits one completed point to match-level and current-set stats."""

    def record(
        self,
        state: MatchState,
        event: PointEvent,
        server: Player,
        winner: Player,
        was_break_point: bool,
    ) -> None:
        returner = server.other
        suffix = _SERVE_SUFFIX.get(event.serve)

        self._record_serve(state, event, server, suffix)

        if event.serve_outcome is ServeOutcome.IN_PLAY:
            self._record_return(state, event, server, returner, suffix)
            self._record_rally(state, event, server, returner)

        if suffix is not None and event.serve_outcome is not ServeOutcome.DOUBLE_FAULT:
            if winner is server:
                self._bump(state, server, f"points_won_on_{suffix}_serve")
            else:
                self._bump(state, returner, f"return_points_won_vs_{suffix}")

        if event.net_player is not None:
            self._bump(state, event.net_player, "net_points_played")
            if winner is event.net_player:
                self._bump(state, event.net_player, "net_points_won")

        if was_break_point:
            self._bump(state, returner, "break_points_faced")
            if winner is returner:
                self._bump(state, returner, "break_points_won")

        self._bump(state, winner, "points_won")
        self._bump(state, winner, "points_played")
        self._bump(state, winner.other, "points_played")

    # ── Per-phase attribution ──

    def _record_serve(self, state, event, server, suffix):
        outcome = event.serve_outcome
        if event.serve is ServeType.FIRST:
            self._bump(state, server, "first_serves_attempted")
            self._bump(state, server, "first_serves_in")
        elif event.serve is ServeType.SECOND:
            # Reaching a second serve means the first one was a fault.
            self._bump(state, server, "first_serves_attempted")
            self._bump(state, server, "second_serves_attempted")
            if outcome is not ServeOutcome.DOUBLE_FAULT:
                self._bump(state, server, "second_serves_in")

        if outcome is ServeOutcome.DOUBLE_FAULT:
            self._bump(state, server, "double_faults")
        elif outcome is ServeOutcome.ACE and suffix is not None:
            self._bump(state, server, f"aces_{suffix}")
        elif outcome is ServeOutcome.SERVICE_WINNER and suffix is not None:
            self._bump(state, server, f"service_winners_{suffix}")

    def _record_return(self, state, event, server, returner, suffix):
        outcome = event.return_outcome
        if outcome is None or outcome is ReturnOutcome.IN_PLAY:
            return
        name = {
            ReturnOutcome.WINNER: "return_winners",
            ReturnOutcome.UNFORCED_ERROR: "return_unforced_errors",
            ReturnOutcome.FORCED_ERROR: "return_forced_errors",
        }[outcome]
        self._bump(state, returner, name)
        if suffix is not None:
            self._bump(state, returner, f"{name}_vs_{suffix}")
        if outcome is ReturnOutcome.FORCED_ERROR:
            self._bump(state, server, "forced_errors_drawn")

    def _record_rally(self, state, event, server, returner):
        if event.rally_outcome is None:
            return
        hitter = server if event.rally_side is Side.SERVER else returner
        if event.rally_outcome is RallyOutcome.WINNER:
            self._bump(state, hitter, "rally_winners")
        elif event.rally_outcome is RallyOutcome.UNFORCED_ERROR:
            self._bump(state, hitter, "unforced_errors")
        else:
            self._bump(state, hitter.other, "forced_errors_drawn")

    # ── Counters ──

    @staticmethod
    def _targets(state: MatchState, player: Player) -> tuple[PlayerStats, PlayerStats]:
        return state.match_stats[player], state.set_stats[state.current_set_index][player]

    def _bump(self, state: MatchState, player: Player, counter: str) -> None:
        for stats in self._targets(state, player):
            setattr(stats, counter, getattr(stats, counter) + 1)
