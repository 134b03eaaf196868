"""
Interactive console session.

Menus only collect choices and turn them into PointEvents; every scoring
decision is made by the MatchController. Input and output are injectable
so a session can be driven from a script.
"""

import logging
from typing import Callable, Iterable

from tennis_tracker.core.schema import (
    MatchSnapshot, Player, PointEvent, RallyOutcome, ReturnOutcome, ServeType, Side,
)
from tennis_tracker.console.scoreboard import format_set_scores, render_scoreboard
from tennis_tracker.export.report import export_match
from tennis_tracker.orchestration.controller import MatchController, PointResult
from tennis_tracker.scoring.tiebreak import points_played
from tennis_tracker.stats.summary import summary_frame

log = logging.getLogger(__name__)

MAIN_MENU = [
    "Main Menu:",
    "  1) Record next point",
    "  2) Stats menu",
    "  3) Undo last point",
    "  4) End match (finish now)",
]

SERVE_MENU = [
    "Serve/Event Menu:",
    "  1) First serve in",
    "  2) First serve fault -> second serve",
    "  3) Second serve in",
    "  4) Double fault",
    "  5) Ace (first)",
    "  6) Ace (second)",
    "  7) Service winner (first)",
    "  8) Service winner (second)",
    "  9) Admin (stats/undo/end)",
]

RETURN_MENU = [
    "Return Menu:",
    "  1) Return winner",
    "  2) Return unforced error",
    "  3) Return forced error",
    "  4) Return in (go to rally)",
]

RALLY_MENU = [
    "Rally Menu:",
    "  1) Server winner",
    "  2) Returner winner",
    "  3) Server unforced error",
    "  4) Returner unforced error",
    "  5) Server forced error (drawn by returner)",
    "  6) Returner forced error (drawn by server)",
]

STATS_MENU = [
    "Stats Menu",
    "  1) Match totals (choose player or both)",
    "  2) By set (choose set, then player/both)",
    "  3) Point-by-point log",
    "  4) Back",
]

RALLY_CHOICES = {
    1: (Side.SERVER, RallyOutcome.WINNER),
    2: (Side.RETURNER, RallyOutcome.WINNER),
    3: (Side.SERVER, RallyOutcome.UNFORCED_ERROR),
    4: (Side.RETURNER, RallyOutcome.UNFORCED_ERROR),
    5: (Side.SERVER, RallyOutcome.FORCED_ERROR),
    6: (Side.RETURNER, RallyOutcome.FORCED_ERROR),
}

RETURN_CHOICES = {
    1: ReturnOutcome.WINNER,
    2: ReturnOutcome.UNFORCED_ERROR,
    3: ReturnOutcome.FORCED_ERROR,
}

# Outcomes of point entry
RECORDED = "recorded"
UNDONE = "undone"
ENDED = "ended"


class ConsoleSession:
    """Menu-driven point entry around one MatchController."""

    def __init__(
        self,
        controller: MatchController,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
        output_dir: str = "exports",
        formats: Iterable[str] = ("text", "json", "csv"),
    ):
        self.controller = controller
        self._input = input_fn
        self._output = output_fn
        self.output_dir = output_dir
        self.formats = tuple(formats)
        self.saved: list[str] = []
        self._tb_server_asked = False

    # ── I/O helpers ──

    def say(self, *lines: str) -> None:
        for line in lines:
            self._output(line)

    def ask(self, menu: list[str], prompt: str = "Choose: ") -> int:
        """Show a menu and read one integer choice (-1 if unreadable)."""
        self.say("", *menu)
        raw = self._input(prompt).strip()
        try:
            return int(raw)
        except ValueError:
            return -1

    def ask_player(self, question: str) -> Player:
        state = self.controller.state
        while True:
            choice = self.ask([f"{question} 1) {state.player1}  2) {state.player2}"])
            if choice in (1, 2):
                return Player(choice)
            self.say("Invalid option.")

    def show_scoreboard(self) -> None:
        self.say(render_scoreboard(self.controller.snapshot()))

    # ── Main loop ──

    def run(self) -> MatchSnapshot:
        """Drive the match until it finishes or is ended; return the final snapshot."""
        while True:
            self._maybe_choose_tiebreak_server()
            self.show_scoreboard()
            choice = self.ask(MAIN_MENU)

            if choice == 1:
                outcome = self.record_point()
                if outcome == ENDED:
                    self.finish("Match ended.")
                    break
                if self.controller.state.match_over:
                    self.finish("Match finished!")
                    break
            elif choice == 2:
                self.stats_menu()
            elif choice == 3:
                self.undo()
            elif choice == 4:
                self.controller.end_match()
                self.finish("Match ended.")
                break
            else:
                self.say("Invalid option.")

        self.say("Goodbye.")
        log.info(f"Session closed after {len(self.controller.state.log)} points")
        return self.controller.snapshot()

    def _maybe_choose_tiebreak_server(self) -> None:
        state = self.controller.state
        if not state.in_match_tiebreak10:
            self._tb_server_asked = False
            return
        if self._tb_server_asked or points_played(state) > 0:
            return
        player = self.ask_player("Match TB10. Who serves first?")
        self.controller.choose_tiebreak_server(player)
        self._tb_server_asked = True

    def undo(self) -> bool:
        ok = self.controller.undo()
        self.say("Undid last point." if ok else "Nothing to undo.")
        return ok

    # ── Point entry ──

    def record_point(self) -> str:
        """Walk the serve, return and rally menus for one point."""
        self.controller.begin_point()

        serve = None
        while serve is None:
            self.show_scoreboard()
            c = self.ask(SERVE_MENU)
            if c == 9:
                outcome = self._admin()
                if outcome is not None:
                    return outcome
            elif c == 1:
                serve = ServeType.FIRST
            elif c == 2:
                second = self._ask_second_serve()
                if second is None:
                    return self._complete(PointEvent.double_fault())
                serve = second
            elif c == 3:
                serve = ServeType.SECOND
            elif c == 4:
                return self._complete(PointEvent.double_fault())
            elif c in (5, 6):
                return self._complete(PointEvent.ace(ServeType.FIRST if c == 5 else ServeType.SECOND))
            elif c in (7, 8):
                return self._complete(
                    PointEvent.service_winner(ServeType.FIRST if c == 7 else ServeType.SECOND)
                )
            else:
                self.say("Invalid option.")

        while True:
            self.show_scoreboard()
            r = self.ask(RETURN_MENU)
            if r in RETURN_CHOICES:
                return self._complete(PointEvent.return_shot(RETURN_CHOICES[r], serve))
            if r == 4:
                break
            self.say("Invalid option.")

        while True:
            self.show_scoreboard()
            rv = self.ask(RALLY_MENU)
            if rv not in RALLY_CHOICES:
                self.say("Invalid option.")
                continue
            side, outcome = RALLY_CHOICES[rv]
            net = self._ask_net()
            return self._complete(PointEvent.rally(side, outcome, serve, net_player=net))

    def _ask_second_serve(self):
        """ServeType.SECOND if the second serve went in, None for a double fault."""
        while True:
            c = self.ask(["Second serve: 1) in  2) double fault"])
            if c == 1:
                return ServeType.SECOND
            if c == 2:
                return None
            self.say("Invalid option.")

    def _ask_net(self):
        if self.ask(["Mark net point? 1) No  2) Yes"]) != 2:
            return None
        return self.ask_player("Who was at net?")

    def _admin(self):
        """Admin submenu inside point entry; returns an entry outcome or None to continue."""
        a = self.ask(["Admin: 1) Stats  2) Undo last point  3) End match  4) Back"])
        if a == 1:
            self.stats_menu()
        elif a == 2:
            self.undo()
            return UNDONE
        elif a == 3:
            self.controller.end_match()
            return ENDED
        return None

    def _complete(self, event: PointEvent) -> str:
        result = self.controller.complete_point(event)
        self._announce(result)
        return RECORDED

    def _announce(self, result: PointResult) -> None:
        state = result.state
        self.say(f"Point {state.name_of(result.entry.winner)}: {result.entry.description}")
        if result.change_ends and not result.match_ended:
            self.say("--- Change ends ---")

    # ── Stats ──

    def _show_stats(self, stats, title: str) -> None:
        names = self.controller.snapshot().player_names
        choice = self.ask([f"Show stats for: 1) {names[Player.ONE]}  2) {names[Player.TWO]}  3) Both"])
        frame = summary_frame(stats, names)
        if choice in (1, 2):
            frame = frame.iloc[:, [choice - 1]]
        self.say(title, frame.to_string())

    def _show_by_set(self) -> None:
        state = self.controller.state
        n = len(state.set_stats)
        idx = self.ask([f"Which set? (1-{n})"], prompt="")
        if not 1 <= idx <= n:
            self.say("Invalid set.")
            return
        self._show_stats(state.set_stats[idx - 1], f"== Set {idx} ==")

    def _show_log(self) -> None:
        snapshot = self.controller.snapshot()
        names = snapshot.player_names
        self.say("# | Set | Game | TB | Server | Serve | Winner | BP/GP/SP/MP | Event")
        for e in snapshot.log:
            self.say(
                f"{e.index + 1} | {e.set_index + 1} | {e.game_index + 1} | "
                f"{'Y' if e.in_tiebreak else 'N'} | {names[e.server]} | {e.serve_type.value} | "
                f"{names[e.winner]} | {e.pressure_tags} | {e.description}"
            )

    def stats_menu(self) -> None:
        while True:
            choice = self.ask(STATS_MENU)
            if choice == 1:
                self._show_stats(self.controller.state.match_stats, "== Match Totals ==")
            elif choice == 2:
                self._show_by_set()
            elif choice == 3:
                self._show_log()
            else:
                return

    # ── Match end ──

    def finish(self, headline: str) -> None:
        snapshot = self.controller.snapshot()
        state = snapshot.state
        self.say(render_scoreboard(snapshot), "", headline)
        self.say(
            f"Final sets won: {state.player1} {state.sets_won[Player.ONE]} - "
            f"{state.player2} {state.sets_won[Player.TWO]}",
            "Final set scores:",
            *format_set_scores(snapshot),
        )

        while True:
            choice = self.ask([
                f"Show stats? 1) {state.player1}  2) {state.player2}  3) Both  "
                f"4) Save results  5) Exit"
            ])
            if choice in (1, 2, 3):
                frame = summary_frame(state.match_stats, snapshot.player_names)
                if choice != 3:
                    frame = frame.iloc[:, [choice - 1]]
                self.say(frame.to_string())
            elif choice == 4:
                self.saved = export_match(snapshot, self.output_dir, self.formats)
                self.say(*(f"Saved: {p}" for p in self.saved))
            else:
                return
