"""Plain-text scoreboard for the console session."""

from tennis_tracker.core.schema import MatchSnapshot, Player
from tennis_tracker.scoring.score import game_score_labels
from tennis_tracker.scoring.tiebreak import tiebreak_target

WIDTH = 52
SERVE_MARK = "*"


def _row(text: str) -> str:
    return "| " + text.ljust(WIDTH - 4)[: WIDTH - 4] + " |"


def _score_row(label: str, a, b) -> str:
    return _row(f"{label:<16}{str(a):>10}  | {str(b):>10}")


def render_scoreboard(snapshot: MatchSnapshot) -> str:
    """Scoreboard box with the next server marked."""
    state = snapshot.state
    border = "+" + "-" * (WIDTH - 2) + "+"

    names = [
        (f"{SERVE_MARK} " if p is snapshot.next_server and not state.is_finished else "  ")
        + state.name_of(p)
        for p in (Player.ONE, Player.TWO)
    ]
    games = state.current_set.games
    points = game_score_labels(state)

    lines = [
        border,
        _row(f"Location: {state.location}"),
        _row(f"{names[0]:<22}| {names[1]}"),
        _score_row("Sets:", state.sets_won[Player.ONE], state.sets_won[Player.TWO]),
        _score_row("Games:", games[Player.ONE], games[Player.TWO]),
        _score_row("Points:", *points),
    ]
    if state.in_match_tiebreak10:
        lines.append(_row(f"Match tiebreak (first to {tiebreak_target(state)})"))
    elif state.in_set_tiebreak:
        lines.append(_row(f"Set tiebreak (first to {tiebreak_target(state)})"))
    lines.append(border)
    return "\n".join(lines)


def format_set_scores(snapshot: MatchSnapshot) -> list[str]:
    out = []
    for i, s in enumerate(snapshot.sets):
        if s.is_match_tiebreak:
            out.append(f"  Set {i + 1}: match tiebreak {s.score_string()}")
        else:
            out.append(f"  Set {i + 1}: {s.score_string()}")
    return out
