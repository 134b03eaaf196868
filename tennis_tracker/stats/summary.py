"""
Summary tables over PlayerStats.

Raw counters become pandas DataFrames (one row per player, or per set and
player) plus percentage columns. Ratios with a zero denominator show "--"
in text and NaN in tables.
"""

import dataclasses
import logging

import numpy as np
import pandas as pd

from tennis_tracker.core.schema import MatchSnapshot, Player, PlayerStats, PointLogEntry

log = logging.getLogger(__name__)

COUNTER_NAMES = [f.name for f in dataclasses.fields(PlayerStats)]

# Percentage columns: name → (numerator, denominator)
RATES = {
    "first_serve_pct": ("first_serves_in", "first_serves_attempted"),
    "first_serve_won_pct": ("points_won_on_first_serve", "first_serves_in"),
    "second_serve_pct": ("second_serves_in", "second_serves_attempted"),
    "second_serve_won_pct": ("points_won_on_second_serve", "second_serves_in"),
    "net_won_pct": ("net_points_won", "net_points_played"),
    "break_points_won_pct": ("break_points_won", "break_points_faced"),
    "points_won_pct": ("points_won", "points_played"),
}


def safe_percent(num: int, den: int) -> str:
    if den <= 0:
        return "--"
    return f"{100.0 * num / den:.1f}%"


def ratio(num: int, den: int) -> str:
    return f"{num}/{den} ({safe_percent(num, den)})"


def summary_lines(s: PlayerStats) -> dict[str, str]:
    """Human-readable stat lines for one player, in display order."""
    return {
        "First serve": ratio(s.first_serves_in, s.first_serves_attempted),
        "1st pts won": ratio(s.points_won_on_first_serve, s.first_serves_in),
        "Second serve": ratio(s.second_serves_in, s.second_serves_attempted),
        "2nd pts won": ratio(s.points_won_on_second_serve, s.second_serves_in),
        "Aces (1st/2nd)": f"{s.aces_first} / {s.aces_second}",
        "Service winners": f"{s.service_winners_first} / {s.service_winners_second}",
        "Double faults": str(s.double_faults),
        "Return vs 1st won": str(s.return_points_won_vs_first),
        "Return vs 2nd won": str(s.return_points_won_vs_second),
        "Return W/UE/FE": f"{s.return_winners}/{s.return_unforced_errors}/{s.return_forced_errors}",
        "Rally winners": str(s.rally_winners),
        "Unforced errors": str(s.unforced_errors),
        "Forced drawn": str(s.forced_errors_drawn),
        "Net points": ratio(s.net_points_won, s.net_points_played),
        "Break points": f"{s.break_points_won}/{s.break_points_faced}",
        "Total points": ratio(s.points_won, s.points_played),
    }


def summary_frame(stats: dict[Player, PlayerStats], names: dict[Player, str]) -> pd.DataFrame:
    """Side-by-side text summary: rows are stat lines, columns are players."""
    return pd.DataFrame({
        names[p]: pd.Series(summary_lines(stats[p])) for p in (Player.ONE, Player.TWO)
    })


def counters_frame(stats: dict[Player, PlayerStats], names: dict[Player, str]) -> pd.DataFrame:
    """Raw counters, one row per player, indexed by player name."""
    rows = [dataclasses.asdict(stats[p]) for p in (Player.ONE, Player.TWO)]
    df = pd.DataFrame(rows, columns=COUNTER_NAMES)
    df.index = pd.Index([names[Player.ONE], names[Player.TWO]], name="player")
    return df


def rate_frame(counters: pd.DataFrame) -> pd.DataFrame:
    """Percentages for each row of a counters frame (NaN where undefined)."""
    out = {}
    for name, (num_col, den_col) in RATES.items():
        num = counters[num_col].to_numpy(dtype=float)
        den = counters[den_col].to_numpy(dtype=float)
        out[name] = np.divide(
            100.0 * num, den, out=np.full_like(num, np.nan), where=den > 0,
        )
    return pd.DataFrame(out, index=counters.index).round(1)


def match_totals_frame(snapshot: MatchSnapshot) -> pd.DataFrame:
    counters = counters_frame(snapshot.state.match_stats, snapshot.player_names)
    return pd.concat([counters, rate_frame(counters)], axis=1)


def per_set_frame(snapshot: MatchSnapshot) -> pd.DataFrame:
    """Counters for every set slot, long format with a 1-based `set` column."""
    frames = []
    for i, stats in enumerate(snapshot.state.set_stats):
        counters = counters_frame(stats, snapshot.player_names)
        df = pd.concat([counters, rate_frame(counters)], axis=1).reset_index()
        df.insert(0, "set", i + 1)
        frames.append(df)
    if not frames:
        return pd.DataFrame(columns=["set", "player", *COUNTER_NAMES, *RATES])
    return pd.concat(frames, ignore_index=True)


def point_log_frame(log_entries: tuple[PointLogEntry, ...], names: dict[Player, str]) -> pd.DataFrame:
    """Chronological point list with 1-based set/game numbers."""
    rows = [{
        "idx": e.index + 1,
        "set": e.set_index + 1,
        "game": e.game_index + 1,
        "tb": e.in_tiebreak,
        "point": e.point_in_game,
        "server": names[e.server],
        "serve_type": e.serve_type.value,
        "winner": names[e.winner],
        "bp": e.was_break_point,
        "gp": e.was_game_point,
        "sp": e.was_set_point,
        "mp": e.was_match_point,
        "event": e.description,
    } for e in log_entries]
    columns = ["idx", "set", "game", "tb", "point", "server", "serve_type",
               "winner", "bp", "gp", "sp", "mp", "event"]
    return pd.DataFrame(rows, columns=columns)
