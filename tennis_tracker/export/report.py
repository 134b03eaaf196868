"""
Match export: text summary, JSON document and CSV bundle.

All exporters read a MatchSnapshot only. Files share one base name,
`<player1>_vs_<player2>_<timestamp>`, so a match's outputs sort together.
"""

import dataclasses
import json
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from tennis_tracker.core.interfaces import BaseExporter
from tennis_tracker.core.schema import MatchSnapshot, Player
from tennis_tracker.stats.summary import (
    match_totals_frame, per_set_frame, point_log_frame, summary_frame,
)

log = logging.getLogger(__name__)

_REGISTRY: dict[str, type] = {}


def register(name: str):
    """Decorator to register an exporter class."""
    def wrapper(cls):
        _REGISTRY[name] = cls
        return cls
    return wrapper


def create_exporter(name: str) -> BaseExporter:
    if name not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY.keys()))
        raise ValueError(f"Unknown export format '{name}'. Available: {available}")
    return _REGISTRY[name]()


def list_exporters() -> list[str]:
    return sorted(_REGISTRY.keys())


def export_basename(snapshot: MatchSnapshot, when: Optional[datetime] = None) -> str:
    stamp = (when or datetime.now()).strftime("%Y-%m-%d_%H-%M-%S")
    base = f"{snapshot.state.player1}_vs_{snapshot.state.player2}_{stamp}"
    return base.replace(" ", "_")


def export_match(
    snapshot: MatchSnapshot,
    output_dir: str = "exports",
    formats: Iterable[str] = ("text", "json", "csv"),
    when: Optional[datetime] = None,
) -> list[str]:
    """Write the requested formats. Returns every path written."""
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    base = export_basename(snapshot, when)
    paths = []
    for name in formats:
        paths.extend(create_exporter(name).export(snapshot, out, base))
    return paths


# ── Text ───────────────────────────────────────────────────────────────

def _point_line(e, names: dict[Player, str]) -> str:
    return (
        f"{e.index + 1} | {e.set_index + 1} | {e.game_index + 1} | "
        f"{'Y' if e.in_tiebreak else 'N'} | {names[e.server]} | {e.serve_type.value} | "
        f"{names[e.winner]} | {e.pressure_tags} | {e.description}"
    )


def format_text_report(snapshot: MatchSnapshot) -> str:
    """Match summary as plain text: result, totals, per-set stats, point log."""
    state = snapshot.state
    names = snapshot.player_names

    if state.match_over:
        result = (
            f"Winner: {state.name_of(state.winner)} "
            f"({state.sets_won[Player.ONE]}-{state.sets_won[Player.TWO]} in sets)"
        )
    else:
        result = "Match not completed"

    lines = [
        "Match Summary",
        "=============",
        f"Players: {state.player1} vs {state.player2}",
        f"Location: {state.location}",
        f"Format: {state.format.describe()}",
        result,
        "",
        "Final Set Scores:",
    ]
    for i, s in enumerate(state.sets):
        if s.is_match_tiebreak:
            lines.append(f"  Set {i + 1}: match tiebreak {s.score_string()}")
            continue
        row = f"  Set {i + 1}: {s.games[Player.ONE]}-{s.games[Player.TWO]}"
        if s.tiebreak_played:
            row += f" (TB {s.tiebreak_points[Player.ONE]}-{s.tiebreak_points[Player.TWO]})"
        lines.append(row)

    lines += ["", "Match Totals", "-" * 40,
              summary_frame(state.match_stats, names).to_string()]

    lines += ["", "Per-set stats", "-------------"]
    for i, stats in enumerate(state.set_stats):
        lines += [f"Set {i + 1}:", summary_frame(stats, names).to_string(), ""]

    lines += ["Point-by-point log", "-------------------",
              "# | Set | Game | TB | Server | Serve | Winner | BP/GP/SP/MP | Event"]
    lines += [_point_line(e, names) for e in snapshot.log]
    return "\n".join(lines) + "\n"


@register("text")
class TextExporter(BaseExporter):
    suffix = ".txt"

    def export(self, snapshot, output_dir, base_name):
        path = Path(output_dir) / f"{base_name}{self.suffix}"
        with open(path, "w") as f:
            f.write(format_text_report(snapshot))
        log.info(f"Saved text summary: {path}")
        return [str(path)]


# ── JSON ───────────────────────────────────────────────────────────────

def _make_serializable(obj):
    """Convert enums, dataclasses and player-keyed dicts to JSON-native values."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _make_serializable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, dict):
        return {
            (f"p{k.value}" if isinstance(k, Player) else k): _make_serializable(v)
            for k, v in obj.items()
        }
    if isinstance(obj, (list, tuple)):
        return [_make_serializable(v) for v in obj]
    if isinstance(obj, Enum):
        return obj.value
    return obj


def match_to_dict(snapshot: MatchSnapshot) -> dict:
    state = snapshot.state
    return {
        "players": [state.player1, state.player2],
        "location": state.location,
        "format": _make_serializable(state.format),
        "sets": _make_serializable(state.sets),
        "sets_won": _make_serializable(state.sets_won),
        "winner": state.winner.value if state.winner else None,
        "ended_early": state.ended_early,
        "match_stats": _make_serializable(state.match_stats),
        "per_set_stats": _make_serializable(state.set_stats),
        "log": _make_serializable(snapshot.log),
    }


@register("json")
class JsonExporter(BaseExporter):
    suffix = ".json"

    def export(self, snapshot, output_dir, base_name):
        path = Path(output_dir) / f"{base_name}{self.suffix}"
        data = match_to_dict(snapshot)
        data["generated_at"] = datetime.now().isoformat()
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
        log.info(f"Saved JSON data: {path}")
        return [str(path)]


# ── CSV ────────────────────────────────────────────────────────────────

@register("csv")
class CsvExporter(BaseExporter):
    suffix = ".csv"

    def export(self, snapshot, output_dir, base_name):
        out = Path(output_dir)
        totals = out / f"{base_name}_match_totals.csv"
        per_set = out / f"{base_name}_per_set_stats.csv"
        points = out / f"{base_name}_points.csv"

        match_totals_frame(snapshot).to_csv(totals)
        per_set_frame(snapshot).to_csv(per_set, index=False)
        point_log_frame(snapshot.log, snapshot.player_names).to_csv(points, index=False)

        log.info(f"Saved CSVs: {totals.name}, {per_set.name}, {points.name}")
        return [str(totals), str(per_set), str(points)]
