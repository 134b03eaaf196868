"""Integration test: CSV replay through the controller to exported files."""

import argparse
import json

import pytest

import main
from tennis_tracker.core.errors import MatchOverError
from tennis_tracker.core.schema import Player, PointEvent, get_format
from tennis_tracker.orchestration.controller import MatchController


def _make_cfg(formats=("text", "json", "csv"), fmt=1):
    return {
        "match": {"player1": "Ana", "player2": "Bea", "location": "Club",
                  "first_server": 1, "format": fmt},
        "export": {"output_dir": "exports", "formats": list(formats)},
        "logging": {"level": "INFO"},
    }


def _make_args(events, output_dir, **overrides):
    args = dict(events=str(events), output_dir=str(output_dir), player1=None,
                player2=None, location=None, first_server=None, format=None)
    args.update(overrides)
    return argparse.Namespace(**args)


def _write_events(tmp_path, rows):
    p = tmp_path / "points.csv"
    p.write_text("serve,winner\n" + "".join(f"1st,{w}\n" for w in rows))
    return p


class TestReplay:
    def test_straight_sets(self, tmp_path):
        events = _write_events(tmp_path, [1] * 49)
        out = tmp_path / "out"
        main.cmd_replay(_make_args(events, out), _make_cfg())

        files = sorted(f.name for f in out.iterdir())
        assert len(files) == 5
        data = json.loads(next(out.glob("*.json")).read_text())
        assert data["winner"] == 1
        assert [s["games"] for s in data["sets"]] == [{"p1": 6, "p2": 0}, {"p1": 6, "p2": 0}]
        assert len(data["log"]) == 48

    def test_cli_flags_override_config(self, tmp_path):
        events = _write_events(tmp_path, [2] * 4)
        out = tmp_path / "out"
        main.cmd_replay(
            _make_args(events, out, player1="Cara", first_server=2),
            _make_cfg(formats=["json"]),
        )
        data = json.loads(next(out.glob("Cara_vs_Bea_*.json")).read_text())
        assert data["winner"] is None
        assert data["log"][0]["server"] == 2
        assert data["sets"][0]["games"] == {"p1": 0, "p2": 1}

    def test_match_tiebreak_format(self, tmp_path):
        events = _write_events(tmp_path, [1] * 24 + [2] * 24 + [2] * 10)
        out = tmp_path / "out"
        main.cmd_replay(_make_args(events, out, format=2), _make_cfg(formats=["json"]))
        data = json.loads(next(out.glob("*.json")).read_text())
        assert data["winner"] == 2
        assert data["sets"][-1]["is_match_tiebreak"]
        assert data["sets"][-1]["tiebreak_points"] == {"p1": 0, "p2": 10}


class TestFormatsCommand:
    def test_lists_presets(self, capsys):
        main.cmd_formats(None, _make_cfg())
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 3
        assert "deciding TB10" in lines[1]


class TestFullMatch:
    def test_three_sets_with_tiebreak_and_undo(self):
        ctl = MatchController(get_format(1), "Ana", "Bea")
        A, B = Player.ONE, Player.TWO

        for _ in range(24):
            ctl.apply_point(PointEvent.point_to(A))
        for _ in range(6):
            for p in (A, B):
                for _ in range(4):
                    ctl.apply_point(PointEvent.point_to(p))
        for _ in range(5):
            ctl.apply_point(PointEvent.point_to(A))
            ctl.apply_point(PointEvent.point_to(B))
        ctl.apply_point(PointEvent.point_to(B))
        ctl.apply_point(PointEvent.point_to(B))

        assert [s.score_string() for s in ctl.state.sets[:2]] == ["6-0", "6-7(5)"]

        ctl.apply_point(PointEvent.ace())
        before = ctl.snapshot()
        ctl.apply_point(PointEvent.double_fault())
        ctl.undo()
        assert ctl.state == before.state

        for _ in range(24):
            ctl.apply_point(PointEvent.point_to(A))
        assert ctl.state.winner is A
        assert [s.score_string() for s in ctl.state.sets] == ["6-0", "6-7(5)", "6-0"]
        ms = ctl.state.match_stats
        assert ms[A].points_played == ms[B].points_played == len(ctl.state.log)
        assert sum(stats[A].points_played for stats in ctl.state.set_stats) == len(ctl.state.log)
        with pytest.raises(MatchOverError):
            ctl.apply_point(PointEvent.ace())
