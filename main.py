#!/usr/bin/env python3
"""
Tennis Tracker CLI.

Usage:
    python main.py play
    python main.py play --format 2 --player1 Alice --player2 Bea
    python main.py replay --events points.csv
    python main.py formats
"""

import sys
import logging
import argparse

log = logging.getLogger("tennis_tracker")


def _setup_logging(cfg):
    logging.basicConfig(
        level=getattr(logging, str(cfg["logging"].get("level", "INFO")).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _match_settings(cfg, args):
    """Config values for the match, overridden by CLI flags."""
    m = dict(cfg["match"])
    for key in ("player1", "player2", "location", "first_server", "format"):
        val = getattr(args, key, None)
        if val is not None:
            m[key] = val
    return m


def _new_controller(m):
    from tennis_tracker.core.schema import Player, get_format
    from tennis_tracker.orchestration.controller import MatchController

    return MatchController(
        fmt=get_format(int(m["format"])),
        player1=m["player1"],
        player2=m["player2"],
        location=m.get("location") or "",
        first_server=Player(int(m["first_server"])),
    )


def cmd_play(args, cfg):
    from tennis_tracker.console.session import ConsoleSession

    m = _match_settings(cfg, args)
    session = ConsoleSession(
        _new_controller(m),
        output_dir=cfg["export"]["output_dir"],
        formats=cfg["export"]["formats"],
    )
    session.run()


def cmd_replay(args, cfg):
    from tennis_tracker.core.errors import MatchOverError
    from tennis_tracker.export.report import export_match
    from tennis_tracker.ingestion.events import EventLoader

    loader = EventLoader(args.events)
    events = loader.load()
    for w in loader.validate(events):
        log.warning(w)

    controller = _new_controller(_match_settings(cfg, args))
    applied = 0
    for event in events:
        try:
            controller.apply_point(event)
        except MatchOverError:
            log.warning(f"Match over after {applied} points; {len(events) - applied} events ignored")
            break
        applied += 1

    snapshot = controller.snapshot()
    log.info("Sets: " + " ".join(s.score_string() for s in snapshot.sets))

    out_dir = args.output_dir or cfg["export"]["output_dir"]
    paths = export_match(snapshot, out_dir, cfg["export"]["formats"])
    log.info(f"Replayed {applied} points; wrote {len(paths)} files to {out_dir}")


def cmd_formats(args, cfg):
    from tennis_tracker.core.schema import FORMAT_PRESETS

    for key, fmt in sorted(FORMAT_PRESETS.items()):
        print(f"  {key}) {fmt.describe()}")


def _add_match_flags(parser):
    parser.add_argument("--player1")
    parser.add_argument("--player2")
    parser.add_argument("--location")
    parser.add_argument("--first-server", dest="first_server", type=int, choices=[1, 2])
    parser.add_argument("--format", type=int, choices=[1, 2, 3])


def main():
    from tennis_tracker.orchestration.config import load_config

    p = argparse.ArgumentParser(description="Tennis Tracker CLI")
    p.add_argument("--config", default="configs/default.yaml")
    sub = p.add_subparsers(dest="command")

    play = sub.add_parser("play")
    _add_match_flags(play)

    rp = sub.add_parser("replay")
    rp.add_argument("--events", required=True)
    rp.add_argument("--output-dir", dest="output_dir")
    _add_match_flags(rp)

    sub.add_parser("formats")

    args = p.parse_args()
    if args.command is None:
        p.print_help()
        sys.exit(1)

    cfg = load_config(args.config)
    _setup_logging(cfg)

    if args.command == "play":
        cmd_play(args, cfg)
    elif args.command == "replay":
        cmd_replay(args, cfg)
    elif args.command == "formats":
        cmd_formats(args, cfg)


if __name__ == "__main__":
    main()
