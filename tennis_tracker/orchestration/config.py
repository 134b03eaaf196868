"""Config loading with validation."""

import yaml
from pathlib import Path

REQUIRED_KEYS = ("match", "export", "logging")


def load_config(path: str = "configs/default.yaml") -> dict:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    with open(p) as f:
        cfg = yaml.safe_load(f) or {}

    # Validate required keys
    for key in REQUIRED_KEYS:
        if key not in cfg:
            raise ValueError(f"Missing config key: {key}")
    if cfg["match"].get("first_server", 1) not in (1, 2):
        raise ValueError(f"match.first_server must be 1 or 2, got {cfg['match']['first_server']}")
    return cfg
