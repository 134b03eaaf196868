"""
Cell helpers shared by the event loaders.

Headers may come in several spellings, and blank cells read as missing.
"""

import logging

import pandas as pd

log = logging.getLogger(__name__)


def find_column(df: pd.DataFrame, candidates: list[str]) -> str | None:
    """Name of the first candidate header present in df."""
    return next((c for c in candidates if c in df.columns), None)


def get_value(row: pd.Series, candidates: list[str]):
    """First non-blank cell among the candidate headers, else None."""
    for c in candidates:
        if c not in row.index or pd.isna(row[c]):
            continue
        if str(row[c]).strip():
            return row[c]
    return None


def safe_int(val, default: int = 0) -> int:
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return default
    try:
        return int(float(val))
    except (ValueError, TypeError):
        return default


def safe_str(val, default: str = "") -> str:
    """Lower-cased, stripped text of a cell; default when missing."""
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return default
    return str(val).strip().lower()
