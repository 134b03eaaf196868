"""
Tennis Tracker: point-by-point match scoring and statistics.

Tracks a match point by point, derives games, sets and the match result
under the supported formats, and keeps match-level and per-set statistics
with full undo.
"""

__version__ = "0.1.0"
