"""Errors raised by the scoring core."""


class MatchOverError(RuntimeError):
    """A point was submitted after the match finished or was ended."""
