"""Interval helpers -- durations are seconds or ``timedelta``."""

from __future__ import annotations

from datetime import timedelta

Interval = float | timedelta


def to_seconds(interval: Interval) -> float:
    """Return *interval* as a float number of seconds.

    Zero and negative values pass through unchanged; callers own the
    meaning of such durations.
    """
    if isinstance(interval, timedelta):
        return interval.total_seconds()
    return float(interval)


def from_seconds(seconds: float) -> timedelta:
    """Build a ``timedelta`` from *seconds*, truncated to whole milliseconds."""
    return timedelta(milliseconds=int(seconds * 1000))
