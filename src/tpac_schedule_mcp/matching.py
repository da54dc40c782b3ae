"""Classification of declared attendance windows against the published ones."""

from datetime import datetime

from .types import MatchGrade


def _compare(a: datetime, b: datetime) -> int:
    return (a > b) - (a < b)


def classify_time_match(
    calendar_start: datetime,
    calendar_end: datetime,
    our_start: datetime,
    our_end: datetime,
) -> MatchGrade:
    """Grade how the declared window relates to the published window.

    ``EXACT`` when the windows are identical, ``SUBSET`` when the declared
    window sits inside the published one (attending only part of it), and
    ``NOPE`` otherwise, which usually means the session has been moved.
    """
    start = _compare(calendar_start, our_start)
    end = _compare(calendar_end, our_end)

    if start == 0 and end == 0:
        return MatchGrade.EXACT
    if start <= 0 and end >= 0:
        return MatchGrade.SUBSET
    return MatchGrade.NOPE
