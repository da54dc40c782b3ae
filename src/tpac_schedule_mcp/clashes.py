"""Pairwise clash detection between one attendee's meetings."""

from collections.abc import Iterable, Iterator
from datetime import datetime, timedelta

from .types import ClashStatus, Meeting

DEFAULT_BUFFER = timedelta(minutes=10)


def sorted_pair(meetings: Iterable[Meeting]) -> tuple[Meeting, Meeting]:
    """Order two meetings by declared start, then by tag.

    Raises:
        ValueError: if not given exactly two meetings.
    """
    pair = sorted(meetings, key=lambda m: (m.our_start, m.tag))
    if len(pair) != 2:
        raise ValueError(f"Expected a pair of meetings, got {len(pair)}")
    return pair[0], pair[1]


def same_booking(a: Meeting, b: Meeting) -> bool:
    """True when both entries describe the same real booking.

    This happens when one meeting is tracked by issues in two repos.
    """
    return (
        a.calendar_url == b.calendar_url
        and a.our_start == b.our_start
        and a.our_end == b.our_end
    )


def _overlaps(m: Meeting, start: datetime, end: datetime) -> bool:
    # m starts no later than the other window (see sorted_pair)
    if start <= m.our_start <= end:
        return True
    if start < m.our_end <= end:
        return True
    return m.our_end > end


def classify_clash(a: Meeting, b: Meeting, buffer: timedelta = DEFAULT_BUFFER) -> ClashStatus:
    """Classify two meetings of one attendee.

    A meeting ending exactly when the other starts is not a hard clash; it
    is a near clash when the buffer is non-zero.
    """
    if same_booking(a, b):
        return ClashStatus.NONE

    m, o = sorted_pair((a, b))
    if _overlaps(m, o.our_start, o.our_end):
        return ClashStatus.DEFO
    if _overlaps(m, o.our_start - buffer, o.our_end + buffer):
        return ClashStatus.NEAR
    return ClashStatus.NONE


class ClashingPairSet:
    """Unordered, deduplicated pairs of clashing meetings for one attendee."""

    def __init__(self) -> None:
        self._pairs: dict[tuple[int, int], tuple[Meeting, Meeting]] = {}

    @staticmethod
    def key(a: Meeting, b: Meeting) -> tuple[int, int]:
        return (min(a.tag, b.tag), max(a.tag, b.tag))

    def add(self, a: Meeting, b: Meeting) -> None:
        key = self.key(a, b)
        if key not in self._pairs:
            self._pairs[key] = sorted_pair((a, b))

    def __contains__(self, pair: tuple[Meeting, Meeting]) -> bool:
        return self.key(*pair) in self._pairs

    def __iter__(self) -> Iterator[tuple[Meeting, Meeting]]:
        return iter(self._pairs.values())

    def __len__(self) -> int:
        return len(self._pairs)

    def meetings(self) -> list[Meeting]:
        """Every meeting involved in at least one pair, chronologically."""
        seen: dict[int, Meeting] = {}
        for a, b in self._pairs.values():
            seen.setdefault(a.tag, a)
            seen.setdefault(b.tag, b)
        return sorted(seen.values(), key=lambda m: (m.our_start, m.tag))


def detect_clashes(
    meetings: list[Meeting],
    buffer: timedelta = DEFAULT_BUFFER,
    definite: ClashingPairSet | None = None,
    near: ClashingPairSet | None = None,
) -> tuple[ClashingPairSet, ClashingPairSet]:
    """Compare every pair of one attendee's meetings on one day.

    Results are added to *definite* and *near* (created when not given) so
    a caller can accumulate one attendee's days into the same sets.
    """
    definite = definite if definite is not None else ClashingPairSet()
    near = near if near is not None else ClashingPairSet()

    for meeting in meetings:
        for other in meetings:
            if meeting.tag == other.tag:
                continue
            status = classify_clash(meeting, other, buffer)
            if status is ClashStatus.DEFO:
                definite.add(meeting, other)
            elif status is ClashStatus.NEAR:
                near.add(meeting, other)

    return definite, near
