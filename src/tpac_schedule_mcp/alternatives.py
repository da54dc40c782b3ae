"""Suggesting stand-in attendees for clashing meetings."""

from collections.abc import Collection, Mapping

from .types import Gap, Meeting

GapMap = Mapping[str, Mapping[str, list[Gap]]]


def find_alternatives(
    meeting: Meeting,
    gaps_by_person: GapMap,
    allow_list: Collection[str] | None = None,
) -> list[str]:
    """Append to ``meeting.alternatives`` everyone free for the whole meeting.

    *gaps_by_person* maps a name to that person's gaps per day and must be
    complete for every attendee before this is called.  When *allow_list*
    is given only the people on it are considered.

    Returns the meeting's alternatives list.
    """
    for person, gaps_by_day in gaps_by_person.items():
        if person in meeting.people or person in meeting.alternatives:
            continue
        if allow_list is not None and person not in allow_list:
            continue
        if any(
            gap.contains(meeting.our_start, meeting.our_end)
            for gap in gaps_by_day.get(meeting.our_day, [])
        ):
            meeting.alternatives.append(person)

    return meeting.alternatives
