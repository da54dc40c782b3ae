"""Joining intent records with calendar records into meetings."""

import itertools
import logging
from datetime import date

from pydantic import ValidationError

from .matching import classify_time_match
from .timeutil import DEFAULT_WEEK_START, day_anchor, is_day, time_string_to_datetime
from .types import CalendarRecord, IntentRecord, IssueRecord, Meeting, PartialMeeting

logger = logging.getLogger(__name__)


class TagSequence:
    """Monotonic source of meeting tags for one reconciliation run.

    Tags start at 1 and are never reused, so a tag identifies a meeting
    (valid or not) for the whole run.
    """

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)
        self.last: int | None = None

    def next(self) -> int:
        self.last = next(self._counter)
        return self.last


def merge_people(assignees: list[str], extra: list[str]) -> list[str]:
    """Union of assignee and extra names, first occurrence wins."""
    return list(dict.fromkeys(name for name in [*assignees, *extra] if name))


def promote(candidate: PartialMeeting | Meeting) -> Meeting | None:
    """Return the candidate as a :class:`Meeting`, or ``None`` if incomplete."""
    if isinstance(candidate, Meeting):
        return candidate
    try:
        return Meeting.model_validate(candidate.model_dump())
    except ValidationError:
        return None


def is_valid_meeting(candidate: PartialMeeting | Meeting) -> bool:
    return promote(candidate) is not None


def build_meeting(
    issue: IssueRecord,
    intent: IntentRecord,
    calendar: CalendarRecord | None,
    tags: TagSequence,
    week_start: date = DEFAULT_WEEK_START,
) -> Meeting | PartialMeeting:
    """Build a meeting from an issue, its parsed intent and its calendar entry.

    *calendar* is ``None`` when the calendar URL is not in the schedule.

    A tag is always consumed, even when the result is only a
    :class:`PartialMeeting`.
    """
    tag = tags.next()
    calendar = calendar or CalendarRecord()

    calendar_day = calendar.day.lower() if calendar.day else None
    # Fall back to our day so a stray calendar day still yields comparable times
    anchor = day_anchor(calendar_day if is_day(calendar_day) else intent.day, week_start)
    calendar_start = time_string_to_datetime(anchor, calendar.start)
    calendar_end = time_string_to_datetime(anchor, calendar.end)

    match = None
    if calendar_start and calendar_end and intent.start and intent.end:
        match = classify_time_match(calendar_start, calendar_end, intent.start, intent.end)

    partial = PartialMeeting(
        tag=tag,
        kind=calendar.kind,
        calendar_title=calendar.title,
        our_title=issue.title,
        calendar_day=calendar_day,
        our_day=intent.day,
        calendar_start=calendar_start,
        our_start=intent.start,
        calendar_end=calendar_end,
        our_end=intent.end,
        match=match,
        room=calendar.room,
        people=merge_people([a.display_name for a in issue.assignees], intent.extra_people),
        calendar_url=intent.calendar_url,
        issue_url=issue.url,
        notes=intent.notes or None,
    )

    meeting = promote(partial)
    if meeting is None:
        logger.debug("Meeting %d from %s is incomplete", tag, issue.url)
        return partial
    return meeting
