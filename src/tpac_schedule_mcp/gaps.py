"""Free-time computation inside the working day."""

from datetime import date, datetime, time

from .timeutil import DEFAULT_WEEK_START, day_anchor
from .types import Day, Gap, Meeting

WORK_DAY_START = time(9, 0)
WORK_DAY_END = time(18, 0)


def working_window(
    day: Day,
    week_start: date = DEFAULT_WEEK_START,
    start: time = WORK_DAY_START,
    end: time = WORK_DAY_END,
) -> tuple[datetime, datetime]:
    anchor = day_anchor(day, week_start)
    return datetime.combine(anchor.date(), start), datetime.combine(anchor.date(), end)


def compute_gaps(
    meetings: list[Meeting],
    day: Day,
    week_start: date = DEFAULT_WEEK_START,
    work_start: time = WORK_DAY_START,
    work_end: time = WORK_DAY_END,
) -> list[Gap]:
    """Return the free intervals around *meetings* within the working day.

    Meetings may nest or overlap, so the high-water mark only ever moves
    forward.  Time outside the working window is ignored.
    """
    day_start, day_end = working_window(day, week_start, work_start, work_end)
    gaps: list[Gap] = []
    mark = day_start

    for meeting in sorted(meetings, key=lambda m: (m.our_start, m.tag)):
        start = min(meeting.our_start, day_end)
        if start > mark:
            gaps.append(Gap(day=day, start=mark, end=start))
        if meeting.our_end > mark:
            mark = meeting.our_end

    if mark < day_end:
        gaps.append(Gap(day=day, start=mark, end=day_end))

    return gaps
