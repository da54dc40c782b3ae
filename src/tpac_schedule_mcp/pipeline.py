"""End-to-end reconciliation of issues against the published schedule."""

import logging
from dataclasses import dataclass, field
from datetime import date, time, timedelta

from .alternatives import find_alternatives
from .builder import TagSequence, build_meeting
from .clashes import DEFAULT_BUFFER, ClashingPairSet, detect_clashes
from .duplicates import find_duplicates
from .gaps import WORK_DAY_END, WORK_DAY_START, compute_gaps
from .intent import parse_intent
from .sources import ScheduleLookup
from .timeutil import DAYS, DEFAULT_WEEK_START
from .types import (
    AgendaEntry,
    FreeSlot,
    Gap,
    IssueRecord,
    Meeting,
    MeetingSlot,
    PartialMeeting,
)

logger = logging.getLogger(__name__)


def chronological(meetings: list[Meeting]) -> list[Meeting]:
    return sorted(meetings, key=lambda m: (m.our_start, m.tag))


@dataclass
class ReconciliationReport:
    """Everything derived from one run over the issues."""

    meetings: list[Meeting] = field(default_factory=list)
    partial_meetings: list[PartialMeeting] = field(default_factory=list)
    moved: list[Meeting] = field(default_factory=list)
    meetings_by_person: dict[str, dict[str, list[Meeting]]] = field(default_factory=dict)
    definite_clashes: dict[str, ClashingPairSet] = field(default_factory=dict)
    near_clashes: dict[str, ClashingPairSet] = field(default_factory=dict)
    gaps: dict[str, dict[str, list[Gap]]] = field(default_factory=dict)
    duplicates: dict[str, list[list[Meeting]]] = field(default_factory=dict)
    unassigned: list[Meeting] = field(default_factory=list)

    @property
    def people(self) -> list[str]:
        return sorted(self.gaps)

    def get_meeting(self, tag: int) -> Meeting | PartialMeeting | None:
        for meeting in [*self.meetings, *self.partial_meetings]:
            if meeting.tag == tag:
                return meeting
        return None

    def agenda(self, person: str, day: str) -> list[AgendaEntry]:
        """Meetings and gaps for one person on one day, by start time."""
        entries: list[AgendaEntry] = [
            MeetingSlot(meeting=m) for m in self.meetings_by_person.get(person, {}).get(day, [])
        ]
        entries.extend(FreeSlot(gap=g) for g in self.gaps.get(person, {}).get(day, []))
        return sorted(entries, key=lambda entry: entry.start)


def group_by_person_and_day(meetings: list[Meeting]) -> dict[str, dict[str, list[Meeting]]]:
    grouped: dict[str, dict[str, list[Meeting]]] = {}
    for meeting in chronological(meetings):
        for name in meeting.people:
            grouped.setdefault(name, {}).setdefault(meeting.our_day, []).append(meeting)
    return grouped


def reconcile(
    issues: list[IssueRecord],
    lookup: ScheduleLookup,
    week_start: date = DEFAULT_WEEK_START,
    buffer: timedelta = DEFAULT_BUFFER,
    work_start: time = WORK_DAY_START,
    work_end: time = WORK_DAY_END,
    allow_list: list[str] | None = None,
) -> ReconciliationReport:
    """Build meetings from *issues* and derive clashes, gaps and duplicates.

    Args:
        issues: Intent-bearing issue records.
        lookup: Returns the published entry for a calendar URL, or ``None``.
        week_start: Date of the Monday of the meeting week.
        buffer: Meetings closer than this are near clashes.
        work_start: Start of the working day used for gaps.
        work_end: End of the working day used for gaps.
        allow_list: Restricts who may be suggested as a stand-in.
    """
    report = ReconciliationReport()
    tags = TagSequence()

    meetings: list[Meeting] = []
    for issue in issues:
        last_tag = tags.last
        try:
            intent = parse_intent(issue.body, week_start)
            calendar = lookup(intent.calendar_url) if intent.calendar_url else None
            if calendar is None:
                logger.info("No calendar entry for %r (%s)", intent.calendar_url, issue.url)
            result = build_meeting(issue, intent, calendar, tags, week_start)
        except Exception as e:
            logger.error("Error building meeting from %s: %s", issue.url, e)
            report.partial_meetings.append(
                PartialMeeting(
                    tag=tags.last if tags.last != last_tag else tags.next(),
                    our_title=issue.title or None,
                    issue_url=issue.url or None,
                    calendar_url=(issue.body or "").partition("\n")[0].strip() or None,
                    notes=issue.body or None,
                )
            )
            continue
        if isinstance(result, Meeting):
            meetings.append(result)
        else:
            report.partial_meetings.append(result)

    report.meetings = chronological(meetings)
    report.moved = [m for m in report.meetings if not m.on_schedule]
    report.unassigned = [m for m in report.meetings if not m.people]

    on_schedule = [m for m in report.meetings if m.on_schedule]
    report.meetings_by_person = group_by_person_and_day(on_schedule)

    for person, by_day in report.meetings_by_person.items():
        definite, near = ClashingPairSet(), ClashingPairSet()
        for day_meetings in by_day.values():
            detect_clashes(day_meetings, buffer, definite, near)
        if definite:
            report.definite_clashes[person] = definite
        if near:
            report.near_clashes[person] = near

    for person, by_day in report.meetings_by_person.items():
        report.gaps[person] = {
            day: compute_gaps(by_day.get(day, []), day, week_start, work_start, work_end)
            for day in DAYS
        }

    clashing: dict[int, Meeting] = {}
    for pairs in report.definite_clashes.values():
        for meeting in pairs.meetings():
            clashing.setdefault(meeting.tag, meeting)
    for meeting in chronological(list(clashing.values())):
        find_alternatives(meeting, report.gaps, allow_list)

    report.duplicates = find_duplicates(report.meetings)

    logger.info(
        "Reconciled %d issues: %d meetings, %d invalid, %d moved",
        len(issues),
        len(report.meetings),
        len(report.partial_meetings),
        len(report.moved),
    )
    return report
