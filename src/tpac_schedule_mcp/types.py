"""Data models for intent records, calendar records and reconciled meetings."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, model_validator

Day = Literal["monday", "tuesday", "wednesday", "thursday", "friday"]

NonEmptyStr = Annotated[str, Field(min_length=1)]


class MatchGrade(str, Enum):
    """How closely the declared window agrees with the published one."""

    EXACT = "Exact"
    SUBSET = "Subset"
    NOPE = "Nope"


class ClashStatus(str, Enum):
    NONE = "No clash"
    DEFO = "CLASHES!"
    NEAR = "Mind Gap"


class MeetingKind(str, Enum):
    SESSION = "session"
    BREAKOUT = "breakout"


class Assignee(BaseModel):
    """An issue assignee as returned by ``gh issue list --json assignees``."""

    model_config = ConfigDict(extra="ignore")

    login: str = ""
    name: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.login


class IssueRecord(BaseModel):
    """One intent-bearing issue from the tracker."""

    model_config = ConfigDict(extra="ignore")

    assignees: list[Assignee] = []
    body: str = ""
    title: str = ""
    url: str = ""


class IntentRecord(BaseModel):
    """Structured fields parsed out of an issue body.  Any field may be missing."""

    calendar_url: str | None = None
    day: Day | None = None
    start: datetime | None = None
    end: datetime | None = None
    extra_people: list[str] = []
    notes: str = ""


class CalendarRecord(BaseModel):
    """Published schedule entry for one calendar URL."""

    title: str | None = None
    day: str | None = None
    start: str | None = None
    end: str | None = None
    room: str | None = None
    kind: MeetingKind | None = None


def collection_from_url(url: str | None) -> str | None:
    """Return ``owner/repo`` for a GitHub issue URL, or ``None``."""
    if not url:
        return None
    parts = [p for p in urlparse(url).path.split("/") if p]
    if len(parts) < 2:
        return None
    return f"{parts[0]}/{parts[1]}"


class PartialMeeting(BaseModel):
    """A meeting candidate that may be missing required fields.

    Kept for diagnostic display when an issue could not be reconciled.
    """

    tag: int | None = None
    kind: MeetingKind | None = None
    calendar_title: str | None = None
    our_title: str | None = None
    calendar_day: str | None = None
    our_day: Day | None = None
    calendar_start: datetime | None = None
    our_start: datetime | None = None
    calendar_end: datetime | None = None
    our_end: datetime | None = None
    match: MatchGrade | None = None
    room: str | None = None
    people: list[str] | None = None
    calendar_url: str | None = None
    issue_url: str | None = None
    alternatives: list[str] = []
    notes: str | None = None

    @property
    def collection(self) -> str | None:
        return collection_from_url(self.issue_url)


class Meeting(BaseModel):
    """A fully reconciled meeting.

    Every field except ``alternatives`` and ``notes`` is required; string
    fields must be non-empty.  ``people`` may be empty (unassigned meeting).
    """

    tag: int = Field(ge=1)
    kind: MeetingKind
    calendar_title: NonEmptyStr
    our_title: NonEmptyStr
    calendar_day: Day
    our_day: Day
    calendar_start: datetime
    our_start: datetime
    calendar_end: datetime
    our_end: datetime
    match: MatchGrade
    room: NonEmptyStr
    people: list[str]
    calendar_url: NonEmptyStr
    issue_url: NonEmptyStr
    alternatives: list[str] = []
    notes: str | None = None

    @model_validator(mode="after")
    def _check_windows(self) -> "Meeting":
        if self.our_end <= self.our_start:
            raise ValueError("declared window ends before it starts")
        if self.calendar_end <= self.calendar_start:
            raise ValueError("calendar window ends before it starts")
        return self

    @property
    def collection(self) -> str | None:
        return collection_from_url(self.issue_url)

    @property
    def on_schedule(self) -> bool:
        return self.match is not MatchGrade.NOPE


class Gap(BaseModel):
    """A free interval for one attendee within the working day."""

    day: Day
    start: datetime
    end: datetime

    def contains(self, start: datetime, end: datetime) -> bool:
        return self.start <= start and end <= self.end


class MeetingSlot(BaseModel):
    type: Literal["meeting"] = "meeting"
    meeting: Meeting

    @property
    def start(self) -> datetime:
        return self.meeting.our_start


class FreeSlot(BaseModel):
    type: Literal["gap"] = "gap"
    gap: Gap

    @property
    def start(self) -> datetime:
        return self.gap.start


AgendaEntry = Annotated[MeetingSlot | FreeSlot, Field(discriminator="type")]
