"""Shared fixtures for tests."""

import json
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pytest

from tpac_schedule_mcp.timeutil import day_anchor, time_string_to_datetime
from tpac_schedule_mcp.types import MatchGrade, Meeting, MeetingKind

CAL = "https://www.w3.org/events/meetings/"

# Published schedule keyed by calendar URL, in the exporter's field names.
SAMPLE_SCHEDULE: dict = {
    f"{CAL}css/": {
        "title": "CSS WG",
        "day": "Monday",
        "startTime": "10:00",
        "endTime": "12:00",
        "room": "Ballroom",
        "kind": "session",
    },
    f"{CAL}webapps/": {
        "title": "WebApps WG",
        "day": "Monday",
        "startTime": "11:30",
        "endTime": "13:00",
        "room": "Room 2",
        "kind": "session",
    },
    f"{CAL}media/": {
        "title": "Media WG",
        "day": "Monday",
        "startTime": "13:05",
        "endTime": "14:00",
        "room": "Room 5",
        "kind": "session",
    },
    f"{CAL}privacy/": {
        "title": "Breakout: Privacy",
        "day": "Tuesday",
        "startTime": "14:00",
        "endTime": "15:00",
        "room": "Room 3",
        "kind": "breakout",
    },
    f"{CAL}a11y/": {
        "title": "Accessibility",
        "day": "Wednesday",
        "startTime": "09:00",
        "endTime": "10:00",
        "room": "Room 4",
        "kind": "session",
    },
}


def _issue(repo: str, number: int, title: str, body: str, *names: str) -> dict:
    return {
        "assignees": [
            {"id": f"id_{n}", "login": n.lower(), "name": n, "databaseId": i}
            for i, n in enumerate(names)
        ],
        "body": body,
        "title": title,
        "url": f"https://github.com/{repo}/issues/{number}",
    }


# Issues as saved from `gh issue list --json assignees,body,title,url`.
SAMPLE_ISSUES: list = [
    _issue("w3c/team-a", 1, "CSS", f"{CAL}css/\nMonday\n10:00 - 12:00\n\nBring slides", "Alice"),
    _issue(
        "w3c/team-a",
        2,
        "WebApps",
        f"{CAL}webapps/\r\nmonday\r\n11:30–13:00\r\n@bob @carol,\r\n\r\nAgenda item 3",
        "Alice",
    ),
    _issue("w3c/team-a", 3, "Media", f"{CAL}media/\nMonday\n13:05 - 14:00\n", "Alice"),
    _issue("w3c/team-a", 4, "Privacy", f"{CAL}privacy/\nTuesday\n14:00 - 14:30\n"),
    _issue("w3c/team-a", 5, "A11y", f"{CAL}a11y/\nWednesday\n15:00 - 16:00\n", "Dave"),
    _issue("w3c/team-a", 6, "Mystery", "https://example.org/nowhere\nFunday\n10:00 - 11:00\n", "Alice"),
    _issue("w3c/team-b", 7, "CSS too", f"{CAL}css/\nMonday\n10:00 - 12:00\n", "Alice"),
    _issue("w3c/team-a", 8, "Privacy again", f"{CAL}privacy/\nTuesday\n14:00 - 15:00\n", "Erin"),
]


@pytest.fixture
def sample_issues_path(tmp_path: Path) -> Path:
    """Write the sample issues to a temp file and return its path."""
    path = tmp_path / "issues.json"
    path.write_text(json.dumps(SAMPLE_ISSUES))
    return path


@pytest.fixture
def sample_schedule_path(tmp_path: Path) -> Path:
    """Write the sample schedule to a temp file and return its path."""
    path = tmp_path / "schedule.json"
    path.write_text(json.dumps(SAMPLE_SCHEDULE))
    return path


def at(day: str, clock: str) -> datetime:
    return time_string_to_datetime(day_anchor(day), clock)


def _make_meeting(
    tag: int,
    start: str = "10:00",
    end: str = "11:00",
    day: str = "monday",
    people: tuple[str, ...] = ("Alice",),
    calendar_url: str | None = None,
    repo: str = "w3c/team-a",
) -> Meeting:
    return Meeting(
        tag=tag,
        kind=MeetingKind.SESSION,
        calendar_title=f"Meeting {tag}",
        our_title=f"Issue {tag}",
        calendar_day=day,
        our_day=day,
        calendar_start=at(day, start),
        our_start=at(day, start),
        calendar_end=at(day, end),
        our_end=at(day, end),
        match=MatchGrade.EXACT,
        room="Room 1",
        people=list(people),
        calendar_url=calendar_url or f"{CAL}{tag}/",
        issue_url=f"https://github.com/{repo}/issues/{tag}",
    )


@pytest.fixture
def make_meeting() -> Callable[..., Meeting]:
    """Factory for valid meetings with declared == published window."""
    return _make_meeting
