"""Loading cached issue and schedule JSON files."""

import json
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .types import CalendarRecord, IssueRecord, MeetingKind

logger = logging.getLogger(__name__)

ScheduleLookup = Callable[[str], CalendarRecord | None]

# Field names used by the schedule exporter, mapped onto CalendarRecord
_SCHEDULE_ALIASES = {
    "startTime": "start",
    "endTime": "end",
    "start_time": "start",
    "end_time": "end",
}

_KINDS = {kind.value for kind in MeetingKind}


def _read_json(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except Exception as e:
        logger.error("Error loading %s: %s", path, e)
        return None


def load_issues(issues_path: str) -> list[IssueRecord]:
    """Load issues saved from ``gh issue list --json assignees,body,title,url``.

    The file may hold one list, or a list of lists (one per repo).  Records
    that fail validation are logged and skipped.

    Returns:
        Parsed issues (empty if the file is missing or unparseable).
    """
    path = Path(issues_path)
    if not path.exists():
        logger.warning("Issues file not found: %s", issues_path)
        return []

    raw = _read_json(path)
    if not isinstance(raw, list):
        return []

    flat: list[Any] = []
    for item in raw:
        flat.extend(item if isinstance(item, list) else [item])

    issues: list[IssueRecord] = []
    for item in flat:
        try:
            issues.append(IssueRecord.model_validate(item))
        except ValidationError as e:
            logger.error("Error parsing issue %r: %s", item, e)
    return issues


def _parse_calendar_record(data: dict[str, Any]) -> CalendarRecord:
    fields = {_SCHEDULE_ALIASES.get(k, k): v for k, v in data.items()}
    if isinstance(fields.get("day"), str):
        fields["day"] = fields["day"].lower()
    kind = fields.get("kind")
    if isinstance(kind, str):
        kind = kind.lower()
    fields["kind"] = kind if kind in _KINDS else None
    return CalendarRecord.model_validate(
        {k: v for k, v in fields.items() if k in CalendarRecord.model_fields}
    )


def load_schedule(schedule_path: str) -> dict[str, CalendarRecord]:
    """Load the published schedule keyed by calendar URL.

    Accepts either a mapping of ``url -> entry`` or a list of entries each
    carrying a ``url`` (or ``calendarUrl``) key.
    """
    path = Path(schedule_path)
    if not path.exists():
        logger.warning("Schedule file not found: %s", schedule_path)
        return {}

    raw = _read_json(path)
    if isinstance(raw, dict):
        entries = [(url, data) for url, data in raw.items()]
    elif isinstance(raw, list):
        entries = [
            (data.get("url") or data.get("calendarUrl"), data)
            for data in raw
            if isinstance(data, dict)
        ]
    else:
        return {}

    schedule: dict[str, CalendarRecord] = {}
    for url, data in entries:
        if not url or not isinstance(data, dict):
            logger.error("Skipping schedule entry without a URL: %r", data)
            continue
        try:
            schedule[url] = _parse_calendar_record(data)
        except ValidationError as e:
            logger.error("Error parsing schedule entry %s: %s", url, e)
    return schedule


def schedule_lookup(schedule: dict[str, CalendarRecord]) -> ScheduleLookup:
    """Wrap a loaded schedule as a lookup by calendar URL."""
    return schedule.get


def get_mtime(path: str) -> float:
    """Return the modification time of *path*, or 0.0 if missing."""
    try:
        return os.path.getmtime(path)
    except OSError:
        return 0.0
