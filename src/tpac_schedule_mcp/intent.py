"""Parsing of free-text issue bodies into intent records."""

import logging
import re
from datetime import date

from .timeutil import DEFAULT_WEEK_START, day_anchor, is_day, parse_time_range
from .types import IntentRecord

logger = logging.getLogger(__name__)

# The GitHub API mixes \r\n and \n line endings in issue bodies
_LINE_BREAK = re.compile(r"\r?\n")


def _split_names(line: str) -> list[str]:
    names: list[str] = []
    for token in line.split(" "):
        name = token.strip("@,")
        if name:
            names.append(name)
    return names


def parse_intent(body: str, week_start: date = DEFAULT_WEEK_START) -> IntentRecord:
    """Parse an issue body into an :class:`IntentRecord`.

    Expected layout, one item per line::

        <calendar URL>
        <weekday>
        <HH:MM - HH:MM>
        [@extra @people]
        [<blank line, required after the people line>]
        <free-text notes...>

    Missing or malformed lines leave the matching fields unset; this
    function never raises on bad input.
    """
    lines = _LINE_BREAK.split(body or "")

    def take() -> str | None:
        return lines.pop(0) if lines else None

    calendar_url = (take() or "").strip() or None

    raw_day = (take() or "").strip().lower()
    day = raw_day if is_day(raw_day) else None
    if day is None:
        logger.debug("Unrecognised day %r for %s", raw_day, calendar_url)

    anchor = day_anchor(day, week_start)
    start, end = parse_time_range(anchor, take())

    extra_people: list[str] = []
    people_line = take()
    if people_line and people_line.strip():
        extra_people = _split_names(people_line.strip())
        if lines and not lines[0].strip():
            lines.pop(0)
        elif lines:
            logger.debug("Missing blank line after people for %s", calendar_url)

    return IntentRecord(
        calendar_url=calendar_url,
        day=day,
        start=start,
        end=end,
        extra_people=extra_people,
        notes="\n".join(lines),
    )
