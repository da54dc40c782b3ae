"""Flagging probable duplicate filings within one source collection."""

from collections.abc import Iterable

from .types import Meeting


def find_duplicates(meetings: Iterable[Meeting]) -> dict[str, list[list[Meeting]]]:
    """Group meetings by collection, then calendar URL, keeping groups of 2+.

    The same calendar URL appearing in different collections is expected
    (several teams attending one session) and is not reported.
    """
    grouped: dict[str, dict[str, list[Meeting]]] = {}
    for meeting in meetings:
        collection = meeting.collection or meeting.issue_url
        by_url = grouped.setdefault(collection, {})
        by_url.setdefault(meeting.calendar_url, []).append(meeting)

    duplicates: dict[str, list[list[Meeting]]] = {}
    for collection, by_url in grouped.items():
        groups = [group for group in by_url.values() if len(group) > 1]
        if groups:
            duplicates[collection] = groups
    return duplicates
