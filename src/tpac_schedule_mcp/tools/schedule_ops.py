"""MCP tools reporting on the reconciled TPAC schedule."""

from typing import Annotated, Any, Literal

from fastmcp import Context
from pydantic import Field

from tpac_schedule_mcp.clashes import ClashingPairSet
from tpac_schedule_mcp.pipeline import ReconciliationReport
from tpac_schedule_mcp.server import build_report, mcp, source_mtimes
from tpac_schedule_mcp.timeutil import DAYS, format_clock, pretty_day
from tpac_schedule_mcp.types import Day, MatchGrade, Meeting, MeetingSlot, PartialMeeting

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_report(ctx: Context) -> ReconciliationReport:
    """Return the report from lifespan context.

    Re-runs the reconciliation when either source file has been modified
    since the last run, so edited issues show up without a restart.
    """
    lc: dict[str, Any] = ctx.request_context.lifespan_context
    config = lc["config"]
    current = source_mtimes(config)
    if current != lc["mtimes"]:
        lc["report"] = build_report(config)
        lc["mtimes"] = current
    return lc["report"]


def _window(meeting: Meeting | PartialMeeting, prefix: str) -> str:
    start = getattr(meeting, f"{prefix}_start")
    end = getattr(meeting, f"{prefix}_end")
    return f"{format_clock(start)}–{format_clock(end)}"


def _notes(meeting: Meeting | PartialMeeting) -> list[str]:
    return [f"**Notes:**\n\n{meeting.notes}"] if meeting.notes else []


def _people_and_urls(meeting: Meeting | PartialMeeting) -> list[str]:
    return [
        f"**People:** {', '.join(meeting.people or []) or '(nobody)'}",
        f"**Calendar URL:** {meeting.calendar_url}",
        f"**Our issue URL:** {meeting.issue_url}",
    ]


def render_meeting(meeting: Meeting) -> str:
    """Render a valid meeting, showing both sides only where they differ."""
    lines = [f"## {meeting.calendar_title} (#{meeting.tag})", f"*{meeting.our_title}*\n"]

    if meeting.match is MatchGrade.NOPE:
        lines.append(f"**Calendar day:** {pretty_day(meeting.calendar_day)}")
        lines.append(f"**Our day:** {pretty_day(meeting.our_day)}")
    else:
        lines.append(f"**Day:** {pretty_day(meeting.our_day)}")

    if meeting.match is not MatchGrade.EXACT:
        lines.append(f"**Calendar time:** {_window(meeting, 'calendar')}")
        lines.append(f"**Our time:** {_window(meeting, 'our')}")
    else:
        lines.append(f"**Time:** {_window(meeting, 'our')}")

    lines.append(f"**Room:** {meeting.room}")
    lines.append(f"**Kind:** {meeting.kind.value}")
    lines.extend(_people_and_urls(meeting))
    lines.append(f"**Match:** {meeting.match.value}")
    if meeting.alternatives:
        lines.append(f"**Could attend instead:** {', '.join(meeting.alternatives)}")
    lines.extend(_notes(meeting))
    return "\n".join(lines)


def render_partial(meeting: PartialMeeting) -> str:
    lines = [
        f"## {meeting.calendar_title or '???'} (#{meeting.tag})",
        f"*{meeting.our_title or '???'}*\n",
        f"**Calendar day:** {pretty_day(meeting.calendar_day)}",
        f"**Our day:** {pretty_day(meeting.our_day)}",
        f"**Calendar time:** {_window(meeting, 'calendar')}",
        f"**Our time:** {_window(meeting, 'our')}",
    ]
    lines.extend(_people_and_urls(meeting))
    lines.extend(_notes(meeting))
    return "\n".join(lines)


def _summary(meeting: Meeting) -> str:
    return (
        f"• **{meeting.calendar_title}** (#{meeting.tag}), "
        f"{pretty_day(meeting.our_day)}, {_window(meeting, 'our')}"
    )


def _render_pairs(person: str, pairs: ClashingPairSet, heading: str) -> list[str]:
    lines = [f"## {heading} clashing meetings for {person}\n"]
    for first, second in pairs:
        lines.append(_summary(first))
        lines.append(f"  {_summary(second)}")
    lines.append("")
    return lines


_TOOL_ANNOTATIONS = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": False,
}

_DayParam = Annotated[Day | None, Field(description="Restrict to one weekday")]


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool(annotations=_TOOL_ANNOTATIONS)
def list_meetings(ctx: Context, day: _DayParam = None) -> str:
    """List planned meetings in chronological order."""
    report = _get_report(ctx)
    meetings = [m for m in report.meetings if day is None or m.our_day == day]

    if not meetings:
        return "No meeting data available"

    output = [f"# Planned meetings ({len(meetings)})\n"]
    for meeting in meetings:
        output.append(render_meeting(meeting))
        output.append("")
    return "\n".join(output)


@mcp.tool(annotations=_TOOL_ANNOTATIONS)
def get_meeting(
    tag: Annotated[int, Field(description="Meeting tag to retrieve", ge=1)],
    ctx: Context,
) -> str:
    """Get detailed information about one meeting, valid or not."""
    meeting = _get_report(ctx).get_meeting(tag)

    if meeting is None:
        return f"Meeting #{tag} not found"
    if isinstance(meeting, Meeting):
        return render_meeting(meeting)
    return "# Invalid meeting issue entry\n\n" + render_partial(meeting)


@mcp.tool(annotations=_TOOL_ANNOTATIONS)
def list_invalid_meetings(ctx: Context) -> str:
    """List issues that could not be reconciled with the schedule."""
    report = _get_report(ctx)

    if not report.partial_meetings:
        return "No invalid meeting issue entries"

    output = [f"# Invalid meeting issue entries ({len(report.partial_meetings)})\n"]
    for meeting in report.partial_meetings:
        output.append(render_partial(meeting))
        output.append("")
    return "\n".join(output)


@mcp.tool(annotations=_TOOL_ANNOTATIONS)
def list_moved_meetings(ctx: Context) -> str:
    """List meetings whose published time no longer matches the issue."""
    report = _get_report(ctx)

    if not report.moved:
        return "No moved meetings"

    output = [f"# Moved meetings ({len(report.moved)})\n"]
    for meeting in report.moved:
        output.append(render_meeting(meeting))
        output.append("")
    return "\n".join(output)


@mcp.tool(annotations=_TOOL_ANNOTATIONS)
def get_clashes(
    ctx: Context,
    kind: Annotated[
        Literal["definite", "near"],
        Field(description="Overlapping meetings, or meetings too close together"),
    ] = "definite",
    person: Annotated[str | None, Field(description="Only this person")] = None,
) -> str:
    """List clashing pairs of meetings per person."""
    report = _get_report(ctx)
    clashes = report.definite_clashes if kind == "definite" else report.near_clashes
    heading = "Definitely" if kind == "definite" else "Nearly"

    if person is not None:
        clashes = {person: clashes[person]} if person in clashes else {}
    if not clashes:
        target = f" for {person}" if person else ""
        return f"No {kind} clashes found{target}"

    output = [f"# {heading} clashing meetings\n"]
    for name in sorted(clashes):
        output.extend(_render_pairs(name, clashes[name], heading))
    return "\n".join(output)


@mcp.tool(annotations=_TOOL_ANNOTATIONS)
def get_gaps(
    person: Annotated[str, Field(description="Person to show free time for")],
    ctx: Context,
    day: _DayParam = None,
) -> str:
    """Show a person's free time within the working day."""
    report = _get_report(ctx)

    if person not in report.gaps:
        return f"No meetings found for '{person}'"

    output = [f"# Free time for {person}\n"]
    for d in DAYS if day is None else [day]:
        gaps = report.gaps[person].get(d, [])
        output.append(f"## {pretty_day(d)}")
        if not gaps:
            output.append("Fully booked")
        for gap in gaps:
            output.append(f"• {format_clock(gap.start)}–{format_clock(gap.end)}")
        output.append("")
    return "\n".join(output)


@mcp.tool(annotations=_TOOL_ANNOTATIONS)
def get_agenda(
    person: Annotated[str, Field(description="Person to show the agenda for")],
    ctx: Context,
    day: _DayParam = None,
) -> str:
    """Show a person's meetings and free time, day by day."""
    report = _get_report(ctx)

    if person not in report.gaps:
        return f"No meetings found for '{person}'"

    output = [f"# Agenda for {person}\n"]
    for d in DAYS if day is None else [day]:
        output.append(f"## {pretty_day(d)}")
        for entry in report.agenda(person, d):
            if isinstance(entry, MeetingSlot):
                m = entry.meeting
                output.append(
                    f"• {_window(m, 'our')} **{m.calendar_title}** (#{m.tag}) in {m.room}"
                )
            else:
                output.append(
                    f"• {format_clock(entry.gap.start)}–{format_clock(entry.gap.end)} free"
                )
        output.append("")
    return "\n".join(output)


@mcp.tool(annotations=_TOOL_ANNOTATIONS)
def list_duplicates(ctx: Context) -> str:
    """List issues in the same repo that point at the same calendar entry."""
    report = _get_report(ctx)

    if not report.duplicates:
        return "No duplicate meeting issues found"

    output = ["# Possible duplicate meeting issues\n"]
    for collection, groups in sorted(report.duplicates.items()):
        output.append(f"## {collection}\n")
        for group in groups:
            output.append(f"**{group[0].calendar_title}** ({group[0].calendar_url})")
            for meeting in group:
                output.append(f"• #{meeting.tag} {meeting.our_title}: {meeting.issue_url}")
            output.append("")
    return "\n".join(output)


@mcp.tool(annotations=_TOOL_ANNOTATIONS)
def list_unassigned(ctx: Context) -> str:
    """List meetings nobody has signed up to attend."""
    report = _get_report(ctx)

    if not report.unassigned:
        return "Every meeting has someone attending"

    lines = [f"# Unassigned meetings ({len(report.unassigned)})\n"]
    for meeting in report.unassigned:
        lines.append(_summary(meeting))
    return "\n".join(lines)
