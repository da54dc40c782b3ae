"""TPAC schedule MCP server, FastMCP v2 implementation."""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastmcp import FastMCP

from .config import Config
from .pipeline import ReconciliationReport, reconcile
from .sources import get_mtime, load_issues, load_schedule, schedule_lookup

# ---------------------------------------------------------------------------
# Reconciliation from the configured sources
# ---------------------------------------------------------------------------


def build_report(config: Config) -> ReconciliationReport:
    """Load both sources and run a full reconciliation."""
    issues = load_issues(config.issues_path)
    schedule = load_schedule(config.schedule_path)
    return reconcile(
        issues,
        schedule_lookup(schedule),
        week_start=config.week_start,
        buffer=timedelta(minutes=config.buffer_minutes),
        work_start=config.work_day_start,
        work_end=config.work_day_end,
        allow_list=config.alternatives_allow_list,
    )


def source_mtimes(config: Config) -> tuple[float, float]:
    return get_mtime(config.issues_path), get_mtime(config.schedule_path)


# ---------------------------------------------------------------------------
# Lifespan: configure logging and reconcile once up front
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(server: FastMCP):
    config = Config()
    logging.basicConfig(level=config.log_level.upper())

    yield {
        "report": build_report(config),
        "config": config,
        "mtimes": source_mtimes(config),
    }


# ---------------------------------------------------------------------------
# Server instance
# ---------------------------------------------------------------------------

mcp = FastMCP("tpac-schedule", lifespan=lifespan)

# Importing tool modules triggers @mcp.tool() registration
from tpac_schedule_mcp.tools import schedule_ops  # noqa: E402, F401

# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main():
    mcp.run()
