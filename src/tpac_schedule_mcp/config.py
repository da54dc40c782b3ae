"""Application settings via pydantic-settings."""

import os
from datetime import date, time
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .timeutil import DEFAULT_WEEK_START


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TPAC_")

    issues_path: str = Field(
        default="~/.tpac/issues.json",
        description=(
            "Path to saved `gh issue list --json assignees,body,title,url` "
            "output for the meeting-planning issues."
        ),
    )
    schedule_path: str = Field(
        default="~/.tpac/schedule.json",
        description="Path to the published schedule, keyed by calendar URL.",
    )
    week_start: date = Field(
        default=DEFAULT_WEEK_START,
        description="Date of the Monday of the meeting week.",
    )
    buffer_minutes: int = Field(
        default=10,
        ge=0,
        description="Meetings closer together than this are near clashes.",
    )
    work_day_start: time = Field(default=time(9, 0), description="Start of the working day")
    work_day_end: time = Field(default=time(18, 0), description="End of the working day")
    alternatives_allow_list: list[str] | None = Field(
        default=None,
        description="Only suggest these people as stand-ins for clashing meetings.",
    )
    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info", description="Logging level"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _lower_level(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _expand_paths(self) -> "Config":
        object.__setattr__(self, "issues_path", os.path.expanduser(self.issues_path))
        object.__setattr__(self, "schedule_path", os.path.expanduser(self.schedule_path))
        return self
