"""Clock tool — current date and time."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field

from thinkact.tool.base import BaseTool


class CurrentTimeParams(BaseModel):
    timezone: str = Field(
        default="UTC", description="IANA timezone name, e.g. 'Europe/Paris'."
    )


class CurrentTimeTool(BaseTool[CurrentTimeParams]):
    name: ClassVar[str] = "current_time"
    description: ClassVar[str] = "Get the current date and time as ISO 8601."
    param_model: ClassVar[type[BaseModel]] = CurrentTimeParams

    def execute(self, params: CurrentTimeParams) -> str:
        tz = timezone.utc if params.timezone == "UTC" else ZoneInfo(params.timezone)
        return datetime.now(tz).isoformat(timespec="seconds")
