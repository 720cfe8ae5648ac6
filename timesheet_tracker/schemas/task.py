"""
Task Pydantic Schemas
"""

from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator, model_validator

from timesheet_tracker.models.enums import TaskStatus
from timesheet_tracker.schemas.common import CamelModel, UtcDateTime
from timesheet_tracker.utils.timezone import to_utc_naive

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class TaskCreate(CamelModel):
    """Request schema for logging a task."""

    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    status: TaskStatus = TaskStatus.COMPLETED
    date: str = Field(..., pattern=DATE_PATTERN, description="Logical day, YYYY-MM-DD")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Task name is required")
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_instant(cls, v):
        return to_utc_naive(v)

    @model_validator(mode="after")
    def check_interval(self):
        if self.end_time <= self.start_time:
            raise ValueError("endTime must be after startTime")
        return self


class TaskUpdate(CamelModel):
    """Partial update; only fields sent by the client are applied."""

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    status: Optional[TaskStatus] = None
    date: Optional[str] = Field(None, pattern=DATE_PATTERN)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Task name is required")
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_instant(cls, v):
        return to_utc_naive(v) if v is not None else v


class TaskResponse(CamelModel):
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    start_time: UtcDateTime
    end_time: UtcDateTime
    status: TaskStatus
    date: str
    created_at: UtcDateTime
    updated_at: UtcDateTime
