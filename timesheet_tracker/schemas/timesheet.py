from typing import List, Optional

from timesheet_tracker.schemas.common import CamelModel, UtcDateTime
from timesheet_tracker.schemas.task import TaskResponse


class TimesheetResponse(CamelModel):
    id: str
    user_id: str
    date: str
    total_hours: int  # minutes
    is_submitted: bool
    submitted_at: Optional[UtcDateTime] = None
    created_at: UtcDateTime


class TimesheetWithTasksResponse(TimesheetResponse):
    tasks: List[TaskResponse] = []


class DayTimesheetResponse(CamelModel):
    """A day's timesheet (absent until the first task is logged) and its tasks."""
    timesheet: Optional[TimesheetResponse] = None
    tasks: List[TaskResponse] = []
