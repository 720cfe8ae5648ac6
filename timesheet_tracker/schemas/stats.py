from typing import Literal

from timesheet_tracker.schemas.common import CamelModel
from timesheet_tracker.schemas.user import UserResponse


class TodaySnapshot(CamelModel):
    today_hours: float
    tasks_today: int
    completed_tasks: int
    status: Literal["Active", "Inactive"]


class UserStatsResponse(TodaySnapshot):
    week_hours: float


class EmployeeTodayStats(UserResponse):
    today_hours: float
    tasks_today: int
    completed_tasks: int
    is_active: bool
