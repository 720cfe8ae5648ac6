from sqlalchemy.orm import Session
from datetime import date
from typing import List, Dict, Any
import logging

from timesheet_tracker.models.enums import TaskStatus
from timesheet_tracker.models.user import User
from timesheet_tracker.services.task_store import TaskStore
from timesheet_tracker.services.timesheet_service import TimesheetService
from timesheet_tracker.services.user_service import UserService
from timesheet_tracker.utils.time_interval import minutes_between, minutes_to_hours
from timesheet_tracker.utils.timezone import format_day, window_start

logger = logging.getLogger(__name__)


class StatsProjector:
    """Read-only summaries derived from tasks and timesheets."""

    def __init__(self, db: Session, window_days: int = 7):
        self.db = db
        self.window_days = window_days
        self.task_store = TaskStore(db)
        self.timesheets = TimesheetService(db)
        self.users = UserService(db)

    def today_snapshot(self, user_id: str, today: date) -> Dict[str, Any]:
        tasks = self.task_store.get_tasks_by_user_and_date(user_id, format_day(today))
        minutes = sum(minutes_between(t.start_time, t.end_time) for t in tasks)
        return {
            "today_hours": minutes_to_hours(minutes),
            "tasks_today": len(tasks),
            "completed_tasks": sum(1 for t in tasks if t.status == TaskStatus.COMPLETED),
            "status": "Active" if tasks else "Inactive",
        }

    def week_hours(self, user_id: str, today: date) -> float:
        """Hours across timesheets dated in the trailing window ending today."""
        start = format_day(window_start(today, self.window_days))
        timesheets = self.timesheets.get_timesheets_in_range(user_id, start, format_day(today))
        return minutes_to_hours(sum(ts.total_hours for ts in timesheets))

    def user_stats(self, user_id: str, today: date) -> Dict[str, Any]:
        stats = self.today_snapshot(user_id, today)
        stats["week_hours"] = self.week_hours(user_id, today)
        return stats

    def employee_snapshot(self, user: User, today: date) -> Dict[str, Any]:
        snapshot = self.today_snapshot(user.id, today)
        return {
            "id": user.id,
            "username": user.username,
            "role": user.role,
            "created_at": user.created_at,
            "today_hours": snapshot["today_hours"],
            "tasks_today": snapshot["tasks_today"],
            "completed_tasks": snapshot["completed_tasks"],
            "is_active": snapshot["status"] == "Active",
        }

    def employees_with_today_stats(self, today: date) -> List[Dict[str, Any]]:
        employees = self.users.list_employees()
        logger.debug(f"Building today stats for {len(employees)} employees ({format_day(today)})")
        return [self.employee_snapshot(user, today) for user in employees]
