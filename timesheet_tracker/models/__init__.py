from timesheet_tracker.models.enums import Role, TaskStatus
from timesheet_tracker.models.user import User
from timesheet_tracker.models.task import Task
from timesheet_tracker.models.timesheet import Timesheet

__all__ = ["Role", "TaskStatus", "User", "Task", "Timesheet"]
