from sqlalchemy.orm import Session
from datetime import datetime
from typing import List, Dict, Any, Optional
import logging

from timesheet_tracker.exceptions import ValidationError, NotFoundError
from timesheet_tracker.models.enums import TaskStatus
from timesheet_tracker.models.task import Task
from timesheet_tracker.utils.timezone import parse_day, to_utc_naive, utc_now

logger = logging.getLogger(__name__)

TASK_FIELDS = ("name", "description", "start_time", "end_time", "status", "date")
REQUIRED_FIELDS = ("name", "start_time", "end_time", "date")


class TaskStore:
    """
    Record-level access to tasks.

    Writes are flushed, not committed: the caller owns the transaction so the
    write and the timesheet recompute land together.
    """

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def validate_fields(fields: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
        """Check and normalize task fields. With `partial`, only present keys are checked."""
        unknown = set(fields) - set(TASK_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown task fields: {', '.join(sorted(unknown))}")

        cleaned = dict(fields)
        if not partial:
            for field in REQUIRED_FIELDS:
                if cleaned.get(field) is None:
                    raise ValidationError(f"{field} is required", field=field)

        if "name" in cleaned:
            name = cleaned["name"]
            if name is None or not str(name).strip():
                raise ValidationError("Task name is required", field="name")
            cleaned["name"] = str(name).strip()

        for field in ("start_time", "end_time"):
            if field in cleaned:
                value = cleaned[field]
                if not isinstance(value, datetime):
                    raise ValidationError(f"{field} must be a datetime", field=field)
                cleaned[field] = to_utc_naive(value)

        if "date" in cleaned:
            parse_day(cleaned["date"])

        if "status" in cleaned:
            status = cleaned["status"]
            if status is None:
                raise ValidationError("status is required", field="status")
            try:
                cleaned["status"] = TaskStatus(status)
            except ValueError as e:
                raise ValidationError(f"Unknown task status: {status}", field="status") from e
        elif not partial:
            cleaned["status"] = TaskStatus.COMPLETED

        start, end = cleaned.get("start_time"), cleaned.get("end_time")
        if start is not None and end is not None and end <= start:
            raise ValidationError("endTime must be after startTime", field="end_time")

        return cleaned

    def create_task(self, user_id: str, fields: Dict[str, Any]) -> Task:
        cleaned = self.validate_fields(fields)
        task = Task(user_id=user_id, **cleaned)
        self.db.add(task)
        self.db.flush()
        logger.debug(f"Created task {task.id} for user {user_id} on {task.date}")
        return task

    def get_tasks_by_user_and_date(self, user_id: str, date: str) -> List[Task]:
        return self.db.query(Task).filter(
            Task.user_id == user_id,
            Task.date == date
        ).order_by(Task.start_time, Task.created_at).all()

    def get_task_by_id(self, task_id: str) -> Optional[Task]:
        return self.db.query(Task).filter(Task.id == task_id).first()

    def update_task(self, task_id: str, updates: Dict[str, Any]) -> Task:
        task = self.get_task_by_id(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)

        cleaned = self.validate_fields(updates, partial=True)

        # The merged record must still be a valid interval
        start = cleaned.get("start_time", task.start_time)
        end = cleaned.get("end_time", task.end_time)
        if end <= start:
            raise ValidationError("endTime must be after startTime", field="end_time")

        for field, value in cleaned.items():
            setattr(task, field, value)
        task.updated_at = utc_now()
        self.db.flush()
        logger.debug(f"Updated task {task_id}: {sorted(cleaned)}")
        return task

    def delete_task(self, task_id: str) -> None:
        task = self.get_task_by_id(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        self.db.delete(task)
        self.db.flush()
        logger.debug(f"Deleted task {task_id}")
