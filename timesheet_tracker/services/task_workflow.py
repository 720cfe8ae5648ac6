from sqlalchemy.orm import Session
from typing import List, Dict, Any
import logging

from timesheet_tracker.exceptions import NotFoundError, ConflictError
from timesheet_tracker.models.task import Task
from timesheet_tracker.services.submission import SubmissionGuard
from timesheet_tracker.services.task_store import TaskStore
from timesheet_tracker.services.timesheet_service import TimesheetService
from timesheet_tracker.utils.day_lock import DayLockRegistry
from timesheet_tracker.utils.timezone import parse_day

logger = logging.getLogger(__name__)


class TaskWorkflow:
    """
    Task mutations as seen by the API.

    Each mutation runs guard check, store write and timesheet recompute inside
    one transaction while holding the day lock, and commits once at the end.
    Any failure rolls the whole thing back, leaving the previous total intact.
    """

    def __init__(self, db: Session, locks: DayLockRegistry):
        self.db = db
        self.locks = locks
        self.store = TaskStore(db)
        self.timesheets = TimesheetService(db)
        self.guard = SubmissionGuard(db)

    def get_owned_task(self, user_id: str, task_id: str) -> Task:
        """Another user's task is reported exactly like a missing one."""
        task = self.store.get_task_by_id(task_id)
        if task is None or task.user_id != user_id:
            raise NotFoundError("Task", task_id)
        return task

    def list_tasks(self, user_id: str, date: str) -> List[Task]:
        parse_day(date)
        return self.store.get_tasks_by_user_and_date(user_id, date)

    def create_task(self, user_id: str, fields: Dict[str, Any]) -> Task:
        fields = self.store.validate_fields(fields)
        date = fields["date"]
        logger.info(f"📝 Creating task '{fields['name']}' for user {user_id} on {date}")

        with self.locks.hold((user_id, date)):
            try:
                self.guard.assert_mutable(user_id, date)
                task = self.store.create_task(user_id, fields)
                timesheet = self.timesheets.recompute(user_id, date)
                self.db.commit()
            except Exception as e:
                logger.error(f"❌ Creating task for user {user_id} on {date} failed: {e}")
                self.db.rollback()
                raise

        self.db.refresh(task)
        logger.info(f"✅ Task {task.id} created, {date} total is now {timesheet.total_hours} min")
        return task

    def update_task(self, user_id: str, task_id: str, updates: Dict[str, Any]) -> Task:
        task = self.get_owned_task(user_id, task_id)
        old_date = task.date
        updates = self.store.validate_fields(updates, partial=True)
        new_date = updates.get("date", old_date)
        dates = sorted({old_date, new_date})
        logger.info(f"🔄 Updating task {task_id} of user {user_id} ({old_date} -> {new_date})")

        with self.locks.hold(*[(user_id, d) for d in dates]):
            try:
                # Re-read under the lock; the task may have moved or vanished meanwhile
                self.db.expire_all()
                task = self.get_owned_task(user_id, task_id)
                if task.date != old_date:
                    raise ConflictError("task was modified concurrently, retry", {"task_id": task_id})

                for date in dates:
                    self.guard.assert_mutable(user_id, date)
                task = self.store.update_task(task_id, updates)
                for date in dates:
                    self.timesheets.recompute(user_id, date)
                self.db.commit()
            except Exception as e:
                logger.error(f"❌ Updating task {task_id} failed: {e}")
                self.db.rollback()
                raise

        self.db.refresh(task)
        logger.info(f"✅ Successfully updated task {task_id}")
        return task

    def delete_task(self, user_id: str, task_id: str) -> None:
        task = self.get_owned_task(user_id, task_id)
        date = task.date
        logger.info(f"🗑️ Deleting task {task_id} of user {user_id} on {date}")

        with self.locks.hold((user_id, date)):
            try:
                self.db.expire_all()
                task = self.get_owned_task(user_id, task_id)
                if task.date != date:
                    raise ConflictError("task was modified concurrently, retry", {"task_id": task_id})

                self.guard.assert_mutable(user_id, date)
                self.store.delete_task(task_id)
                timesheet = self.timesheets.recompute(user_id, date)
                self.db.commit()
            except Exception as e:
                logger.error(f"❌ Deleting task {task_id} failed: {e}")
                self.db.rollback()
                raise

        logger.info(f"✅ Successfully deleted task {task_id}, {date} total is now {timesheet.total_hours} min")
