from sqlalchemy.orm import Session
from sqlalchemy import desc
from typing import List, Dict, Any, Optional
import logging

from timesheet_tracker.exceptions import ConflictError
from timesheet_tracker.models.timesheet import Timesheet
from timesheet_tracker.services.task_store import TaskStore
from timesheet_tracker.utils.time_interval import minutes_between

logger = logging.getLogger(__name__)


class TimesheetService:
    """Reads timesheets and keeps each day's total in step with its tasks."""

    def __init__(self, db: Session):
        self.db = db
        self.task_store = TaskStore(db)

    def get_by_user_and_date(self, user_id: str, date: str, for_update: bool = False) -> Optional[Timesheet]:
        query = self.db.query(Timesheet).filter(
            Timesheet.user_id == user_id,
            Timesheet.date == date
        )
        if for_update:
            # Ignored by SQLite; row lock on PostgreSQL
            query = query.with_for_update()
        return query.first()

    def compute_total_minutes(self, user_id: str, date: str) -> int:
        tasks = self.task_store.get_tasks_by_user_and_date(user_id, date)
        return sum(minutes_between(task.start_time, task.end_time) for task in tasks)

    def recompute(self, user_id: str, date: str) -> Timesheet:
        """
        Resum the day's task minutes and upsert its timesheet.

        Flushes only; the surrounding transaction decides whether it sticks.
        """
        total = self.compute_total_minutes(user_id, date)
        timesheet = self.get_by_user_and_date(user_id, date, for_update=True)

        if timesheet is None:
            timesheet = Timesheet(user_id=user_id, date=date, total_hours=total, is_submitted=False)
            self.db.add(timesheet)
            logger.info(f"🆕 Created draft timesheet for user {user_id} on {date}: {total} min")
        elif timesheet.is_submitted:
            logger.warning(f"❌ Refusing to recompute submitted timesheet for user {user_id} on {date}")
            raise ConflictError("timesheet already submitted", {"user_id": user_id, "date": date})
        else:
            if timesheet.total_hours != total:
                logger.info(f"🔄 Timesheet for user {user_id} on {date}: {timesheet.total_hours} -> {total} min")
            timesheet.total_hours = total

        self.db.flush()
        return timesheet

    def get_timesheets_by_user(self, user_id: str, limit: int = 30) -> List[Timesheet]:
        """Most recent timesheets first."""
        return self.db.query(Timesheet).filter(
            Timesheet.user_id == user_id
        ).order_by(desc(Timesheet.date)).limit(limit).all()

    def get_timesheets_with_tasks(self, user_id: str, limit: int = 30) -> List[Dict[str, Any]]:
        return [
            {
                "timesheet": timesheet,
                "tasks": self.task_store.get_tasks_by_user_and_date(user_id, timesheet.date),
            }
            for timesheet in self.get_timesheets_by_user(user_id, limit)
        ]

    def get_timesheets_in_range(self, user_id: str, start_date: str, end_date: str) -> List[Timesheet]:
        """Timesheets dated between start_date and end_date inclusive (YYYY-MM-DD compares lexically)."""
        return self.db.query(Timesheet).filter(
            Timesheet.user_id == user_id,
            Timesheet.date >= start_date,
            Timesheet.date <= end_date
        ).order_by(Timesheet.date).all()

    def get_draft_keys_since(self, since_date: str) -> List[tuple]:
        rows = self.db.query(Timesheet.user_id, Timesheet.date).filter(
            Timesheet.is_submitted.is_(False),
            Timesheet.date >= since_date
        ).order_by(Timesheet.date, Timesheet.user_id).all()
        return [(row[0], row[1]) for row in rows]

    def repair_draft(self, user_id: str, date: str) -> bool:
        """
        Recompute one draft timesheet from its tasks.
        Returns True when the stored total had drifted and was corrected.
        """
        timesheet = self.get_by_user_and_date(user_id, date, for_update=True)
        if timesheet is None or timesheet.is_submitted:
            return False
        before = timesheet.total_hours
        after = self.recompute(user_id, date).total_hours
        return before != after
