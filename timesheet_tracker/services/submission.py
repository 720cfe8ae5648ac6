"""
Submission lock for daily timesheets.

A timesheet is either a draft or submitted. Submission happens once, on
explicit request, and is never undone; after it the day's tasks are frozen.
"""

from sqlalchemy.orm import Session
import logging

from timesheet_tracker.exceptions import ConflictError, NotFoundError
from timesheet_tracker.models.timesheet import Timesheet
from timesheet_tracker.services.timesheet_service import TimesheetService
from timesheet_tracker.utils.day_lock import DayLockRegistry
from timesheet_tracker.utils.timezone import utc_now

logger = logging.getLogger(__name__)


class SubmissionGuard:
    def __init__(self, db: Session):
        self.timesheets = TimesheetService(db)

    def assert_mutable(self, user_id: str, date: str) -> None:
        """Raise ConflictError if the (user, date) timesheet is already submitted."""
        timesheet = self.timesheets.get_by_user_and_date(user_id, date, for_update=True)
        if timesheet is not None and timesheet.is_submitted:
            logger.info(f"🔒 Day {date} of user {user_id} is submitted, rejecting mutation")
            raise ConflictError("timesheet already submitted", {"date": date})


class SubmissionService:
    def __init__(self, db: Session, locks: DayLockRegistry):
        self.db = db
        self.locks = locks
        self.timesheets = TimesheetService(db)

    def submit(self, user_id: str, date: str) -> Timesheet:
        """
        Move the day's timesheet from draft to submitted.

        Raises:
            NotFoundError: no timesheet exists for the day
            ConflictError: the timesheet was already submitted
        """
        with self.locks.hold((user_id, date)):
            try:
                timesheet = self.timesheets.get_by_user_and_date(user_id, date, for_update=True)
                if timesheet is None:
                    raise NotFoundError("Timesheet", date)
                if timesheet.is_submitted:
                    raise ConflictError("timesheet already submitted", {"date": date})

                timesheet.is_submitted = True
                timesheet.submitted_at = utc_now()
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        self.db.refresh(timesheet)
        logger.info(f"✅ Submitted timesheet for user {user_id} on {date} ({timesheet.total_hours} min)")
        return timesheet
