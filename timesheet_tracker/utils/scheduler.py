from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from typing import Optional
from datetime import date
import logging

from timesheet_tracker.config import Settings
from timesheet_tracker.database import Database
from timesheet_tracker.services.timesheet_service import TimesheetService
from timesheet_tracker.utils.day_lock import DayLockRegistry
from timesheet_tracker.utils.logging_config import cleanup_old_logs
from timesheet_tracker.utils.timezone import local_today, window_start, format_day

logger = logging.getLogger(__name__)


class MaintenanceScheduler:
    def __init__(self, settings: Settings, database: Database, day_locks: DayLockRegistry):
        self.settings = settings
        self.database = database
        self.day_locks = day_locks
        self.scheduler = AsyncIOScheduler(timezone=settings.app_timezone)

    def start(self):
        # Nightly: recompute draft timesheets from their tasks
        self.scheduler.add_job(
            self.repair_draft_timesheets,
            CronTrigger(hour=0, minute=15),
            id='repair_draft_timesheets'
        )

        # Daily: prune old log files
        self.scheduler.add_job(
            self.cleanup_logs,
            CronTrigger(hour=3, minute=0),
            id='cleanup_logs'
        )

        self.scheduler.start()
        logger.info("Scheduler started - draft repair (00:15) and log cleanup (03:00)")

    def stop(self):
        if self.scheduler.running:
            self.scheduler.shutdown()
        logger.info("Scheduler stopped")

    def repair_draft_timesheets(self, today: Optional[date] = None) -> int:
        """
        Recompute every draft timesheet in the lookback window from its tasks.
        Each day is repaired under its day lock in its own transaction.
        Returns the number of totals that had drifted.
        """
        today = today or local_today(self.settings.app_timezone)
        since = format_day(window_start(today, self.settings.repair_lookback_days))
        logger.info(f"🔧 Repairing draft timesheets since {since}")

        db = self.database.get_session()
        repaired = 0
        try:
            service = TimesheetService(db)
            keys = service.get_draft_keys_since(since)
            for user_id, day in keys:
                with self.day_locks.hold((user_id, day)):
                    try:
                        if service.repair_draft(user_id, day):
                            repaired += 1
                        db.commit()
                    except Exception as e:
                        logger.error(f"Error repairing timesheet of user {user_id} on {day}: {str(e)}")
                        db.rollback()
            logger.info(f"Checked {len(keys)} draft timesheets, repaired {repaired}")
        finally:
            db.close()
        return repaired

    def cleanup_logs(self):
        return cleanup_old_logs(self.settings.logs_dir, self.settings.log_retention_days)
