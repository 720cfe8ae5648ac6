# tests/test_scheduler.py

from __future__ import annotations

import os
import time
from datetime import date
from pathlib import Path

from timesheet_tracker.services.submission import SubmissionService
from timesheet_tracker.services.task_workflow import TaskWorkflow
from timesheet_tracker.services.timesheet_service import TimesheetService
from timesheet_tracker.utils.scheduler import MaintenanceScheduler

from .helpers import task_fields


def test_repair_recomputes_drifted_drafts_only(settings, database, session, locks, employee) -> None:
    workflow = TaskWorkflow(session, locks)
    workflow.create_task(employee.id, task_fields("2024-03-07", "09:00", "10:00"))
    workflow.create_task(employee.id, task_fields("2024-03-06", "09:00", "11:00"))
    workflow.create_task(employee.id, task_fields("2024-02-01", "09:00", "11:00"))  # outside window
    SubmissionService(session, locks).submit(employee.id, "2024-03-06")

    service = TimesheetService(session)
    for day in ("2024-03-07", "2024-03-06", "2024-02-01"):
        service.get_by_user_and_date(employee.id, day).total_hours = 1
    session.commit()

    scheduler = MaintenanceScheduler(settings, database, locks)
    repaired = scheduler.repair_draft_timesheets(today=date(2024, 3, 8))

    session.expire_all()
    assert repaired == 1
    assert service.get_by_user_and_date(employee.id, "2024-03-07").total_hours == 60
    assert service.get_by_user_and_date(employee.id, "2024-03-06").total_hours == 1
    assert service.get_by_user_and_date(employee.id, "2024-02-01").total_hours == 1


def test_cleanup_logs_removes_only_old_files(settings, database, locks) -> None:
    logs_dir = Path(settings.logs_dir)
    logs_dir.mkdir(parents=True)
    old_file = logs_dir / "app.log.1"
    fresh_file = logs_dir / "app.log"
    old_file.write_text("old")
    fresh_file.write_text("fresh")
    old_mtime = time.time() - (settings.log_retention_days + 1) * 24 * 60 * 60
    os.utime(old_file, (old_mtime, old_mtime))

    removed = MaintenanceScheduler(settings, database, locks).cleanup_logs()

    assert removed == ["app.log.1"]
    assert fresh_file.exists()
    assert not old_file.exists()
