from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from timesheet_tracker.config import Settings
from timesheet_tracker.database import get_db
from timesheet_tracker.dependencies import get_current_user, get_day_locks, get_app_settings
from timesheet_tracker.models.user import User
from timesheet_tracker.schemas.task import TaskResponse
from timesheet_tracker.schemas.timesheet import (
    TimesheetResponse,
    TimesheetWithTasksResponse,
    DayTimesheetResponse,
)
from timesheet_tracker.services.submission import SubmissionService
from timesheet_tracker.services.timesheet_service import TimesheetService
from timesheet_tracker.utils.day_lock import DayLockRegistry
from timesheet_tracker.utils.timezone import parse_day

router = APIRouter(prefix="/api/timesheets", tags=["timesheets"])


def timesheets_with_tasks(db: Session, user_id: str, limit: int) -> List[TimesheetWithTasksResponse]:
    results = []
    for item in TimesheetService(db).get_timesheets_with_tasks(user_id, limit):
        timesheet = TimesheetResponse.model_validate(item["timesheet"])
        tasks = [TaskResponse.model_validate(task) for task in item["tasks"]]
        results.append(TimesheetWithTasksResponse(**timesheet.model_dump(), tasks=tasks))
    return results


@router.get("", response_model=List[TimesheetWithTasksResponse])
def list_timesheets(
    limit: Optional[int] = Query(None, ge=1, le=365),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    return timesheets_with_tasks(db, user.id, limit or settings.timesheet_history_limit)


@router.get("/{date}", response_model=DayTimesheetResponse)
def get_timesheet(
    date: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    parse_day(date)
    service = TimesheetService(db)
    timesheet = service.get_by_user_and_date(user.id, date)
    tasks = service.task_store.get_tasks_by_user_and_date(user.id, date)
    return DayTimesheetResponse(
        timesheet=TimesheetResponse.model_validate(timesheet) if timesheet else None,
        tasks=[TaskResponse.model_validate(task) for task in tasks],
    )


@router.post("/{date}/submit", response_model=TimesheetResponse)
def submit_timesheet(
    date: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    locks: DayLockRegistry = Depends(get_day_locks),
):
    parse_day(date)
    return SubmissionService(db, locks).submit(user.id, date)
