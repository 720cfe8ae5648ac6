from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
import logging

from timesheet_tracker.config import Settings
from timesheet_tracker.database import get_db
from timesheet_tracker.dependencies import require_admin, get_app_settings
from timesheet_tracker.exceptions import NotFoundError
from timesheet_tracker.models.user import User
from timesheet_tracker.routers.timesheets_router import timesheets_with_tasks
from timesheet_tracker.schemas.stats import EmployeeTodayStats
from timesheet_tracker.schemas.timesheet import TimesheetWithTasksResponse
from timesheet_tracker.services.stats_service import StatsProjector
from timesheet_tracker.services.user_service import UserService
from timesheet_tracker.utils.timezone import local_today

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/users", response_model=List[EmployeeTodayStats])
def list_employees(
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    projector = StatsProjector(db, window_days=settings.stats_window_days)
    return projector.employees_with_today_stats(local_today(settings.app_timezone))


@router.get("/users/{user_id}/timesheets", response_model=List[TimesheetWithTasksResponse])
def get_employee_timesheets(
    user_id: str,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    if UserService(db).get_user(user_id) is None:
        raise NotFoundError("User", user_id)
    return timesheets_with_tasks(db, user_id, settings.timesheet_history_limit)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    logger.info(f"Admin {admin.username} deleting user {user_id}")
    UserService(db).delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
