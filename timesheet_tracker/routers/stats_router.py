from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from timesheet_tracker.config import Settings
from timesheet_tracker.database import get_db
from timesheet_tracker.dependencies import get_current_user, get_app_settings
from timesheet_tracker.models.user import User
from timesheet_tracker.schemas.stats import UserStatsResponse
from timesheet_tracker.services.stats_service import StatsProjector
from timesheet_tracker.utils.timezone import local_today

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("", response_model=UserStatsResponse)
def get_stats(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    projector = StatsProjector(db, window_days=settings.stats_window_days)
    return projector.user_stats(user.id, local_today(settings.app_timezone))
