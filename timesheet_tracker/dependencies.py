"""
FastAPI dependencies: database session, day locks, settings and the caller.

The caller's identity is resolved upstream (auth proxy / session layer) and
arrives as the X-User-Id header.
"""

from typing import Optional
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session
import logging

from timesheet_tracker.config import Settings
from timesheet_tracker.database import get_db
from timesheet_tracker.exceptions import AuthorizationError
from timesheet_tracker.models.enums import Role
from timesheet_tracker.models.user import User
from timesheet_tracker.services.user_service import UserService
from timesheet_tracker.utils.day_lock import DayLockRegistry

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_day_locks(request: Request) -> DayLockRegistry:
    return request.app.state.day_locks


def get_optional_user(
    x_user_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Optional[User]:
    if not x_user_id:
        return None
    return UserService(db).get_user(x_user_id)


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise AuthorizationError("Authentication required", status_code=401)
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != Role.ADMIN:
        logger.warning(f"User {user.id} denied access to an admin path")
        raise AuthorizationError("Admin role required", status_code=403)
    return user
