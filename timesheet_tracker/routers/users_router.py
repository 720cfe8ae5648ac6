from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from timesheet_tracker.database import get_db
from timesheet_tracker.dependencies import get_current_user, get_optional_user
from timesheet_tracker.models.user import User
from timesheet_tracker.schemas.user import UserCreate, UserResponse
from timesheet_tracker.services.user_service import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    payload: UserCreate,
    caller: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    return UserService(db).create_user(payload.username, payload.role, created_by=caller)


@router.get("/me", response_model=UserResponse)
def get_me(user: User = Depends(get_current_user)):
    return user
