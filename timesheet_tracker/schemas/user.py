from pydantic import Field

from timesheet_tracker.models.enums import Role
from timesheet_tracker.schemas.common import CamelModel, UtcDateTime


class UserCreate(CamelModel):
    username: str = Field(..., min_length=3, max_length=100)
    role: Role = Role.EMPLOYEE


class UserResponse(CamelModel):
    id: str
    username: str
    role: Role
    created_at: UtcDateTime
