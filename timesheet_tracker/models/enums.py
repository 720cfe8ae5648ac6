"""
Enumerations shared by the ORM models and request schemas.
"""

import enum


class Role(str, enum.Enum):
    """
    Access role of a user.

    Attributes:
        EMPLOYEE: Logs tasks and submits their own timesheets
        ADMIN: Can additionally read every employee's activity
    """
    EMPLOYEE = "employee"
    ADMIN = "admin"


class TaskStatus(str, enum.Enum):
    """
    Progress status of a logged task.

    Attributes:
        COMPLETED: Work is finished
        IN_PROGRESS: Work continues later
        ON_HOLD: Work is blocked
    """
    COMPLETED = "completed"
    IN_PROGRESS = "in-progress"
    ON_HOLD = "on-hold"


def enum_values(enum_cls):
    """Persist enum values ("in-progress") rather than member names."""
    return [member.value for member in enum_cls]
