from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from timesheet_tracker.exceptions import ConflictError, NotFoundError, ValidationError, AuthorizationError
from timesheet_tracker.models.enums import Role
from timesheet_tracker.models.user import User

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def list_employees(self) -> List[User]:
        return self.db.query(User).filter(User.role == Role.EMPLOYEE).order_by(User.username).all()

    def has_admin(self) -> bool:
        return self.db.query(User.id).filter(User.role == Role.ADMIN).first() is not None

    def create_user(self, username: str, role: Role = Role.EMPLOYEE, created_by: Optional[User] = None) -> User:
        """
        Register a user.

        Admin accounts may only be created by an admin, except for the very
        first one, which bootstraps the installation.
        """
        username = (username or "").strip()
        if len(username) < 3:
            raise ValidationError("Username must be at least 3 characters", field="username")

        role = Role(role)
        if role == Role.ADMIN and self.has_admin():
            if created_by is None or created_by.role != Role.ADMIN:
                raise AuthorizationError("Only an admin can create admin users")

        if self.get_user_by_username(username) is not None:
            raise ConflictError("Username already exists", {"username": username})

        user = User(username=username, role=role)
        self.db.add(user)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(user)
        logger.info(f"Created {role.value} user {username} ({user.id})")
        return user

    def delete_user(self, user_id: str) -> None:
        """Delete a user together with their tasks and timesheets."""
        user = self.get_user(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        self.db.delete(user)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Deleted user {user_id} and their tasks and timesheets")
