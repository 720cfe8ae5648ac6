from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.orm import relationship
import uuid
from timesheet_tracker.database import Base
from timesheet_tracker.models.enums import Role, enum_values
from timesheet_tracker.utils.timezone import utc_now


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(100), nullable=False, unique=True, index=True)
    role = Column(
        Enum(Role, name="role", values_callable=enum_values),
        nullable=False,
        default=Role.EMPLOYEE,
    )
    created_at = Column(DateTime, default=utc_now, nullable=False)

    tasks = relationship("Task", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    timesheets = relationship("Timesheet", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<User(username={self.username}, role={self.role.value if self.role else None})>"
