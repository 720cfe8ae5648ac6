from sqlalchemy import Column, String, DateTime, Text, Enum, ForeignKey, Index
from sqlalchemy.orm import relationship
import uuid
from timesheet_tracker.database import Base
from timesheet_tracker.models.enums import TaskStatus, enum_values
from timesheet_tracker.utils.timezone import utc_now


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_user_date", "user_id", "date"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    status = Column(
        Enum(TaskStatus, name="task_status", values_callable=enum_values),
        nullable=False,
        default=TaskStatus.COMPLETED,
    )
    date = Column(String(10), nullable=False)  # YYYY-MM-DD, caller supplied
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, nullable=False)

    user = relationship("User", back_populates="tasks")

    def __repr__(self):
        return f"<Task(name={self.name}, date={self.date}, start={self.start_time}, end={self.end_time})>"
