from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid
from timesheet_tracker.database import Base
from timesheet_tracker.utils.timezone import utc_now


class Timesheet(Base):
    __tablename__ = "timesheets"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_timesheets_user_date"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    total_hours = Column(Integer, nullable=False, default=0)  # in minutes, derived from tasks
    is_submitted = Column(Boolean, nullable=False, default=False)
    submitted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    user = relationship("User", back_populates="timesheets")

    def __repr__(self):
        return f"<Timesheet(user_id={self.user_id}, date={self.date}, minutes={self.total_hours}, submitted={self.is_submitted})>"
