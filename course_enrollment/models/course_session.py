from datetime import time, datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import ForeignKey, Time, DateTime, Enum as SAEnum, func
from course_enrollment.core.enums import SessionSlot
from course_enrollment.db.base_class import Base

class CourseSession(Base):
    """A recurring time slot of a course (the API calls it a "session")."""
    __tablename__ = "course_sessions"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(ForeignKey("courses.id", ondelete="CASCADE"), index=True)
    status: Mapped[SessionSlot] = mapped_column(SAEnum(SessionSlot, name="session_slot"), default=SessionSlot.morning)
    start_time: Mapped[time] = mapped_column(Time)
    end_time: Mapped[time] = mapped_column(Time)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    course = relationship("Course", back_populates="sessions")
