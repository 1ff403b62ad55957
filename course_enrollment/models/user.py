from sqlalchemy import Column, Integer, String, DateTime, Enum as SAEnum, func
from sqlalchemy.orm import relationship

from course_enrollment.core.enums import UserRole
from course_enrollment.db.base_class import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)

    name = Column(String(120), nullable=False)
    email = Column(String(160), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    # fixed at creation; no endpoint changes it
    role = Column(SAEnum(UserRole, name="user_role"), nullable=False, default=UserRole.student)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    enrollments = relationship("Enrollment", back_populates="user", cascade="all, delete-orphan")
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")
