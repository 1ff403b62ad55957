from __future__ import annotations
import datetime as dt
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from course_enrollment.core.enums import EnrollmentStatus
from course_enrollment.schemas.course import Course
from course_enrollment.schemas.user import UserOut

class EnrollmentCreate(BaseModel):
    # wire names are camelCase for the selection fields
    model_config = ConfigDict(populate_by_name=True)

    course_id: int
    selected_date: Optional[dt.date] = Field(default=None, alias="selectedDate")
    selected_session_id: Optional[int] = Field(default=None, alias="selectedSessionId")

class Enrollment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    course_id: int
    status: EnrollmentStatus
    selected_date: Optional[dt.date] = None
    selected_session_id: Optional[int] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
    course: Optional[Course] = None
    user: Optional[UserOut] = None
