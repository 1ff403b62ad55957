from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
import datetime as dt

from course_enrollment.core.enums import SessionSlot

# ---------------------------
# Session Schemas
# ---------------------------

class SessionBase(BaseModel):
    status: SessionSlot = SessionSlot.morning
    start_time: dt.time
    end_time: dt.time

class SessionIn(SessionBase):
    # id of an existing session of the course; None adds a new one
    id: Optional[int] = None

class Session(SessionBase):
    id: int
    course_id: int
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    model_config = {"from_attributes": True}

# ---------------------------
# Course Schemas
# ---------------------------

class CourseBase(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = ""
    schedule: Optional[str] = ""
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None

class CourseIn(CourseBase):
    """Body of POST/PUT /courses; ``sessions`` replaces the course's whole list."""
    sessions: List[SessionIn] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_date_order(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

class Course(CourseBase):
    id: int
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
    sessions: List[Session] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    def session_by_id(self, session_id: int) -> Optional[Session]:
        return next((s for s in self.sessions if s.id == session_id), None)
