# course_enrollment/client/courses.py
from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from course_enrollment.core.enums import SessionSlot, UserRole
from course_enrollment.client.api import ApiClient
from course_enrollment.client.auth import AuthContext
from course_enrollment.client.enrollment_request import DateInput, EnrollmentRequestFlow, parse_date
from course_enrollment.client.errors import LocalValidationError, build_local
from course_enrollment.schemas.course import Course, CourseIn, SessionIn

logger = logging.getLogger(__name__)


@dataclass
class SessionDraft:
    # what "Add Session" puts in the form
    status: str = SessionSlot.morning.value
    start_time: str = "09:00:00"
    end_time: str = "11:00:00"
    # set for sessions loaded from an existing course
    id: Optional[int] = None


# editable fields, in the order the CLI --session option takes them
SESSION_FIELDS = ("status", "start_time", "end_time")


@dataclass
class CourseForm:
    """Editable course, sessions kept as an ordered list of drafts."""

    title: str = ""
    description: str = ""
    schedule: str = ""
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    sessions: List[SessionDraft] = field(default_factory=list)

    @classmethod
    def from_course(cls, course: Course) -> "CourseForm":
        return cls(
            title=course.title,
            description=course.description or "",
            schedule=course.schedule or "",
            start_date=course.start_date,
            end_date=course.end_date,
            sessions=[
                SessionDraft(s.status.value, s.start_time.isoformat(), s.end_time.isoformat(), id=s.id)
                for s in course.sessions
            ],
        )

    def set_dates(self, start: DateInput = None, end: DateInput = None) -> None:
        self.start_date = parse_date(start)
        self.end_date = parse_date(end)

    # ---- session list ----

    def add_session(self) -> SessionDraft:
        draft = SessionDraft()
        self.sessions.append(draft)
        return draft

    def remove_session(self, index: int) -> None:
        del self.sessions[index]

    def update_session(self, index: int, name: str, value: str) -> None:
        if name not in SESSION_FIELDS:
            raise ValueError(f"Unknown session field '{name}'")
        setattr(self.sessions[index], name, value)

    # ---- validation / payload ----

    def validate(self) -> None:
        missing = [name for name in ("title", "start_date", "end_date") if not getattr(self, name)]
        if missing:
            raise LocalValidationError(f"Please fill in: {', '.join(missing)}.")

    def to_payload(self) -> CourseIn:
        self.validate()
        sessions = [build_local(SessionIn, **vars(s)) for s in self.sessions]
        return build_local(
            CourseIn,
            title=self.title.strip(),
            description=self.description,
            schedule=self.schedule,
            start_date=self.start_date,
            end_date=self.end_date,
            sessions=sessions,
        )


class CourseManagement:
    """The courses dashboard: everyone lists, admins edit, students start an enrollment."""

    def __init__(self, api: ApiClient, auth: AuthContext):
        self.api = api
        self.auth = auth
        self.courses: List[Course] = []
        self.form: Optional[CourseForm] = None
        self.editing_id: Optional[int] = None

    @property
    def can_edit(self) -> bool:
        return self.auth.has_role(UserRole.admin)

    def refresh(self) -> List[Course]:
        self.courses = self.api.courses.list()
        return self.courses

    def get(self, course_id: int) -> Optional[Course]:
        return next((c for c in self.courses if c.id == course_id), None)

    def _course(self, course: Union[Course, int]) -> Course:
        if isinstance(course, Course):
            return course
        found = self.get(course)
        if found is None:
            raise LocalValidationError(f"Course {course} not found.")
        return found

    # ---- admin ----

    def start_create(self) -> CourseForm:
        self.auth.require_role(UserRole.admin)
        self.form, self.editing_id = CourseForm(), None
        return self.form

    def start_edit(self, course: Union[Course, int]) -> CourseForm:
        self.auth.require_role(UserRole.admin)
        course = self._course(course)
        self.form, self.editing_id = CourseForm.from_course(course), course.id
        return self.form

    def cancel(self) -> None:
        self.form, self.editing_id = None, None

    def save(self) -> Course:
        self.auth.require_role(UserRole.admin)
        if self.form is None:
            raise LocalValidationError("Nothing to save: start a create or an edit first.")
        payload = self.form.to_payload()
        if self.editing_id is None:
            saved = self.api.courses.create(payload)
        else:
            saved = self.api.courses.update(self.editing_id, payload)
        logger.info("Saved course %s", saved.id)
        self.cancel()
        self.refresh()
        return saved

    def delete(self, course_id: int) -> None:
        self.auth.require_role(UserRole.admin)
        self.api.courses.delete(course_id)
        logger.info("Deleted course %s", course_id)
        self.refresh()

    # ---- student ----

    def begin_enrollment(self, course: Union[Course, int], my_enrollments=None) -> EnrollmentRequestFlow:
        return EnrollmentRequestFlow(self.api, self.auth, self._course(course), my_enrollments=my_enrollments)
