# course_enrollment/client/enrollment_request.py
from __future__ import annotations

import datetime as dt
import logging
from typing import TYPE_CHECKING, List, Optional, Union

from course_enrollment.core.enums import UserRole
from course_enrollment.client.api import ApiClient
from course_enrollment.client.auth import AuthContext
from course_enrollment.client.errors import LocalValidationError
from course_enrollment.schemas.course import Course, Session
from course_enrollment.schemas.enrollment import Enrollment
from course_enrollment.services import enrollment_workflow as workflow

if TYPE_CHECKING:
    from course_enrollment.client.status_views import MyEnrollmentsView

logger = logging.getLogger(__name__)

DateInput = Union[dt.date, str, None]


def parse_date(value: DateInput) -> Optional[dt.date]:
    """Accept a date, an ISO ``YYYY-MM-DD`` string, or blank."""
    if value is None or isinstance(value, dt.date):
        return value
    value = value.strip()
    if not value:
        return None
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise LocalValidationError(f"Invalid date '{value}', expected YYYY-MM-DD.")


class EnrollmentRequestFlow:
    """A student's enrollment request for one course.

    Opens with the course start date and its first session preselected.
    ``submit`` checks the choice locally, sends it, and refreshes the
    student's enrollment list on success. The returned enrollment is whatever
    the server created (always pending).
    """

    def __init__(
        self,
        api: ApiClient,
        auth: AuthContext,
        course: Course,
        my_enrollments: Optional["MyEnrollmentsView"] = None,
    ):
        auth.require_role(UserRole.student)
        self.api = api
        self.course = course
        self.my_enrollments = my_enrollments
        self.selected_date: Optional[dt.date] = course.start_date
        self.selected_session_id: Optional[int] = course.sessions[0].id if course.sessions else None
        self.submitting = False

    @property
    def date_options(self) -> List[dt.date]:
        return workflow.candidate_dates(self.course.start_date, self.course.end_date)

    @property
    def session_options(self) -> List[Session]:
        return list(self.course.sessions)

    def select_date(self, value: DateInput) -> None:
        self.selected_date = parse_date(value)

    def select_session(self, session_id: Optional[int]) -> None:
        """``None`` means "all sessions"."""
        self.selected_session_id = session_id

    def validation_error(self) -> Optional[str]:
        return workflow.selection_error(
            start=self.course.start_date,
            end=self.course.end_date,
            session_ids=[s.id for s in self.course.sessions],
            selected_date=self.selected_date,
            selected_session_id=self.selected_session_id,
        )

    def submit(self) -> Enrollment:
        error = self.validation_error()
        if error:
            self.api.notice(error)
            raise LocalValidationError(error)

        self.submitting = True
        try:
            enrollment = self.api.enrollments.enroll(
                self.course.id,
                selected_date=self.selected_date,
                selected_session_id=self.selected_session_id,
            )
        finally:
            self.submitting = False

        logger.info("Enrollment request %s submitted for course %s", enrollment.id, self.course.id)
        if self.my_enrollments is not None:
            self.my_enrollments.refresh()
        return enrollment
