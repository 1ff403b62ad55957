# course_enrollment/client/enrollment_review.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from course_enrollment.core.enums import UserRole
from course_enrollment.client.api import ApiClient
from course_enrollment.client.auth import AuthContext
from course_enrollment.client.errors import InvalidTransition
from course_enrollment.schemas.enrollment import Enrollment
from course_enrollment.services import enrollment_workflow as workflow

logger = logging.getLogger(__name__)


class EnrollmentReviewFlow:
    """Admin listing of every enrollment request, with filter tabs and approve/reject."""

    def __init__(self, api: ApiClient, auth: AuthContext):
        auth.require_role(UserRole.admin)
        self.api = api
        self.enrollments: List[Enrollment] = []
        self.status_filter: str = workflow.FILTER_ALL
        self.busy_id: Optional[int] = None

    def refresh(self) -> List[Enrollment]:
        self.enrollments = self.api.enrollments.list_all()
        return self.enrollments

    def set_filter(self, status_filter: str) -> None:
        if status_filter not in workflow.FILTERS:
            raise ValueError(f"Unknown filter '{status_filter}'")
        self.status_filter = status_filter

    @property
    def visible(self) -> List[Enrollment]:
        return workflow.filter_enrollments(self.enrollments, self.status_filter)

    def counts(self) -> Dict[str, int]:
        return workflow.status_counts(self.enrollments)

    def find(self, enrollment_id: int) -> Optional[Enrollment]:
        return next((e for e in self.enrollments if e.id == enrollment_id), None)

    def approve(self, enrollment_id: int) -> Optional[Enrollment]:
        return self._decide(enrollment_id, "approve")

    def reject(self, enrollment_id: int) -> Optional[Enrollment]:
        return self._decide(enrollment_id, "reject")

    def _decide(self, enrollment_id: int, action: str) -> Optional[Enrollment]:
        known = self.find(enrollment_id)
        if known is not None and not workflow.can_transition(known.status, workflow.ACTIONS[action]):
            raise InvalidTransition(f"Enrollment {enrollment_id} is already {known.status.value}.")

        self.busy_id = enrollment_id
        try:
            getattr(self.api.enrollments, action)(enrollment_id)
        finally:
            self.busy_id = None

        logger.info("Enrollment %s: %s", enrollment_id, action)
        self.refresh()
        return self.find(enrollment_id)
