# course_enrollment/client/status_views.py
from __future__ import annotations

from typing import Dict, List

from course_enrollment.core.enums import EnrollmentStatus, UserRole
from course_enrollment.client.api import ApiClient
from course_enrollment.client.auth import AuthContext
from course_enrollment.schemas.enrollment import Enrollment
from course_enrollment.schemas.notification import Notification
from course_enrollment.services import enrollment_workflow as workflow

STATUS_MESSAGES = {
    EnrollmentStatus.pending: "Your enrollment request is pending review by an administrator.",
    EnrollmentStatus.approved: "Congratulations! Your enrollment has been approved. You are now enrolled in this course.",
    EnrollmentStatus.rejected: (
        "Sorry, your enrollment request has been rejected. "
        "Please contact the administrator for more information."
    ),
}


class MyEnrollmentsView:
    def __init__(self, api: ApiClient, auth: AuthContext):
        auth.require_role(UserRole.student)
        self.api = api
        self.auth = auth
        self.enrollments: List[Enrollment] = []

    def refresh(self) -> List[Enrollment]:
        user = self.auth.require_role(UserRole.student)
        self.enrollments = [e for e in self.api.enrollments.mine() if e.user_id == user.id]
        return self.enrollments

    def counts(self) -> Dict[str, int]:
        return workflow.status_counts(self.enrollments)

    @property
    def active_count(self) -> int:
        return workflow.count_active(self.enrollments)


class NotificationsView:
    def __init__(self, api: ApiClient, auth: AuthContext):
        auth.require_role(UserRole.student)
        self.api = api
        self.auth = auth
        self.notifications: List[Notification] = []

    def refresh(self) -> List[Notification]:
        self.auth.require_role(UserRole.student)
        self.notifications = self.api.notifications.list()
        return self.notifications

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.notifications if not n.is_read)
