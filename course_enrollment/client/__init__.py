from course_enrollment.client.auth import AuthContext, FileSessionStore
from course_enrollment.client.api import ApiClient
from course_enrollment.client.courses import CourseForm, CourseManagement, SessionDraft
from course_enrollment.client.enrollment_request import EnrollmentRequestFlow
from course_enrollment.client.enrollment_review import EnrollmentReviewFlow
from course_enrollment.client.status_views import MyEnrollmentsView, NotificationsView
from course_enrollment.client.navigation import views_for

__all__ = [
    "AuthContext",
    "FileSessionStore",
    "ApiClient",
    "CourseForm",
    "CourseManagement",
    "SessionDraft",
    "EnrollmentRequestFlow",
    "EnrollmentReviewFlow",
    "MyEnrollmentsView",
    "NotificationsView",
    "views_for",
]
