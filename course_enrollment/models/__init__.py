from course_enrollment.models.user import User
from course_enrollment.models.course import Course
from course_enrollment.models.course_session import CourseSession
from course_enrollment.models.enrollment import Enrollment
from course_enrollment.models.notification import Notification

__all__ = ["User", "Course", "CourseSession", "Enrollment", "Notification"]
