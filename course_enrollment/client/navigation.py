# course_enrollment/client/navigation.py
from typing import List, NamedTuple

from course_enrollment.core.enums import UserRole
from course_enrollment.client.auth import AuthContext


class NavItem(NamedTuple):
    key: str
    label: str


_BY_ROLE = {
    UserRole.admin: [NavItem("courses", "Courses"), NavItem("enrollments", "Enrollments")],
    UserRole.student: [
        NavItem("courses", "Courses"),
        NavItem("my-enrollments", "My Enrollments"),
        NavItem("notifications", "Notifications"),
    ],
}

_ANONYMOUS = [NavItem("login", "Login"), NavItem("register", "Register")]


def views_for(auth: AuthContext) -> List[NavItem]:
    if not auth.is_authenticated:
        return list(_ANONYMOUS)
    return list(_BY_ROLE[auth.user.role])


def landing_view(auth: AuthContext) -> str:
    """Where the app opens: the course dashboard when logged in, else login."""
    return "courses" if auth.is_authenticated else "login"
