import os
import stat

import pytest

from course_enrollment.client.auth import AuthContext, FileSessionStore
from course_enrollment.client.errors import AccessDenied, AuthExpired, LocalValidationError, ValidationError
from course_enrollment.client.navigation import landing_view, views_for
from course_enrollment.core.config import settings
from course_enrollment.core.enums import UserRole
from course_enrollment.schemas.user import AuthResponse


def test_register_creates_a_logged_in_student(make_api):
    api = make_api()
    user = api.auth.register("Ana", "ana@university.edu", "password123", "password123")
    assert user.role is UserRole.student
    assert api.auth_context.is_authenticated
    assert api.auth_context.user.email == "ana@university.edu"


def test_admin_login(admin_api):
    assert admin_api.auth_context.has_role(UserRole.admin)
    assert admin_api.auth_context.user.email == settings.ADMIN_EMAIL


def test_bad_credentials_are_unauthenticated(make_api, notices):
    api = make_api()
    with pytest.raises(AuthExpired) as exc:
        api.auth.login(settings.ADMIN_EMAIL, "wrong-password")
    assert exc.value.message == "Invalid credentials."
    assert not api.auth_context.is_authenticated
    assert notices == []


def test_password_mismatch_is_rejected_by_server(make_api, notices):
    api = make_api()
    with pytest.raises(ValidationError):
        api.auth.register("Bo", "bo@university.edu", "password123", "password999")
    assert notices == ["Password confirmation does not match."]
    assert not api.auth_context.is_authenticated


def test_duplicate_email(make_api, notices):
    make_api().auth.register("Cy", "cy@university.edu", "password123", "password123")
    with pytest.raises(ValidationError):
        make_api().auth.register("Cy again", "CY@university.edu", "password123", "password123")
    assert notices == ["The email has already been taken."]


def test_malformed_email_never_reaches_the_server(make_api):
    api = make_api()
    with pytest.raises(LocalValidationError) as exc:
        api.auth.login("not-an-email", "password123")
    assert exc.value.message.startswith("email:")


def test_logout_forgets_token(student_api):
    student_api.auth.logout()
    assert student_api.auth_context.token is None
    assert views_for(student_api.auth_context)[0].key == "login"


def test_session_file_round_trip(tmp_path, student_api):
    store = FileSessionStore(str(tmp_path / "nested" / "session.json"))
    first = AuthContext(store)
    first.login(AuthResponse(message="ok", user=student_api.auth_context.user, token=student_api.auth_context.token))

    restored = AuthContext(store)
    assert restored.is_authenticated
    assert restored.user.id == student_api.auth_context.user.id

    restored.logout()
    assert store.load() is None
    assert not AuthContext(store).is_authenticated


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_session_file_is_owner_only(tmp_path):
    fresh = tmp_path / "fresh.json"
    FileSessionStore(str(fresh)).save({"user": {}, "token": "t"})
    assert stat.S_IMODE(fresh.stat().st_mode) == 0o600

    old = tmp_path / "old.json"
    old.write_text("{}")
    old.chmod(0o644)
    FileSessionStore(str(old)).save({"user": {}, "token": "t"})
    assert stat.S_IMODE(old.stat().st_mode) == 0o600


def test_corrupt_session_file_is_ignored(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json")
    assert not AuthContext(FileSessionStore(str(path))).is_authenticated


def test_require_role():
    auth = AuthContext()
    with pytest.raises(AccessDenied) as exc:
        auth.require_role(UserRole.student)
    assert exc.value.message == "Please log in first."


def test_navigation_per_role(admin_api, student_api, make_api):
    assert [i.key for i in views_for(admin_api.auth_context)] == ["courses", "enrollments"]
    assert [i.key for i in views_for(student_api.auth_context)] == ["courses", "my-enrollments", "notifications"]
    anonymous = make_api().auth_context
    assert [i.key for i in views_for(anonymous)] == ["login", "register"]
    assert landing_view(anonymous) == "login"
    assert landing_view(student_api.auth_context) == "courses"
