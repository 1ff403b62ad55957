import datetime as dt

import pytest

from course_enrollment.client.courses import CourseForm, CourseManagement, SessionDraft
from course_enrollment.client.errors import AccessDenied, LocalValidationError, RequestError, ValidationError
from course_enrollment.core.enums import SessionSlot
from course_enrollment.schemas.course import CourseIn, SessionIn


def test_admin_creates_course_with_sessions(admin_api):
    view = CourseManagement(admin_api, admin_api.auth_context)
    form = view.start_create()
    form.title = "Databases"
    form.set_dates("2024-03-01", "2024-03-10")
    form.add_session()
    draft = form.add_session()
    draft.status = "night"

    saved = view.save()
    assert saved.title == "Databases"
    assert [s.status for s in saved.sessions] == [SessionSlot.morning, SessionSlot.night]
    assert saved.sessions[0].start_time == dt.time(9)
    assert view.form is None
    assert [c.id for c in view.courses] == [saved.id]


def test_edit_updates_sessions_in_place(admin_api, make_course):
    course = make_course()
    view = CourseManagement(admin_api, admin_api.auth_context)
    view.refresh()
    form = view.start_edit(course.id)
    assert form.title == course.title
    assert [s.id for s in form.sessions] == [s.id for s in course.sessions]

    form.remove_session(0)
    form.update_session(0, "end_time", "22:30:00")
    form.add_session()
    form.description = "Updated"
    saved = view.save()

    assert saved.description == "Updated"
    assert len(saved.sessions) == 2
    assert saved.sessions[0].id == course.sessions[1].id
    assert saved.sessions[0].end_time == dt.time(22, 30)
    assert saved.sessions[1].id not in [s.id for s in course.sessions]


def test_edit_keeps_enrollment_session(admin_api, student_api, make_course):
    course = make_course()
    chosen = course.sessions[0].id
    student_api.enrollments.enroll(course.id, course.start_date, chosen)

    view = CourseManagement(admin_api, admin_api.auth_context)
    view.refresh()
    view.start_edit(course.id).description = "typo fixed"
    saved = view.save()
    assert [s.id for s in saved.sessions] == [s.id for s in course.sessions]

    (mine,) = student_api.enrollments.mine()
    assert mine.selected_session_id == chosen
    assert mine.course.session_by_id(chosen) is not None


def test_dropping_a_session_clears_enrollments_on_it(admin_api, student_api, make_course):
    course = make_course()
    dropped, kept = course.sessions
    student_api.enrollments.enroll(course.id, course.start_date, dropped.id)

    view = CourseManagement(admin_api, admin_api.auth_context)
    view.refresh()
    view.start_edit(course.id).remove_session(0)
    view.save()

    (mine,) = student_api.enrollments.mine()
    assert mine.selected_session_id is None
    assert [s.id for s in mine.course.sessions] == [kept.id]


def test_session_id_of_another_course_is_added_as_new(admin_api, make_course):
    course, other = make_course(), make_course()
    payload = CourseIn(
        title=course.title, start_date=course.start_date, end_date=course.end_date,
        sessions=[SessionIn(id=other.sessions[0].id, start_time=dt.time(8), end_time=dt.time(9))],
    )
    saved = admin_api.courses.update(course.id, payload)
    assert saved.sessions[0].id not in [s.id for s in other.sessions]
    refreshed = next(c for c in admin_api.courses.list() if c.id == other.id)
    assert [s.id for s in refreshed.sessions] == [s.id for s in other.sessions]


def test_delete_course(admin_api, make_course):
    course = make_course()
    view = CourseManagement(admin_api, admin_api.auth_context)
    view.delete(course.id)
    assert view.courses == []
    with pytest.raises(RequestError) as exc:
        admin_api.courses.delete(course.id)
    assert exc.value.status_code == 404


def test_delete_course_removes_its_enrollments(admin_api, student_api, make_course):
    course, other = make_course(), make_course()
    student_api.enrollments.enroll(course.id, course.start_date)
    student_api.enrollments.enroll(other.id, other.start_date)

    admin_api.courses.delete(course.id)

    assert [e.course_id for e in student_api.enrollments.mine()] == [other.id]
    assert [e.course_id for e in admin_api.enrollments.list_all()] == [other.id]
    assert [c.id for c in admin_api.courses.list()] == [other.id]


def test_students_list_but_cannot_edit(student_api, make_course, notices):
    make_course()
    view = CourseManagement(student_api, student_api.auth_context)
    assert len(view.refresh()) == 1
    assert not view.can_edit
    with pytest.raises(AccessDenied):
        view.start_create()

    with pytest.raises(RequestError) as exc:
        student_api.courses.delete(view.courses[0].id)
    assert exc.value.status_code == 403
    assert notices == ["This action is not allowed for your role."]


def test_form_validation():
    form = CourseForm()
    with pytest.raises(LocalValidationError) as exc:
        form.to_payload()
    assert exc.value.message == "Please fill in: title, start_date, end_date."

    form.title = "Algebra"
    form.set_dates(dt.date(2024, 2, 10), dt.date(2024, 2, 1))
    with pytest.raises(LocalValidationError):
        form.to_payload()

    form.set_dates(dt.date(2024, 2, 1), dt.date(2024, 2, 10))
    form.add_session()
    with pytest.raises(ValueError):
        form.update_session(0, "room", "B12")
    form.update_session(0, "start_time", "not a time")
    with pytest.raises(LocalValidationError):
        form.to_payload()


def test_new_session_defaults():
    assert CourseForm().add_session() == SessionDraft("morning", "09:00:00", "11:00:00")


def test_server_rejects_inverted_dates(admin_api, notices):
    with pytest.raises(ValidationError):
        admin_api.request("POST", "/courses", json={
            "title": "Backwards", "start_date": "2024-02-10", "end_date": "2024-02-01", "sessions": [],
        })
    assert "end_date must not be before start_date" in notices[0]
