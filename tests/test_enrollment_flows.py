import datetime as dt

import httpx
import pytest

from course_enrollment.client.api import ApiClient
from course_enrollment.client.courses import CourseManagement
from course_enrollment.client.enrollment_request import EnrollmentRequestFlow, parse_date
from course_enrollment.client.enrollment_review import EnrollmentReviewFlow
from course_enrollment.client.errors import (
    AccessDenied,
    AuthExpired,
    InvalidTransition,
    LocalValidationError,
    ValidationError,
)
from course_enrollment.client.status_views import STATUS_MESSAGES, MyEnrollmentsView, NotificationsView
from course_enrollment.core.enums import EnrollmentStatus
from course_enrollment.schemas.user import AuthResponse


def _enroll(api, course):
    return EnrollmentRequestFlow(api, api.auth_context, course).submit()


def test_request_defaults_to_start_date_and_first_session(student_api, make_course):
    course = make_course()
    flow = CourseManagement(student_api, student_api.auth_context).begin_enrollment(course)
    assert flow.selected_date == dt.date(2024, 1, 1)
    assert flow.selected_session_id == course.sessions[0].id
    assert flow.date_options == [dt.date(2024, 1, 1), dt.date(2024, 1, 2), dt.date(2024, 1, 3)]

    enrollment = flow.submit()
    assert enrollment.status is EnrollmentStatus.pending
    assert enrollment.selected_date == dt.date(2024, 1, 1)
    assert enrollment.selected_session_id == course.sessions[0].id


def test_all_sessions_choice(student_api, make_course):
    course = make_course()
    flow = EnrollmentRequestFlow(student_api, student_api.auth_context, course)
    flow.select_session(None)
    flow.select_date("2024-01-03")
    assert flow.submit().selected_session_id is None


def test_missing_date_fails_locally_without_a_request(student_api, make_course):
    course = make_course()
    notices = []

    def handler(request):
        raise AssertionError(f"unexpected request {request.url}")

    offline = ApiClient(
        student_api.auth_context,
        http=httpx.Client(transport=httpx.MockTransport(handler), base_url="http://api.test/api"),
        notice=notices.append,
    )
    flow = EnrollmentRequestFlow(offline, offline.auth_context, course)
    flow.select_date("")
    with pytest.raises(LocalValidationError):
        flow.submit()
    assert notices == ["Please select a date for enrollment."]
    assert not flow.submitting


def test_out_of_range_date_and_foreign_session(student_api, make_course):
    course, other = make_course(), make_course()
    flow = EnrollmentRequestFlow(student_api, student_api.auth_context, course)
    flow.select_date(dt.date(2024, 2, 1))
    assert flow.validation_error() == "The selected date is outside the course dates."
    flow.select_date(dt.date(2024, 1, 2))
    flow.select_session(other.sessions[0].id)
    assert flow.validation_error() == "The selected session does not belong to this course."

    with pytest.raises(ValidationError):
        student_api.enrollments.enroll(course.id, dt.date(2024, 1, 2), other.sessions[0].id)


def test_invalid_date_text():

    assert parse_date(" 2024-01-02 ") == dt.date(2024, 1, 2)
    with pytest.raises(LocalValidationError):
        parse_date("02/01/2024")


def test_admins_cannot_request(admin_api, make_course):
    with pytest.raises(AccessDenied):
        EnrollmentRequestFlow(admin_api, admin_api.auth_context, make_course())


def test_cap_of_three_active_enrollments(student_api, make_course, notices):
    courses = [make_course() for _ in range(4)]
    mine = MyEnrollmentsView(student_api, student_api.auth_context)
    for course in courses[:3]:
        EnrollmentRequestFlow(student_api, student_api.auth_context, course, my_enrollments=mine).submit()
    assert mine.active_count == 3

    flow = EnrollmentRequestFlow(student_api, student_api.auth_context, courses[3], my_enrollments=mine)
    with pytest.raises(ValidationError):
        flow.submit()
    assert notices == ["You can only enroll in a maximum of 3 courses."]
    assert len(mine.refresh()) == 3


def test_duplicate_request_for_same_course(student_api, make_course, notices):
    course = make_course()
    _enroll(student_api, course)
    with pytest.raises(ValidationError):
        _enroll(student_api, course)
    assert notices == ["You already have an enrollment request for this course."]


def test_rejected_enrollment_frees_a_slot(student_api, admin_api, make_course):
    courses = [make_course() for _ in range(4)]
    first = _enroll(student_api, courses[0])
    for course in courses[1:3]:
        _enroll(student_api, course)

    review = EnrollmentReviewFlow(admin_api, admin_api.auth_context)
    review.refresh()
    review.reject(first.id)

    assert _enroll(student_api, courses[3]).status is EnrollmentStatus.pending
    # three active again, so even the rejected course is over the cap
    with pytest.raises(ValidationError):
        _enroll(student_api, courses[0])
    mine = MyEnrollmentsView(student_api, student_api.auth_context)
    mine.refresh()
    assert mine.counts() == {"all": 4, "pending": 3, "approved": 0, "rejected": 1}


def test_rerequest_after_rejection(student_api, admin_api, make_course):
    course = make_course()
    first = _enroll(student_api, course)
    admin_api.enrollments.reject(first.id)
    again = _enroll(student_api, course)
    assert again.id != first.id
    assert again.status is EnrollmentStatus.pending


def test_admin_review_approve_then_filter(admin_api, make_student, make_course):
    courses = [make_course() for _ in range(3)]
    students = [make_student(f"Student {i}") for i in range(3)]
    for api in students:
        for course in courses:
            _enroll(api, course)

    review = EnrollmentReviewFlow(admin_api, admin_api.auth_context)
    review.refresh()
    assert review.counts() == {"all": 9, "pending": 9, "approved": 0, "rejected": 0}
    assert [e.id for e in review.enrollments] == list(range(9, 0, -1))
    assert review.find(7).user.name == "Student 2"

    updated = review.approve(7)
    assert updated.status is EnrollmentStatus.approved
    assert review.busy_id is None

    review.set_filter("pending")
    assert 7 not in [e.id for e in review.visible]
    assert len(review.visible) == 8
    review.set_filter("approved")
    assert [e.id for e in review.visible] == [7]
    assert review.counts()["all"] == 9


def test_terminal_enrollment_is_refused_locally(admin_api, student_api, make_course):
    enrollment = _enroll(student_api, make_course())
    review = EnrollmentReviewFlow(admin_api, admin_api.auth_context)
    review.refresh()
    review.approve(enrollment.id)
    with pytest.raises(InvalidTransition):
        review.reject(enrollment.id)


def test_terminal_enrollment_is_refused_by_server(admin_api, student_api, make_course, notices):
    enrollment = _enroll(student_api, make_course())
    admin_api.enrollments.reject(enrollment.id)
    with pytest.raises(ValidationError):
        admin_api.enrollments.approve(enrollment.id)
    assert notices == ["Enrollment has already been rejected; cannot approve it."]


def test_review_is_admin_only(student_api):
    with pytest.raises(AccessDenied) as exc:
        EnrollmentReviewFlow(student_api, student_api.auth_context)
    assert exc.value.message == "This page is only available for admins."


def test_my_enrollments_only_lists_own_requests(make_student, make_course):
    course = make_course()
    ana, bo = make_student("Ana"), make_student("Bo")
    _enroll(ana, course)
    view = MyEnrollmentsView(bo, bo.auth_context)
    assert view.refresh() == []

    view = MyEnrollmentsView(ana, ana.auth_context)
    (only,) = view.refresh()
    assert only.course.title == course.title
    assert STATUS_MESSAGES[only.status].startswith("Your enrollment request is pending")


def test_decisions_produce_notifications(admin_api, student_api, make_course):
    course = make_course(title="Operating Systems")
    first = _enroll(student_api, course)
    second = _enroll(student_api, make_course())
    admin_api.enrollments.approve(first.id)
    admin_api.enrollments.reject(second.id)

    view = NotificationsView(student_api, student_api.auth_context)
    notes = view.refresh()
    assert view.unread_count == 2
    assert {n.data.status for n in notes} == {"approved", "rejected"}
    approved = next(n for n in notes if n.data.status == "approved")
    assert approved.data.course == "Operating Systems"
    assert approved.data.message == "Your enrollment request for Operating Systems has been approved."


def test_stale_token_logs_out(make_api, student_api):
    api = make_api()
    api.auth_context.login(AuthResponse(message="ok", user=student_api.auth_context.user, token="garbage"))

    with pytest.raises(AuthExpired):
        MyEnrollmentsView(api, api.auth_context).refresh()
    assert not api.auth_context.is_authenticated
