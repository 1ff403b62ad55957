# course_enrollment/client/api.py
"""HTTP access to the enrollment REST API.

``ApiClient`` owns the error policy: every non-2xx response becomes one of
the exceptions in ``client.errors``. A 401 also clears the auth context, and
400/5xx/transport failures are announced through the ``notice`` callable
before the exception propagates. Nothing is retried.
"""
from __future__ import annotations

import datetime as dt
import logging
from typing import Any, Callable, List, Optional

import httpx
from pydantic import TypeAdapter

from course_enrollment.core.config import settings
from course_enrollment.client.auth import AuthContext
from course_enrollment.client.errors import (
    AuthExpired,
    NetworkError,
    RequestError,
    ServerError,
    ValidationError,
    build_local,
)
from course_enrollment.schemas.course import Course, CourseIn
from course_enrollment.schemas.enrollment import Enrollment, EnrollmentCreate
from course_enrollment.schemas.notification import Notification
from course_enrollment.schemas.user import AuthResponse, LoginIn, RegisterIn, UserOut

logger = logging.getLogger(__name__)

Notice = Callable[[str], None]

SESSION_EXPIRED_MESSAGE = "Your session has expired. Please log in again."
SERVER_ERROR_MESSAGE = "Internal Server Error occurred. Please try again later."
NETWORK_ERROR_MESSAGE = "Could not reach the server. Please check your connection and try again."

_courses = TypeAdapter(List[Course])
_enrollments = TypeAdapter(List[Enrollment])
_notifications = TypeAdapter(List[Notification])


def log_notice(message: str) -> None:
    logger.warning("%s", message)


def _error_message(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        msg = body.get("message")
        if isinstance(msg, str) and msg:
            return msg
    return None


class ApiClient:
    def __init__(
        self,
        auth: AuthContext,
        *,
        base_url: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        notice: Optional[Notice] = None,
    ):
        self.auth_context = auth
        self.notice: Notice = notice or log_notice
        self._owns_http = http is None
        # no explicit timeout: httpx defaults apply
        self.http = http or httpx.Client(base_url=base_url or settings.API_BASE_URL)

        self.auth = AuthAPI(self)
        self.courses = CoursesAPI(self)
        self.enrollments = EnrollmentsAPI(self)
        self.notifications = NotificationsAPI(self)

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ---------------------------
    # transport
    # ---------------------------

    def request(self, method: str, path: str, *, json: Any = None, authenticated: bool = True) -> Any:
        headers = {"Accept": "application/json"}
        token = self.auth_context.token
        if authenticated and token:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug("%s %s", method, path)
        try:
            resp = self.http.request(method, path, json=json, headers=headers)
        except httpx.TransportError as exc:
            logger.error("Request %s %s failed: %s", method, path, exc)
            self.notice(NETWORK_ERROR_MESSAGE)
            raise NetworkError(NETWORK_ERROR_MESSAGE) from exc

        if resp.is_success:
            return resp.json() if resp.content else None
        self._raise_for_response(resp)

    def _raise_for_response(self, resp: httpx.Response) -> None:
        status = resp.status_code
        try:
            body = resp.json()
        except ValueError:
            body = resp.text or None
        message = _error_message(body)

        if status == 401:
            # no notice: the caller sends the user back to login
            logger.warning("Session rejected by the server (%s %s)", resp.request.method, resp.request.url.path)
            self.auth_context.logout()
            raise AuthExpired(message or SESSION_EXPIRED_MESSAGE, status_code=status, payload=body)

        if status == 400 and message:
            self.notice(message)
            raise ValidationError(message, status_code=status, payload=body)

        if status >= 500:
            logger.error("Server error (%s): %s", status, body)
            self.notice(SERVER_ERROR_MESSAGE)
            raise ServerError(SERVER_ERROR_MESSAGE, status_code=status, payload=body)

        logger.error("API error: %s %s", status, body)
        message = message or f"An error occurred (status {status}). Please try again."
        self.notice(message)
        raise RequestError(message, status_code=status, payload=body)


class _Resource:
    def __init__(self, client: ApiClient):
        self.client = client


class AuthAPI(_Resource):
    def login(self, email: str, password: str) -> UserOut:
        body = build_local(LoginIn, email=email, password=password).model_dump(mode="json")
        data = self.client.request("POST", "/login", json=body, authenticated=False)
        return self.client.auth_context.login(AuthResponse.model_validate(data))

    def register(self, name: str, email: str, password: str, password_confirmation: str) -> UserOut:
        body = build_local(
            RegisterIn, name=name, email=email, password=password, password_confirmation=password_confirmation
        ).model_dump(mode="json")
        data = self.client.request("POST", "/register", json=body, authenticated=False)
        return self.client.auth_context.login(AuthResponse.model_validate(data))

    def logout(self) -> None:
        # tokens are stateless on the server; forgetting them is enough
        self.client.auth_context.logout()


class CoursesAPI(_Resource):
    def list(self) -> List[Course]:
        return _courses.validate_python(self.client.request("GET", "/courses"))

    def create(self, data: CourseIn) -> Course:
        return Course.model_validate(self.client.request("POST", "/courses", json=data.model_dump(mode="json")))

    def update(self, course_id: int, data: CourseIn) -> Course:
        payload = self.client.request("PUT", f"/courses/{course_id}", json=data.model_dump(mode="json"))
        return Course.model_validate(payload)

    def delete(self, course_id: int) -> None:
        self.client.request("DELETE", f"/courses/{course_id}")


class EnrollmentsAPI(_Resource):
    def list_all(self) -> List[Enrollment]:
        return _enrollments.validate_python(self.client.request("GET", "/enrollments"))

    def mine(self) -> List[Enrollment]:
        return _enrollments.validate_python(self.client.request("GET", "/my-enrollments"))

    def enroll(
        self,
        course_id: int,
        selected_date: Optional[dt.date] = None,
        selected_session_id: Optional[int] = None,
    ) -> Enrollment:
        body = EnrollmentCreate(
            course_id=course_id, selected_date=selected_date, selected_session_id=selected_session_id
        ).model_dump(mode="json", by_alias=True, exclude_none=True)
        return Enrollment.model_validate(self.client.request("POST", "/enrollments", json=body))

    def approve(self, enrollment_id: int) -> Enrollment:
        return Enrollment.model_validate(self.client.request("POST", f"/enrollments/{enrollment_id}/approve"))

    def reject(self, enrollment_id: int) -> Enrollment:
        return Enrollment.model_validate(self.client.request("POST", f"/enrollments/{enrollment_id}/reject"))


class NotificationsAPI(_Resource):
    def list(self) -> List[Notification]:
        return _notifications.validate_python(self.client.request("GET", "/notifications"))
