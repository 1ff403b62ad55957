import json

import httpx
import pytest

from course_enrollment.client.api import SERVER_ERROR_MESSAGE, NETWORK_ERROR_MESSAGE, ApiClient
from course_enrollment.client.auth import AuthContext
from course_enrollment.client.errors import AuthExpired, NetworkError, RequestError, ServerError, ValidationError
from course_enrollment.schemas.user import AuthResponse, UserOut

USER = {
    "id": 3, "name": "Ana", "email": "ana@university.edu", "role": "student",
    "created_at": "2024-01-01T00:00:00Z", "updated_at": "2024-01-01T00:00:00Z",
}


def _client(handler, notices):
    auth = AuthContext()
    auth.login(AuthResponse(message="ok", user=UserOut.model_validate(USER), token="tok-123"))
    http = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://api.test/api")
    return ApiClient(auth, http=http, notice=notices.append)


def test_bearer_header_is_attached():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        seen["path"] = request.url.path
        return httpx.Response(200, json=[])

    assert _client(handler, []).courses.list() == []
    assert seen == {"auth": "Bearer tok-123", "path": "/api/courses"}


def test_401_clears_session_without_notice():
    notices = []
    api = _client(lambda r: httpx.Response(401, json={"message": "Invalid or expired token"}), notices)
    with pytest.raises(AuthExpired):
        api.courses.list()
    assert not api.auth_context.is_authenticated
    assert api.auth_context.token is None
    assert notices == []


def test_400_surfaces_server_message():
    notices = []
    msg = "You can only enroll in a maximum of 3 courses."
    api = _client(lambda r: httpx.Response(400, json={"message": msg}), notices)
    with pytest.raises(ValidationError) as exc:
        api.enrollments.enroll(1)
    assert exc.value.message == msg
    assert notices == [msg]
    assert api.auth_context.is_authenticated


def test_500_uses_generic_message():
    notices = []
    api = _client(lambda r: httpx.Response(500, json={"message": "boom"}), notices)
    with pytest.raises(ServerError):
        api.notifications.list()
    assert notices == [SERVER_ERROR_MESSAGE]


def test_other_status_mentions_code():
    notices = []
    api = _client(lambda r: httpx.Response(418, text="teapot"), notices)
    with pytest.raises(RequestError) as exc:
        api.enrollments.mine()
    assert exc.value.status_code == 418
    assert notices == ["An error occurred (status 418). Please try again."]


def test_transport_failure_is_network_error():
    notices = []

    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(NetworkError):
        _client(handler, notices).courses.list()
    assert notices == [NETWORK_ERROR_MESSAGE]


def test_enroll_body_uses_camel_case_and_skips_blanks():

    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(201, json={
            "id": 1, "user_id": 3, "course_id": 2, "status": "pending",
            "selected_date": None, "selected_session_id": None,
            "created_at": "2024-01-01T00:00:00Z", "updated_at": "2024-01-01T00:00:00Z",
        })

    _client(handler, []).enrollments.enroll(2)
    assert bodies == [{"course_id": 2}]
