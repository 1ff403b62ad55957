# course_enrollment/client/errors.py
from typing import Any, Optional

from pydantic import ValidationError as SchemaError


class ClientError(Exception):
    """Base of everything the client raises at its callers."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


# ---- server / transport ----

class AuthExpired(ClientError):
    """401: the local session has already been cleared when this is raised."""


class ValidationError(ClientError):
    """400 carrying a server message (cap exceeded, bad date, ...)."""


class ServerError(ClientError):
    """5xx."""


class NetworkError(ClientError):
    """The request never got a response."""


class RequestError(ClientError):
    """Any other non-2xx status (403, 404, ...)."""


# ---- raised before any request is sent ----

class LocalValidationError(ClientError):
    pass


class InvalidTransition(ClientError):
    pass


class AccessDenied(ClientError):
    pass


def build_local(model, **fields):
    """Build a request schema, turning pydantic errors into ``LocalValidationError``."""
    try:
        return model(**fields)
    except SchemaError as exc:
        first = exc.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ()))
        msg = str(first.get("msg", "Invalid value."))
        raise LocalValidationError(f"{field}: {msg}" if field else msg) from exc
