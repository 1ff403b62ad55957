# course_enrollment/client/auth.py
"""The authenticated-user context.

One ``AuthContext`` exists per client process. It is written at login,
logout and when the API client sees a 401, and read everywhere else. Views
and the API client receive it explicitly.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Optional, Protocol

from course_enrollment.core.enums import UserRole
from course_enrollment.client.errors import AccessDenied
from course_enrollment.schemas.user import AuthResponse, UserOut

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    def load(self) -> Optional[dict]: ...
    def save(self, data: dict) -> None: ...
    def clear(self) -> None: ...


class FileSessionStore:
    """Keeps ``{"user": ..., "token": ...}`` in a JSON file between CLI runs."""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> Optional[dict]:
        try:
            with open(self.path, encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return None
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable session file %s", self.path)
            return None
        return data if isinstance(data, dict) else None

    def save(self, data: dict) -> None:
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            # owner-only from creation; chmod covers a file left by an older run
            os.chmod(self.path, 0o600)
            json.dump(data, fh)

    def clear(self) -> None:
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass


class AuthContext:
    def __init__(self, store: Optional[SessionStore] = None):
        self._store = store
        self._user: Optional[UserOut] = None
        self._token: Optional[str] = None
        if store is not None:
            self._restore(store.load())

    def _restore(self, data: Optional[dict]) -> None:
        if not data or not data.get("token") or not data.get("user"):
            return
        try:
            self._user = UserOut.model_validate(data["user"])
        except ValueError:
            logger.warning("Discarding stored session with an invalid user record")
            return
        self._token = data["token"]

    # ---- read ----

    @property
    def user(self) -> Optional[UserOut]:
        return self._user

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None and bool(self._token)

    def has_role(self, role: UserRole) -> bool:
        return self._user is not None and self._user.role is role

    def require_role(self, role: UserRole) -> UserOut:
        if not self.is_authenticated:
            raise AccessDenied("Please log in first.")
        if not self.has_role(role):
            raise AccessDenied(f"This page is only available for {role.value}s.")
        return self._user

    # ---- write ----

    def login(self, auth: AuthResponse) -> UserOut:
        self._user = auth.user
        self._token = auth.token
        if self._store is not None:
            self._store.save({"user": auth.user.model_dump(mode="json"), "token": auth.token})
        logger.info("Logged in as %s (%s)", auth.user.email, auth.user.role.value)
        return auth.user

    def logout(self) -> None:
        self._user = None
        self._token = None
        if self._store is not None:
            self._store.clear()
