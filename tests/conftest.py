import datetime as dt
import itertools
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from course_enrollment.client.api import ApiClient
from course_enrollment.client.auth import AuthContext
from course_enrollment.core.config import settings
from course_enrollment.db.base import Base
from course_enrollment.db.init_db import init_db
from course_enrollment.db.session import get_db
from course_enrollment.main import api as app
from course_enrollment.schemas.course import CourseIn, SessionIn

_emails = itertools.count(1)


@pytest.fixture()
def session_factory():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    with factory() as db:
        init_db(db)

    def override_get_db():
        db = factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield factory
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture()
def notices():
    return []


@pytest.fixture()
def make_api(session_factory, notices):
    """ApiClient wired to the in-process backend; each gets its own AuthContext."""
    created = []

    def _make():
        client = ApiClient(AuthContext(), http=TestClient(app, base_url="http://testserver/api"), notice=notices.append)
        created.append(client)
        return client

    yield _make
    for client in created:
        client.http.close()


@pytest.fixture()
def admin_api(make_api):
    api = make_api()
    api.auth.login(settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)
    return api


@pytest.fixture()
def make_student(make_api):
    def _make(name="Student"):
        api = make_api()
        email = f"student{next(_emails)}@university.edu"
        api.auth.register(name, email, "password123", "password123")
        return api

    return _make


@pytest.fixture()
def student_api(make_student):
    return make_student()


@pytest.fixture()
def make_course(admin_api):
    counter = itertools.count(1)

    def _make(start=dt.date(2024, 1, 1), end=dt.date(2024, 1, 3), sessions=None, **fields):
        data = {
            "title": f"Course {next(counter)}",
            "description": "An introductory course",
            "schedule": "Mon/Wed",
            "start_date": start,
            "end_date": end,
            "sessions": sessions if sessions is not None else [
                SessionIn(status="morning", start_time=dt.time(9), end_time=dt.time(11)),
                SessionIn(status="night", start_time=dt.time(19), end_time=dt.time(21)),
            ],
        }
        data.update(fields)
        return admin_api.courses.create(CourseIn(**data))

    return _make
