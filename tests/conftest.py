import os
import tempfile
from types import SimpleNamespace

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "academy-test-logs"))
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db, make_engine
from app.main import app
from app.models.course import Course
from app.models.group import Group
from app.models.room import Room
from app.models.user import User
from app.utils.auth import get_current_user, require_admin, require_staff


@pytest.fixture
def engine():
    eng = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def seed(db):
    admin = User(username="admin", password_hash="x", role="admin", first_name="Ada", last_name="Admin")
    teacher = User(username="t.smith", password_hash="x", role="teacher", first_name="Tom", last_name="Smith")
    other_teacher = User(username="t.jones", password_hash="x", role="teacher", first_name="Jane", last_name="Jones")
    student = User(username="s.lee", password_hash="x", role="student")

    group = Group(name="Grade 7A", members=[student])
    other_group = Group(name="Grade 7B")
    course = Course(code="MATH-7", name="Mathematics 7")
    room = Room(name="Room 101", capacity=30)
    other_room = Room(name="Lab 2", capacity=20, type="LAB")

    db.add_all([admin, teacher, other_teacher, student, group, other_group, course, room, other_room])
    db.commit()

    return SimpleNamespace(
        admin=admin.id,
        teacher=teacher.id,
        other_teacher=other_teacher.id,
        student=student.id,
        group=group.id,
        other_group=other_group.id,
        course=course.id,
        room=room.id,
        other_room=other_room.id,
    )


def _override_db(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()
    return _get_db


@pytest.fixture
def client(session_factory, seed):
    """Client whose caller is the seeded admin, no token needed."""
    caller = SimpleNamespace(id=seed.admin, role="admin", username="admin")

    app.dependency_overrides[get_db] = _override_db(session_factory)
    app.dependency_overrides[get_current_user] = lambda: caller
    app.dependency_overrides[require_staff] = lambda: caller
    app.dependency_overrides[require_admin] = lambda: caller
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def as_user(client):
    """Switch the caller for /me endpoints."""
    def _set(user_id, role="student"):
        caller = SimpleNamespace(id=user_id, role=role, username=f"user{user_id}")
        app.dependency_overrides[get_current_user] = lambda: caller
        return client
    return _set


@pytest.fixture
def raw_client(session_factory):
    """Client that goes through the real token checks."""
    app.dependency_overrides[get_db] = _override_db(session_factory)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def proposal(seed):
    def _make(**overrides):
        body = {
            "title": "Algebra",
            "creatorId": seed.admin,
            "isRecurring": True,
            "startDate": "2026-09-07",
            "endDate": "2026-12-18",
            "daysOfWeek": ["MON", "WED"],
            "assignedToTeacherId": seed.teacher,
            "sessions": [{"startTime": "09:00", "endTime": "10:00"}],
        }
        body.update(overrides)
        return body
    return _make
