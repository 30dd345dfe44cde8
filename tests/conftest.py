"""Pytest bootstrap: project imports, in-memory database, and data factories."""

from datetime import datetime, timedelta
from pathlib import Path
import itertools
import os
import sys

# Ensure project root is on sys.path so `import skillsync` works
PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("REQUIRE_EMAIL_VERIFICATION", "true")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from skillsync import models  # noqa: F401
from skillsync.database import Base
from skillsync.models.booking import Booking, BookingStatus
from skillsync.models.tutor import TutorProfile
from skillsync.models.user import User, UserRole, UserStatus
from skillsync.utils.security import create_user_token


# Fixed "current time" for service tests (naive UTC)
NOW = datetime(2030, 1, 7, 12, 0)


# ======================
# TEST DATABASE SETUP
# ======================

@pytest.fixture
def db_session():
    """Fresh in-memory database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def now():
    return NOW


# ======================
# FACTORIES
# ======================

@pytest.fixture
def make_user(db_session):
    counter = itertools.count(1)

    def _make(
        role=UserRole.STUDENT,
        name=None,
        email=None,
        status=UserStatus.ACTIVE,
        email_verified=True,
    ):
        n = next(counter)
        role = UserRole(role)
        user = User(
            name=name or f"{role.value.title()} {n}",
            email=email or f"{role.value.lower()}{n}@example.com",
            password_hash="hash",
            role=role.value,
            status=UserStatus(status).value,
            email_verified=email_verified,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_tutor(db_session, make_user):
    def _make(hourly_rate=40.0, experience=3, **user_fields):
        user = make_user(role=UserRole.TUTOR, **user_fields)
        profile = TutorProfile(
            user_id=user.id,
            hourly_rate=hourly_rate,
            experience=experience,
            rating_avg=0.0,
            rating_count=0,
        )
        db_session.add(profile)
        db_session.commit()
        db_session.refresh(profile)
        return profile

    return _make


@pytest.fixture
def make_booking(db_session):
    """Insert a booking directly, bypassing the creation rules (e.g. past sessions)."""
    def _make(student, tutor_profile, start, hours=1, status=BookingStatus.CONFIRMED, price=40.0):
        booking = Booking(
            student_id=student.id,
            tutor_profile_id=tutor_profile.id,
            start_time=start,
            end_time=start + timedelta(hours=hours),
            price=price,
            status=BookingStatus(status).value,
        )
        db_session.add(booking)
        db_session.commit()
        db_session.refresh(booking)
        return booking

    return _make


@pytest.fixture
def student(make_user):
    return make_user(role=UserRole.STUDENT, name="Sam Student")


@pytest.fixture
def tutor(make_tutor):
    return make_tutor(name="Tara Tutor")


@pytest.fixture
def admin(make_user):
    return make_user(role=UserRole.ADMIN, name="Ada Admin")


# ======================
# HTTP CLIENT
# ======================

@pytest.fixture
def client(db_session):
    """TestClient whose requests share the test's database session"""
    from fastapi.testclient import TestClient

    from skillsync.database import get_db
    from skillsync.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_user_token(user)}"}

    return _headers
