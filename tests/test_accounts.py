# tests/test_accounts.py
"""
Registration, login, the student area and admin moderation
"""

from datetime import timedelta

import pytest

from skillsync.config import settings
from skillsync.exceptions import (
    AccountBanned,
    Conflict,
    EmailNotVerified,
    Forbidden,
    NotFound,
    Unauthenticated,
    ValidationError,
)
from skillsync.models.booking import BookingStatus
from skillsync.models.tutor import TutorProfile
from skillsync.models.user import UserRole, UserStatus
from skillsync.scripts.bootstrap_admin import create_first_admin
from skillsync.scripts.seed_categories import DEFAULT_CATEGORIES, seed_categories
from skillsync.services import admin_service, student_service, user_service
from skillsync.utils.security import ensure_user_allowed


# ======================
# REGISTRATION & LOGIN
# ======================

def test_register_tutor_creates_profile(db_session):
    result = user_service.register_user(
        db_session, "New Tutor", "Tutor@Example.com", "Password123", role="tutor"
    )

    user = result["user"]
    assert user.email == "tutor@example.com"
    assert user.role == UserRole.TUTOR
    assert db_session.query(TutorProfile).filter_by(user_id=user.id).count() == 1


def test_register_student_has_no_profile(db_session):
    result = user_service.register_user(db_session, "New Student", "s@example.com", "Password123")

    assert result["user"].role == UserRole.STUDENT
    assert db_session.query(TutorProfile).count() == 0


def test_register_rejects_admin_and_duplicates(db_session):
    with pytest.raises(ValidationError):
        user_service.register_user(db_session, "Mallory", "m@example.com", "Password123", role="ADMIN")

    user_service.register_user(db_session, "Sam", "sam@example.com", "Password123")
    with pytest.raises(Conflict, match="Email already registered"):
        user_service.register_user(db_session, "Sam Again", "SAM@example.com", "Password123")


def test_email_verification_flow(db_session):
    result = user_service.register_user(db_session, "Vera", "vera@example.com", "Password123")
    assert result["user"].email_verified is False
    assert result["verification_token"]

    with pytest.raises(EmailNotVerified):
        user_service.login(db_session, "vera@example.com", "Password123")

    verified = user_service.verify_email(db_session, result["verification_token"])
    assert verified.email_verified is True

    login = user_service.login(db_session, "vera@example.com", "Password123")
    assert login["token_type"] == "bearer"
    assert login["access_token"]


def test_verify_email_rejects_access_tokens(db_session, student):
    from skillsync.utils.security import create_user_token

    with pytest.raises(ValidationError):
        user_service.verify_email(db_session, create_user_token(student))

    with pytest.raises(ValidationError):
        user_service.verify_email(db_session, "not-a-token")


def test_registration_without_verification(db_session, monkeypatch):
    monkeypatch.setattr(settings, "REQUIRE_EMAIL_VERIFICATION", False)

    result = user_service.register_user(db_session, "Quick", "quick@example.com", "Password123")

    assert result["user"].email_verified is True
    assert result["verification_token"] is None


def test_login_wrong_password(db_session):
    user_service.register_user(db_session, "Lee", "lee@example.com", "Password123")

    with pytest.raises(Unauthenticated, match="Invalid email or password"):
        user_service.login(db_session, "lee@example.com", "wrong-password")

    with pytest.raises(Unauthenticated):
        user_service.login(db_session, "nobody@example.com", "Password123")


def test_access_gate(make_user):
    assert ensure_user_allowed(make_user()).status == UserStatus.ACTIVE

    with pytest.raises(AccountBanned):
        ensure_user_allowed(make_user(status=UserStatus.BANNED))

    with pytest.raises(EmailNotVerified):
        ensure_user_allowed(make_user(email_verified=False))


def test_update_profile_requires_a_field(db_session, student):
    with pytest.raises(ValidationError, match="At least one field"):
        user_service.update_profile(db_session, student.id, name="  ", phone=None)

    updated = user_service.update_profile(db_session, student.id, phone="555-0100")
    assert updated.phone == "555-0100"
    assert updated.name == "Sam Student"


# ======================
# STUDENT AREA
# ======================

def test_student_profile_stats(db_session, student, tutor, now, make_booking):
    make_booking(student, tutor, now + timedelta(days=1))
    make_booking(student, tutor, now - timedelta(days=1), status=BookingStatus.COMPLETED)
    make_booking(student, tutor, now + timedelta(days=3), status=BookingStatus.CANCELLED)

    result = student_service.get_student_profile(db_session, student.id, now=now)

    assert result["stats"] == {
        "total_bookings": 3,
        "upcoming_bookings": 1,
        "completed_bookings": 1,
        "cancelled_bookings": 1,
    }


def test_student_area_rejects_other_roles(db_session, tutor):
    with pytest.raises(ValidationError, match="not a student"):
        student_service.get_student_profile(db_session, tutor.user_id)

    with pytest.raises(ValidationError):
        student_service.update_student_profile(db_session, tutor.user_id, name="Nope")


def test_student_bookings_filters(db_session, student, tutor, now, make_booking):
    upcoming = make_booking(student, tutor, now + timedelta(days=1))
    make_booking(student, tutor, now - timedelta(days=1))
    make_booking(student, tutor, now + timedelta(days=2), status=BookingStatus.CANCELLED)

    rows, meta = student_service.get_student_bookings(db_session, student.id, upcoming=True, now=now)
    assert [b.id for b in rows] == [upcoming.id]

    rows, meta = student_service.get_student_bookings(db_session, student.id, status="cancelled")
    assert meta["total"] == 1

    rows, meta = student_service.get_student_bookings(db_session, student.id)
    assert meta["total"] == 3


# ======================
# ADMIN
# ======================

def test_list_users_filters(db_session, make_user, make_tutor, admin):
    make_user(name="Alice Adams", email="alice@school.org")
    make_user(name="Bob Brown", status=UserStatus.BANNED)
    make_tutor(name="Carol Chen")

    users, meta = admin_service.list_users(db_session, role="student")
    assert meta["total"] == 2

    users, _ = admin_service.list_users(db_session, status="BANNED")
    assert [u.name for u in users] == ["Bob Brown"]

    users, _ = admin_service.list_users(db_session, search="SCHOOL.ORG")
    assert [u.name for u in users] == ["Alice Adams"]

    with pytest.raises(ValidationError):
        admin_service.list_users(db_session, role="wizard")


def test_ban_and_unban(db_session, student, admin):
    banned = admin_service.update_user_status(db_session, student.id, "BANNED", admin_id=admin.id)
    assert banned.status == UserStatus.BANNED

    restored = admin_service.update_user_status(db_session, student.id, "active", admin_id=admin.id)
    assert restored.status == UserStatus.ACTIVE


def test_admin_accounts_are_immutable(db_session, make_user, admin):
    other_admin = make_user(role=UserRole.ADMIN)

    with pytest.raises(Forbidden, match="Cannot modify admin user status"):
        admin_service.update_user_status(db_session, other_admin.id, "BANNED", admin_id=admin.id)

    with pytest.raises(NotFound):
        admin_service.update_user_status(db_session, 999, "BANNED")

    with pytest.raises(ValidationError):
        admin_service.update_user_status(db_session, admin.id, "SUSPENDED")


def test_admin_stats(db_session, student, tutor, admin, now, make_booking):
    make_booking(student, tutor, now - timedelta(days=1), status=BookingStatus.COMPLETED, price=60.0)
    make_booking(student, tutor, now + timedelta(days=1))

    stats = admin_service.get_stats(db_session)

    assert stats["users"] == {"total": 3, "students": 1, "tutors": 1, "admins": 1}
    assert stats["bookings"] == {"total": 2, "completed": 1, "pending": 1}
    assert stats["revenue"] == {"total": 60.0}
    assert len(stats["recent_users"]) == 3


# ======================
# SCRIPTS
# ======================

def test_bootstrap_first_admin(db_session):
    user = create_first_admin(db_session, "Root Admin", "Root@Example.com", "Sup3rSecret")

    assert user.role == UserRole.ADMIN
    assert user.email_verified is True

    with pytest.raises(ValueError, match="already exists"):
        create_first_admin(db_session, "Second", "second@example.com", "Sup3rSecret")


def test_bootstrap_rejects_weak_password(db_session):
    with pytest.raises(ValueError, match="uppercase"):
        create_first_admin(db_session, "Root", "root@example.com", "lowercase1")


def test_seed_categories_is_idempotent(db_session):
    assert seed_categories(db_session) == len(DEFAULT_CATEGORIES)
    assert seed_categories(db_session) == 0
