# tests/test_booking_service.py
"""
Booking creation, conflict detection and status changes against the
service layer
"""

import random
from datetime import timedelta

import pytest

from skillsync.crud import booking as booking_crud
from skillsync.exceptions import (
    Forbidden,
    InvalidInterval,
    InvalidStatus,
    InvalidTransition,
    NotFound,
    PastBooking,
    SelfBookingDenied,
    SlotConflict,
    ValidationError,
)
from skillsync.models.booking import Booking, BookingStatus, BLOCKING_STATUSES
from skillsync.models.user import UserRole
from skillsync.services import booking_service


def _book(db, student, tutor, now, start_offset_h, hours=1, price=40.0):
    start = now + timedelta(hours=start_offset_h)
    return booking_service.create_booking(
        db,
        student_id=student.id,
        tutor_profile_id=tutor.id,
        start_time=start,
        end_time=start + timedelta(hours=hours),
        price=price,
        now=now,
    )


# ======================
# CREATE BOOKING
# ======================

def test_create_booking_success(db_session, student, tutor, now):
    booking = _book(db_session, student, tutor, now, start_offset_h=24)

    assert booking.id is not None
    assert booking.status == BookingStatus.CONFIRMED
    assert booking.student.id == student.id
    assert booking.tutor_profile.user.name == "Tara Tutor"
    assert booking.price == 40.0


def test_create_booking_accepts_aware_datetimes(db_session, student, tutor, now):
    from datetime import UTC, timezone

    start = (now + timedelta(days=1)).replace(tzinfo=UTC).astimezone(timezone(timedelta(hours=5)))
    booking = booking_service.create_booking(
        db_session, student.id, tutor.id, start, start + timedelta(hours=1), 30.0, now=now
    )

    assert booking.start_time == now + timedelta(days=1)


def test_unknown_tutor(db_session, student, now):
    with pytest.raises(NotFound, match="Tutor profile not found"):
        booking_service.create_booking(
            db_session, student.id, 999, now + timedelta(hours=1), now + timedelta(hours=2), 40.0, now=now
        )


def test_self_booking_denied(db_session, tutor, now):
    with pytest.raises(SelfBookingDenied):
        booking_service.create_booking(
            db_session, tutor.user_id, tutor.id, now + timedelta(hours=1), now + timedelta(hours=2), 40.0, now=now
        )


@pytest.mark.parametrize("hours", [0, -1])
def test_invalid_interval(db_session, student, tutor, now, hours):
    start = now + timedelta(hours=5)
    with pytest.raises(InvalidInterval, match="End time must be after start time"):
        booking_service.create_booking(
            db_session, student.id, tutor.id, start, start + timedelta(hours=hours), 40.0, now=now
        )


@pytest.mark.parametrize("offset_minutes", [0, -1, -600])
def test_past_booking(db_session, student, tutor, now, offset_minutes):
    """A session starting now or earlier cannot be booked"""
    start = now + timedelta(minutes=offset_minutes)
    with pytest.raises(PastBooking, match="Cannot book sessions in the past"):
        booking_service.create_booking(
            db_session, student.id, tutor.id, start, start + timedelta(hours=1), 40.0, now=now
        )


@pytest.mark.parametrize("price", [0, -5.0])
def test_non_positive_price(db_session, student, tutor, now, price):
    with pytest.raises(ValidationError):
        _book(db_session, student, tutor, now, start_offset_h=3, price=price)


@pytest.mark.parametrize("price", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_price(db_session, student, tutor, now, price):
    with pytest.raises(ValidationError, match="Price must be a positive number"):
        _book(db_session, student, tutor, now, start_offset_h=3, price=price)

    assert db_session.query(Booking).count() == 0

    # The slot stays free
    booking = _book(db_session, student, tutor, now, start_offset_h=3)
    assert booking.status == BookingStatus.CONFIRMED.value


# ======================
# VALIDATION ORDER
# ======================

def test_missing_tutor_reported_before_bad_interval(db_session, student, now):
    with pytest.raises(NotFound):
        booking_service.create_booking(
            db_session, student.id, 999, now + timedelta(hours=2), now + timedelta(hours=1), -1, now=now
        )


def test_self_booking_reported_before_bad_interval(db_session, tutor, now):
    with pytest.raises(SelfBookingDenied):
        booking_service.create_booking(
            db_session, tutor.user_id, tutor.id, now - timedelta(hours=1), now - timedelta(hours=2), 40.0, now=now
        )


def test_bad_interval_reported_before_past(db_session, student, tutor, now):
    with pytest.raises(InvalidInterval):
        booking_service.create_booking(
            db_session, student.id, tutor.id, now - timedelta(hours=1), now - timedelta(hours=2), 40.0, now=now
        )


def test_past_reported_before_price(db_session, student, tutor, now):
    with pytest.raises(PastBooking):
        booking_service.create_booking(
            db_session, student.id, tutor.id, now - timedelta(hours=2), now - timedelta(hours=1), 0, now=now
        )


def test_price_reported_before_conflict(db_session, student, tutor, now):
    _book(db_session, student, tutor, now, start_offset_h=10)

    with pytest.raises(ValidationError) as excinfo:
        _book(db_session, student, tutor, now, start_offset_h=10, price=0)
    assert not isinstance(excinfo.value, SlotConflict)


def test_failed_creation_writes_nothing(db_session, student, tutor, now):
    with pytest.raises(PastBooking):
        _book(db_session, student, tutor, now, start_offset_h=-1)

    assert db_session.query(Booking).count() == 0


# ======================
# CONFLICT DETECTION
# ======================

def test_overlapping_booking_rejected(db_session, make_user, tutor, now):
    first_student = make_user()
    second_student = make_user()
    _book(db_session, first_student, tutor, now, start_offset_h=10, hours=1)

    with pytest.raises(SlotConflict, match="already booked"):
        # 10:30 - 11:30 overlaps 10:00 - 11:00
        start = now + timedelta(hours=10, minutes=30)
        booking_service.create_booking(
            db_session, second_student.id, tutor.id, start, start + timedelta(hours=1), 40.0, now=now
        )

    assert db_session.query(Booking).count() == 1


@pytest.mark.parametrize(
    "start_offset_min,length_min",
    [
        (0, 60),      # identical window
        (-30, 120),   # contains the existing booking
        (15, 30),     # contained in it
        (-30, 31),    # overlaps the first minute
        (59, 30),     # overlaps the last minute
    ],
)
def test_overlap_shapes(db_session, student, tutor, now, start_offset_min, length_min):
    existing = _book(db_session, student, tutor, now, start_offset_h=20)

    start = existing.start_time + timedelta(minutes=start_offset_min)
    with pytest.raises(SlotConflict):
        booking_service.create_booking(
            db_session, student.id, tutor.id, start, start + timedelta(minutes=length_min), 40.0, now=now
        )


def test_adjacent_bookings_allowed(db_session, student, tutor, now):
    """Half-open windows: back-to-back sessions do not conflict"""
    middle = _book(db_session, student, tutor, now, start_offset_h=10)
    after = _book(db_session, student, tutor, now, start_offset_h=11)
    before = _book(db_session, student, tutor, now, start_offset_h=9)

    assert after.start_time == middle.end_time
    assert before.end_time == middle.start_time
    assert db_session.query(Booking).count() == 3


def test_cancelled_booking_frees_slot(db_session, student, tutor, now):
    first = _book(db_session, student, tutor, now, start_offset_h=10)
    booking_service.update_booking_status(
        db_session, first.id, student.id, UserRole.STUDENT.value, "CANCELLED", now=now
    )

    again = _book(db_session, student, tutor, now, start_offset_h=10)
    assert again.status == BookingStatus.CONFIRMED


def test_completed_booking_still_blocks(db_session, student, tutor, now, make_booking):
    completed = make_booking(student, tutor, now + timedelta(hours=5), status=BookingStatus.COMPLETED)

    with pytest.raises(SlotConflict):
        booking_service.create_booking(
            db_session, student.id, tutor.id, completed.start_time, completed.end_time, 40.0, now=now
        )


def test_other_tutor_not_affected(db_session, student, make_tutor, now):
    first_tutor = make_tutor()
    second_tutor = make_tutor()
    _book(db_session, student, first_tutor, now, start_offset_h=10)

    booking = _book(db_session, student, second_tutor, now, start_offset_h=10)
    assert booking.tutor_profile_id == second_tutor.id


def test_conflict_query_matches_overlap_predicate(db_session, student, tutor, now, make_booking):
    """Randomized check of the SQL scan against the pure half-open predicate"""
    rng = random.Random(20240601)
    base = now + timedelta(days=1)
    statuses = list(BookingStatus)

    existing = []
    for _ in range(12):
        start = base + timedelta(minutes=15 * rng.randint(0, 40))
        status = rng.choice(statuses)
        existing.append(make_booking(student, tutor, start, hours=rng.choice([0.5, 1, 2]), status=status))

    for _ in range(200):
        start = base + timedelta(minutes=15 * rng.randint(-4, 48))
        end = start + timedelta(minutes=15 * rng.randint(1, 8))

        expected = any(
            BookingStatus(b.status) in BLOCKING_STATUSES
            and booking_crud.intervals_overlap(start, end, b.start_time, b.end_time)
            for b in existing
        )
        found = booking_crud.find_conflicting_booking(db_session, tutor.id, start, end)

        assert (found is not None) is expected


def test_intervals_overlap_is_half_open():
    from datetime import datetime

    a = datetime(2030, 1, 1, 10)
    b = datetime(2030, 1, 1, 11)
    c = datetime(2030, 1, 1, 12)

    assert not booking_crud.intervals_overlap(a, b, b, c)
    assert not booking_crud.intervals_overlap(b, c, a, b)
    assert booking_crud.intervals_overlap(a, c, b, c)


# ======================
# STATUS CHANGES
# ======================

def test_tutor_completes_finished_session(db_session, student, tutor, now, make_booking):
    booking = make_booking(student, tutor, now - timedelta(hours=2))

    updated = booking_service.update_booking_status(
        db_session, booking.id, tutor.user_id, UserRole.TUTOR.value, "completed", now=now
    )

    assert updated.status == BookingStatus.COMPLETED


def test_tutor_cannot_complete_future_session(db_session, student, tutor, now):
    booking = _book(db_session, student, tutor, now, start_offset_h=3)

    with pytest.raises(InvalidTransition, match="Cannot mark future bookings as completed"):
        booking_service.update_booking_status(
            db_session, booking.id, tutor.user_id, UserRole.TUTOR.value, "COMPLETED", now=now
        )


def test_student_cannot_complete(db_session, student, tutor, now, make_booking):
    booking = make_booking(student, tutor, now - timedelta(hours=2))

    with pytest.raises(InvalidTransition, match="Only tutors"):
        booking_service.update_booking_status(
            db_session, booking.id, student.id, UserRole.STUDENT.value, "COMPLETED", now=now
        )


def test_admin_cancels_any_booking(db_session, student, tutor, admin, now):
    booking = _book(db_session, student, tutor, now, start_offset_h=3)

    updated = booking_service.update_booking_status(
        db_session, booking.id, admin.id, admin.role, "CANCELLED", now=now
    )

    assert updated.status == BookingStatus.CANCELLED


def test_stranger_forbidden(db_session, student, tutor, make_user, now):
    booking = _book(db_session, student, tutor, now, start_offset_h=3)
    stranger = make_user()

    with pytest.raises(Forbidden):
        booking_service.update_booking_status(
            db_session, booking.id, stranger.id, stranger.role, "CANCELLED", now=now
        )


def test_cancel_twice_rejected(db_session, student, tutor, now):
    booking = _book(db_session, student, tutor, now, start_offset_h=3)
    booking_service.update_booking_status(db_session, booking.id, student.id, student.role, "CANCELLED", now=now)

    with pytest.raises(InvalidTransition, match="Booking is already cancelled"):
        booking_service.update_booking_status(db_session, booking.id, student.id, student.role, "CANCELLED", now=now)


def test_cannot_cancel_completed(db_session, student, tutor, now, make_booking):
    booking = make_booking(student, tutor, now - timedelta(hours=3), status=BookingStatus.COMPLETED)

    with pytest.raises(InvalidTransition, match="Cannot cancel completed bookings"):
        booking_service.update_booking_status(db_session, booking.id, student.id, student.role, "CANCELLED", now=now)


def test_unknown_status_value(db_session, student, tutor, now):
    booking = _book(db_session, student, tutor, now, start_offset_h=3)

    with pytest.raises(InvalidStatus, match="Invalid booking status"):
        booking_service.update_booking_status(db_session, booking.id, student.id, student.role, "PENDING", now=now)


def test_status_change_on_missing_booking(db_session, student, now):
    with pytest.raises(NotFound):
        booking_service.update_booking_status(db_session, 404, student.id, student.role, "CANCELLED", now=now)


# ======================
# READS
# ======================

def test_get_user_bookings_by_role(db_session, make_user, make_tutor, admin, now):
    alice, bob = make_user(), make_user()
    first_tutor, second_tutor = make_tutor(), make_tutor()
    _book(db_session, alice, first_tutor, now, start_offset_h=1)
    _book(db_session, alice, second_tutor, now, start_offset_h=2)
    _book(db_session, bob, first_tutor, now, start_offset_h=3)

    alice_bookings, meta = booking_service.get_user_bookings(db_session, alice.id, alice.role)
    assert len(alice_bookings) == 2
    assert meta == {"total": 2, "page": 1, "limit": 10, "totalPages": 1}
    # Newest session first
    assert alice_bookings[0].start_time > alice_bookings[1].start_time

    tutor_bookings, _ = booking_service.get_user_bookings(db_session, first_tutor.user_id, UserRole.TUTOR.value)
    assert {b.student_id for b in tutor_bookings} == {alice.id, bob.id}

    all_bookings, meta = booking_service.get_user_bookings(db_session, admin.id, admin.role)
    assert meta["total"] == 3


def test_get_user_bookings_status_filter_and_paging(db_session, student, tutor, now):
    for hour in range(1, 6):
        _book(db_session, student, tutor, now, start_offset_h=hour)
    cancelled = _book(db_session, student, tutor, now, start_offset_h=8)
    booking_service.update_booking_status(db_session, cancelled.id, student.id, student.role, "CANCELLED", now=now)

    page, meta = booking_service.get_user_bookings(db_session, student.id, student.role, status="confirmed", page=2, limit=2)
    assert len(page) == 2
    assert meta == {"total": 5, "page": 2, "limit": 2, "totalPages": 3}

    with pytest.raises(InvalidStatus):
        booking_service.get_user_bookings(db_session, student.id, student.role, status="bogus")


def test_get_booking_by_id_visibility(db_session, student, tutor, admin, make_user, now):
    booking = _book(db_session, student, tutor, now, start_offset_h=1)

    assert booking_service.get_booking_by_id(db_session, booking.id, student.id, student.role).id == booking.id
    assert booking_service.get_booking_by_id(db_session, booking.id, tutor.user_id, UserRole.TUTOR.value).id == booking.id
    assert booking_service.get_booking_by_id(db_session, booking.id, admin.id, admin.role).id == booking.id

    stranger = make_user()
    with pytest.raises(Forbidden):
        booking_service.get_booking_by_id(db_session, booking.id, stranger.id, stranger.role)

    with pytest.raises(NotFound):
        booking_service.get_booking_by_id(db_session, 999, admin.id, admin.role)
