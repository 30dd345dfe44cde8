# skillsync/services/booking_service.py
"""
Booking Service Layer
Business logic for booking creation, conflict detection and status changes
"""

import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from skillsync.crud import booking as booking_crud
from skillsync.crud import tutor as tutor_crud
from skillsync.exceptions import (
    Forbidden,
    InvalidInterval,
    InvalidStatus,
    NotFound,
    PastBooking,
    SelfBookingDenied,
    SlotConflict,
    ValidationError,
)
from skillsync.models.booking import Booking, BookingStatus
from skillsync.models.user import UserRole
from skillsync.services.booking_state import check_transition, resolve_actors
from skillsync.utils.clock import to_utc_naive, utcnow
from skillsync.utils.pagination import paginate

logger = logging.getLogger(__name__)


def parse_status(value: str) -> BookingStatus:
    try:
        return BookingStatus(str(value).strip().upper())
    except ValueError:
        raise InvalidStatus()


# ======================
# CREATE BOOKING
# ======================

def create_booking(
    db: Session,
    student_id: int,
    tutor_profile_id: int,
    start_time: datetime,
    end_time: datetime,
    price: float,
    now: Optional[datetime] = None
) -> Booking:
    """
    Book a tutor for [start_time, end_time).

    Checks run in a fixed order: tutor exists, not self-booking, well-formed
    interval, starts in the future, positive price, no overlapping
    CONFIRMED/COMPLETED booking of the same tutor.

    Raises:
        NotFound, SelfBookingDenied, InvalidInterval, PastBooking,
        ValidationError, SlotConflict
    """
    now = to_utc_naive(now) if now is not None else utcnow()
    start_time = to_utc_naive(start_time)
    end_time = to_utc_naive(end_time)

    try:
        # Row lock serializes the scan-then-insert per tutor on PostgreSQL
        tutor_profile = tutor_crud.lock_tutor_profile(db, tutor_profile_id)
        if not tutor_profile:
            raise NotFound("Tutor profile not found")

        if tutor_profile.user_id == student_id:
            raise SelfBookingDenied()

        if start_time >= end_time:
            raise InvalidInterval()

        if start_time <= now:
            raise PastBooking()

        if price is None or not math.isfinite(price) or price <= 0:
            raise ValidationError("Price must be a positive number")

        conflict = booking_crud.find_conflicting_booking(db, tutor_profile_id, start_time, end_time)
        if conflict:
            logger.warning(
                "Slot conflict (tutor_profile_id=%s, requested=%s..%s, existing_booking_id=%s)",
                tutor_profile_id,
                start_time.isoformat(),
                end_time.isoformat(),
                conflict.id,
            )
            raise SlotConflict()

        booking = booking_crud.create_booking(
            db,
            student_id=student_id,
            tutor_profile_id=tutor_profile_id,
            start_time=start_time,
            end_time=end_time,
            price=price,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Booking created (booking_id=%s, student_id=%s, tutor_profile_id=%s)",
        booking.id,
        student_id,
        tutor_profile_id,
    )
    return booking_crud.get_booking(db, booking.id)


# ======================
# STATUS CHANGES
# ======================

def update_booking_status(
    db: Session,
    booking_id: int,
    requester_id: int,
    requester_role: str,
    target_status: str,
    now: Optional[datetime] = None
) -> Booking:
    """
    Move a booking to ``target_status`` following the transition table.

    Raises:
        NotFound: booking does not exist
        InvalidStatus: target is not a booking status
        Forbidden: requester is neither the student, the tutor nor an admin
        InvalidTransition: the table refuses the move
    """
    now = to_utc_naive(now) if now is not None else utcnow()

    booking = booking_crud.get_booking(db, booking_id)
    if not booking:
        raise NotFound("Booking not found")

    target = parse_status(target_status)

    actors = resolve_actors(booking, requester_id, requester_role)
    if not actors:
        raise Forbidden("You don't have permission to update this booking")

    check_transition(booking, actors, target, now)

    previous = booking.status
    booking.status = target.value
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Booking status changed (booking_id=%s, %s -> %s, by user_id=%s)",
        booking.id,
        previous,
        target.value,
        requester_id,
    )
    db.refresh(booking)
    return booking


# ======================
# READS
# ======================

def get_booking_by_id(db: Session, booking_id: int, requester_id: int, requester_role: str) -> Booking:
    booking = booking_crud.get_booking(db, booking_id)
    if not booking:
        raise NotFound("Booking not found")

    if not resolve_actors(booking, requester_id, requester_role):
        raise Forbidden("You don't have permission to view this booking")

    return booking


def get_user_bookings(
    db: Session,
    user_id: int,
    role: str,
    status: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None
) -> Tuple[List[Booking], Dict[str, Any]]:
    """
    Bookings visible to the requester, newest session first.

    Students see their own bookings, tutors the bookings on their profile and
    admins every booking.
    """
    status_value = parse_status(status).value if status else None

    if role == UserRole.STUDENT:
        query = booking_crud.bookings_query(db, student_id=user_id, status=status_value)
    elif role == UserRole.TUTOR:
        tutor_profile = tutor_crud.get_or_create_tutor_profile(db, user_id)
        db.commit()
        query = booking_crud.bookings_query(db, tutor_profile_id=tutor_profile.id, status=status_value)
    elif role == UserRole.ADMIN:
        return list_all_bookings(db, status=status, page=page, limit=limit)
    else:
        raise Forbidden("Invalid role for booking access")

    return paginate(query.order_by(Booking.start_time.desc()), page, limit)


def list_all_bookings(
    db: Session,
    status: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None
) -> Tuple[List[Booking], Dict[str, Any]]:
    """Administrative listing across all tutors, newest booking first."""
    status_value = parse_status(status).value if status else None
    query = booking_crud.bookings_query(db, status=status_value)
    return paginate(query.order_by(Booking.created_at.desc(), Booking.id.desc()), page, limit)
