# skillsync/crud/booking.py
"""
Booking CRUD Operations
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, Query, joinedload

from skillsync.models.booking import Booking, BookingStatus, BLOCKING_STATUSES
from skillsync.models.tutor import TutorProfile


def intervals_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """Half-open [start, end) overlap; touching endpoints do not overlap."""
    return start_a < end_b and start_b < end_a


def find_conflicting_booking(
    db: Session,
    tutor_profile_id: int,
    start_time: datetime,
    end_time: datetime
) -> Optional[Booking]:
    """
    First CONFIRMED/COMPLETED booking of the tutor whose window overlaps
    [start_time, end_time), or None.
    """
    return (
        db.query(Booking)
        .filter(
            Booking.tutor_profile_id == tutor_profile_id,
            Booking.status.in_(BLOCKING_STATUSES),
            Booking.start_time < end_time,
            Booking.end_time > start_time,
        )
        .order_by(Booking.start_time)
        .first()
    )


def create_booking(
    db: Session,
    student_id: int,
    tutor_profile_id: int,
    start_time: datetime,
    end_time: datetime,
    price: float
) -> Booking:
    booking = Booking(
        student_id=student_id,
        tutor_profile_id=tutor_profile_id,
        start_time=start_time,
        end_time=end_time,
        price=price,
        status=BookingStatus.CONFIRMED.value,
    )
    db.add(booking)
    db.flush()
    return booking


def get_booking(db: Session, booking_id: int) -> Optional[Booking]:
    return (
        db.query(Booking)
        .options(
            joinedload(Booking.student),
            joinedload(Booking.tutor_profile).joinedload(TutorProfile.user),
            joinedload(Booking.review),
        )
        .filter(Booking.id == booking_id)
        .first()
    )


def bookings_query(
    db: Session,
    *,
    student_id: Optional[int] = None,
    tutor_profile_id: Optional[int] = None,
    status: Optional[str] = None,
    starts_after: Optional[datetime] = None
) -> Query:
    query = db.query(Booking).options(
        joinedload(Booking.student),
        joinedload(Booking.tutor_profile).joinedload(TutorProfile.user),
        joinedload(Booking.review),
    )
    if student_id is not None:
        query = query.filter(Booking.student_id == student_id)
    if tutor_profile_id is not None:
        query = query.filter(Booking.tutor_profile_id == tutor_profile_id)
    if status:
        query = query.filter(Booking.status == status)
    if starts_after is not None:
        query = query.filter(Booking.start_time > starts_after)
    return query


def count_bookings(db: Session, **filters) -> int:
    query = db.query(func.count(Booking.id))
    for column, value in _filter_pairs(filters):
        query = query.filter(column == value)
    if filters.get("starts_after") is not None:
        query = query.filter(Booking.start_time > filters["starts_after"])
    return int(query.scalar() or 0)


def sum_completed_price(db: Session, tutor_profile_id: Optional[int] = None) -> float:
    query = db.query(func.coalesce(func.sum(Booking.price), 0.0)).filter(
        Booking.status == BookingStatus.COMPLETED.value
    )
    if tutor_profile_id is not None:
        query = query.filter(Booking.tutor_profile_id == tutor_profile_id)
    return float(query.scalar() or 0.0)


def _filter_pairs(filters: dict):
    columns = {
        "student_id": Booking.student_id,
        "tutor_profile_id": Booking.tutor_profile_id,
        "status": Booking.status,
    }
    for key, column in columns.items():
        value = filters.get(key)
        if value is not None:
            yield column, value
