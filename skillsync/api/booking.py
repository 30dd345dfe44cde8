# skillsync/api/booking.py
"""
Booking API Router

Endpoints:
- POST /bookings - Book a tutor (students)
- GET /bookings - Bookings visible to the caller
- GET /bookings/{booking_id} - Booking detail for a participant or admin
- PATCH /bookings/{booking_id} - Complete or cancel a booking
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from skillsync.database import get_db
from skillsync.models.user import User, UserRole
from skillsync.schemas.booking import BookingCreate, BookingResponse, BookingStatusUpdate
from skillsync.schemas.common import envelope
from skillsync.services import booking_service
from skillsync.utils.security import get_current_user, require_roles

router = APIRouter(prefix="/bookings", tags=["bookings"])


# ======================
# CREATE BOOKING
# ======================
@router.post("", status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    current_user: User = Depends(require_roles(UserRole.STUDENT)),
    db: Session = Depends(get_db)
):
    """
    Book a tutor for a future time window.

    Fails with 409 when the window overlaps a confirmed or completed booking
    of the same tutor. Back-to-back sessions are allowed.
    """
    booking = booking_service.create_booking(
        db,
        student_id=current_user.id,
        tutor_profile_id=payload.tutor_profile_id,
        start_time=payload.start_time,
        end_time=payload.end_time,
        price=payload.price,
    )
    return envelope(BookingResponse.model_validate(booking), message="Booking created successfully")


# ======================
# LIST BOOKINGS
# ======================
@router.get("")
def list_bookings(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    bookings, pagination = booking_service.get_user_bookings(
        db,
        user_id=current_user.id,
        role=current_user.role,
        status=status_filter,
        page=page,
        limit=limit,
    )
    return envelope(
        [BookingResponse.model_validate(b) for b in bookings],
        message="Bookings retrieved successfully",
        pagination=pagination,
    )


# ======================
# BOOKING DETAIL
# ======================
@router.get("/{booking_id}")
def get_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    booking = booking_service.get_booking_by_id(db, booking_id, current_user.id, current_user.role)
    return envelope(BookingResponse.model_validate(booking), message="Booking retrieved successfully")


# ======================
# STATUS CHANGE
# ======================
@router.patch("/{booking_id}")
def update_booking_status(
    booking_id: int,
    payload: BookingStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Move a booking to COMPLETED (tutor or admin, after the session ended)
    or CANCELLED (student, tutor or admin).
    """
    booking = booking_service.update_booking_status(
        db,
        booking_id=booking_id,
        requester_id=current_user.id,
        requester_role=current_user.role,
        target_status=payload.status,
    )
    return envelope(BookingResponse.model_validate(booking), message="Booking status updated successfully")
