# skillsync/services/student_service.py
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from skillsync.crud import booking as booking_crud
from skillsync.crud import user as user_crud
from skillsync.exceptions import NotFound, ValidationError
from skillsync.models.booking import Booking, BookingStatus
from skillsync.models.user import User, UserRole
from skillsync.services.booking_service import parse_status
from skillsync.services.user_service import update_profile
from skillsync.utils.clock import to_utc_naive, utcnow
from skillsync.utils.pagination import paginate

logger = logging.getLogger(__name__)


def _get_student(db: Session, user_id: int) -> User:
    user = user_crud.get_user(db, user_id)
    if not user:
        raise NotFound("Student profile not found")
    if user.role != UserRole.STUDENT:
        raise ValidationError("User is not a student")
    return user


def get_student_profile(db: Session, user_id: int, now: Optional[datetime] = None) -> Dict[str, Any]:
    user = _get_student(db, user_id)
    now = to_utc_naive(now) if now is not None else utcnow()

    stats = {
        "total_bookings": booking_crud.count_bookings(db, student_id=user.id),
        "upcoming_bookings": booking_crud.count_bookings(
            db,
            student_id=user.id,
            status=BookingStatus.CONFIRMED.value,
            starts_after=now,
        ),
        "completed_bookings": booking_crud.count_bookings(
            db, student_id=user.id, status=BookingStatus.COMPLETED.value
        ),
        "cancelled_bookings": booking_crud.count_bookings(
            db, student_id=user.id, status=BookingStatus.CANCELLED.value
        ),
    }
    return {"user": user, "stats": stats}


def update_student_profile(db: Session, user_id: int, name: Optional[str] = None, phone: Optional[str] = None) -> User:
    return update_profile(db, user_id, name=name, phone=phone, required_role=UserRole.STUDENT.value)


def get_student_bookings(
    db: Session,
    user_id: int,
    status: Optional[str] = None,
    upcoming: bool = False,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    now: Optional[datetime] = None
) -> Tuple[List[Booking], Dict[str, Any]]:
    """
    The student's bookings, newest session first.

    ``upcoming`` narrows to CONFIRMED sessions that have not started yet and
    takes precedence over ``status``.
    """
    status_value = parse_status(status).value if status else None
    starts_after = None

    if upcoming:
        status_value = BookingStatus.CONFIRMED.value
        starts_after = to_utc_naive(now) if now is not None else utcnow()

    query = booking_crud.bookings_query(
        db,
        student_id=user_id,
        status=status_value,
        starts_after=starts_after,
    )
    return paginate(query.order_by(Booking.start_time.desc()), page, limit)
