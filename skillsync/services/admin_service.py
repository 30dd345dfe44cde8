# skillsync/services/admin_service.py
"""
Admin Service Layer
User moderation and platform statistics
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from skillsync.crud import booking as booking_crud
from skillsync.crud import user as user_crud
from skillsync.exceptions import Forbidden, NotFound, ValidationError
from skillsync.models.booking import BookingStatus
from skillsync.models.user import User, UserRole, UserStatus
from skillsync.utils.pagination import paginate

logger = logging.getLogger(__name__)


def _parse_enum(enum_cls, value: str, label: str) -> str:
    try:
        return enum_cls(str(value).strip().upper()).value
    except ValueError:
        raise ValidationError(f"Invalid {label}: {value}")


def list_users(
    db: Session,
    role: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None
) -> Tuple[List[User], Dict[str, Any]]:
    query = db.query(User).options(joinedload(User.tutor_profile))

    if role:
        query = query.filter(User.role == _parse_enum(UserRole, role, "role"))

    if status:
        query = query.filter(User.status == _parse_enum(UserStatus, status, "status"))

    if search:
        pattern = f"%{search.strip().lower()}%"
        query = query.filter(
            or_(func.lower(User.name).like(pattern), func.lower(User.email).like(pattern))
        )

    return paginate(query.order_by(User.created_at.desc(), User.id.desc()), page, limit)


def update_user_status(db: Session, user_id: int, status: str, admin_id: Optional[int] = None) -> User:
    """Ban or re-activate a non-admin account."""
    status_value = _parse_enum(UserStatus, status, "status")

    user = user_crud.get_user(db, user_id)
    if not user:
        raise NotFound("User not found")

    if user.role == UserRole.ADMIN:
        raise Forbidden("Cannot modify admin user status")

    previous = user.status
    try:
        user.status = status_value
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(user)
    logger.info(
        "User status changed (user_id=%s, %s -> %s, by admin_id=%s)",
        user.id,
        previous,
        status_value,
        admin_id,
    )
    return user


def get_stats(db: Session) -> Dict[str, Any]:
    role_counts = dict(
        db.query(User.role, func.count(User.id)).group_by(User.role).all()
    )
    total_bookings = booking_crud.count_bookings(db)
    completed_bookings = booking_crud.count_bookings(db, status=BookingStatus.COMPLETED.value)

    recent_users = (
        db.query(User)
        .order_by(User.created_at.desc(), User.id.desc())
        .limit(5)
        .all()
    )

    return {
        "users": {
            "total": sum(role_counts.values()),
            "students": int(role_counts.get(UserRole.STUDENT.value, 0)),
            "tutors": int(role_counts.get(UserRole.TUTOR.value, 0)),
            "admins": int(role_counts.get(UserRole.ADMIN.value, 0)),
        },
        "bookings": {
            "total": total_bookings,
            "completed": completed_bookings,
            "pending": total_bookings - completed_bookings,
        },
        "revenue": {
            "total": booking_crud.sum_completed_price(db),
        },
        "recent_users": recent_users,
    }
