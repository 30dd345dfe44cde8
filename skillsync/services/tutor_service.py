# skillsync/services/tutor_service.py
"""
Tutor directory and tutor self-service profile logic
"""

import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload, selectinload

from skillsync.crud import booking as booking_crud
from skillsync.crud import category as category_crud
from skillsync.crud import review as review_crud
from skillsync.crud import tutor as tutor_crud
from skillsync.crud import availability as availability_crud
from skillsync.exceptions import NotFound, ValidationError
from skillsync.models.booking import Booking, BookingStatus
from skillsync.models.category import Category
from skillsync.models.review import Review
from skillsync.models.tutor import TutorProfile
from skillsync.models.user import User, UserRole, UserStatus
from skillsync.utils.clock import utcnow
from skillsync.utils.pagination import paginate

logger = logging.getLogger(__name__)


# ======================
# USER CREATION HOOK
# ======================

def on_user_created(db: Session, user: User) -> Optional[TutorProfile]:
    """Tutor accounts always own a profile; other roles need nothing."""
    if user.role != UserRole.TUTOR:
        return None
    profile = tutor_crud.get_or_create_tutor_profile(db, user.id)
    logger.info("Tutor profile ensured (user_id=%s, tutor_profile_id=%s)", user.id, profile.id)
    return profile


def get_own_profile(db: Session, user_id: int) -> TutorProfile:
    """Lazily create the caller's profile on first tutor access."""
    profile = tutor_crud.get_tutor_profile_by_user(db, user_id)
    if profile is None:
        profile = tutor_crud.get_or_create_tutor_profile(db, user_id)
        db.commit()
        logger.info("Tutor profile created lazily (user_id=%s)", user_id)
    return profile


# ======================
# PUBLIC DIRECTORY
# ======================

def _counts_for(db: Session, tutor_profile_ids: Sequence[int]) -> Dict[int, Dict[str, int]]:
    counts = {tid: {"bookings": 0, "reviews": 0} for tid in tutor_profile_ids}
    if not tutor_profile_ids:
        return counts

    for tid, total in (
        db.query(Booking.tutor_profile_id, func.count(Booking.id))
        .filter(Booking.tutor_profile_id.in_(tutor_profile_ids))
        .group_by(Booking.tutor_profile_id)
        .all()
    ):
        counts[tid]["bookings"] = int(total)

    for tid, total in (
        db.query(Review.tutor_profile_id, func.count(Review.id))
        .filter(Review.tutor_profile_id.in_(tutor_profile_ids))
        .group_by(Review.tutor_profile_id)
        .all()
    ):
        counts[tid]["reviews"] = int(total)

    return counts


def list_tutors(
    db: Session,
    category: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    min_rating: Optional[float] = None,
    search: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None
) -> Tuple[List[Dict[str, Any]], Dict[str, int]]:
    """
    Public tutor listing, best rated first.

    Only ACTIVE users with the TUTOR role are listed. ``category`` matches a
    category slug; ``search`` matches tutor name, category name or slug,
    case-insensitively.
    """
    if min_price is not None and max_price is not None and min_price > max_price:
        raise ValidationError("minPrice cannot be greater than maxPrice")

    query = (
        db.query(TutorProfile)
        .join(User, TutorProfile.user_id == User.id)
        .options(joinedload(TutorProfile.user), selectinload(TutorProfile.categories))
        .filter(User.status == UserStatus.ACTIVE.value, User.role == UserRole.TUTOR.value)
    )

    if category:
        query = query.filter(TutorProfile.categories.any(Category.slug == category))

    if min_rating is not None:
        query = query.filter(TutorProfile.rating_avg >= min_rating)

    if min_price is not None:
        query = query.filter(TutorProfile.hourly_rate >= min_price)

    if max_price is not None:
        query = query.filter(TutorProfile.hourly_rate <= max_price)

    if search:
        pattern = f"%{search.strip().lower()}%"
        query = query.filter(
            or_(
                func.lower(User.name).like(pattern),
                TutorProfile.categories.any(func.lower(Category.name).like(pattern)),
                TutorProfile.categories.any(func.lower(Category.slug).like(pattern)),
            )
        )

    query = query.order_by(TutorProfile.rating_avg.desc(), TutorProfile.id.asc())
    tutors, pagination = paginate(query, page, limit)

    counts = _counts_for(db, [t.id for t in tutors])
    return [{"profile": t, "counts": counts[t.id]} for t in tutors], pagination


def get_tutor(db: Session, tutor_profile_id: int) -> Dict[str, Any]:
    """Public tutor detail: active availability, five newest reviews, counts."""
    profile = tutor_crud.get_tutor_profile(db, tutor_profile_id)
    if not profile:
        raise NotFound("Tutor not found")

    if profile.user.status != UserStatus.ACTIVE:
        raise NotFound("Tutor profile is not active")

    return {
        "profile": profile,
        "availability": availability_crud.list_slots(db, profile.id, active_only=True),
        "recent_reviews": review_crud.get_recent_reviews(db, profile.id, limit=5),
        "rating_distribution": review_crud.get_rating_distribution(db, profile.id),
        "counts": _counts_for(db, [profile.id])[profile.id],
    }


# ======================
# TUTOR SELF-SERVICE
# ======================

def update_tutor_profile(
    db: Session,
    user_id: int,
    bio: Optional[str] = None,
    hourly_rate: Optional[float] = None,
    experience: Optional[int] = None,
    category_ids: Optional[List[int]] = None
) -> TutorProfile:
    """
    Edit the caller's tutor profile.

    A non-empty ``category_ids`` replaces the current category assignments;
    every id must exist.
    """
    if hourly_rate is not None and (not math.isfinite(hourly_rate) or hourly_rate < 0):
        raise ValidationError("Hourly rate must be a positive number")

    if experience is not None and experience < 0:
        raise ValidationError("Experience must be a positive number")

    profile = get_own_profile(db, user_id)

    categories = None
    if category_ids:
        unique_ids = list(dict.fromkeys(category_ids))
        categories = category_crud.get_categories_by_ids(db, unique_ids)
        if len(categories) != len(unique_ids):
            raise NotFound("One or more categories not found")

    try:
        if bio is not None:
            profile.bio = bio
        if hourly_rate is not None:
            profile.hourly_rate = hourly_rate
        if experience is not None:
            profile.experience = experience
        if categories is not None:
            profile.categories = categories
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Tutor profile updated (tutor_profile_id=%s)", profile.id)
    db.refresh(profile)
    return profile


def get_my_tutor_profile(db: Session, user_id: int, now=None) -> Dict[str, Any]:
    """Caller's profile with dashboard statistics."""
    profile = get_own_profile(db, user_id)
    now = now or utcnow()

    stats = {
        "upcoming_sessions": booking_crud.count_bookings(
            db,
            tutor_profile_id=profile.id,
            status=BookingStatus.CONFIRMED.value,
            starts_after=now,
        ),
        "completed_sessions": booking_crud.count_bookings(
            db,
            tutor_profile_id=profile.id,
            status=BookingStatus.COMPLETED.value,
        ),
        "total_earnings": booking_crud.sum_completed_price(db, profile.id),
    }

    return {
        "profile": profile,
        "availability": availability_crud.list_slots(db, profile.id),
        "counts": _counts_for(db, [profile.id])[profile.id],
        "stats": stats,
    }
