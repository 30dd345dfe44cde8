# skillsync/services/review_service.py
"""
Review Service Layer
Business logic for review submission and the tutor rating aggregate
"""

import logging
from typing import Optional, Dict, Any, List, Tuple

from sqlalchemy.orm import Session

from skillsync.crud import booking as booking_crud
from skillsync.crud import review as review_crud
from skillsync.crud import tutor as tutor_crud
from skillsync.exceptions import (
    AlreadyReviewed,
    Forbidden,
    InvalidRating,
    NotEligible,
    NotFound,
    ValidationError,
)
from skillsync.models.booking import BookingStatus
from skillsync.models.review import Review
from skillsync.models.tutor import TutorProfile
from skillsync.utils.pagination import paginate

logger = logging.getLogger(__name__)

MAX_COMMENT_LENGTH = 1000


# ======================
# REVIEW SUBMISSION
# ======================

def _validate_rating(rating: Any) -> int:
    # bool is an int subclass; True must not pass as a 1-star rating
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidRating()
    if not (1 <= rating <= 5):
        raise InvalidRating()
    return rating


def check_review_eligibility(db: Session, booking_id: int, student_id: int) -> Tuple[bool, str]:
    """
    Check if a student can review a booking.

    Returns:
        Tuple of (can_review: bool, reason: str)
    """
    try:
        _load_reviewable_booking(db, booking_id, student_id)
    except (NotFound, Forbidden, NotEligible, AlreadyReviewed) as exc:
        return (False, exc.message)
    return (True, "Can review")


def _load_reviewable_booking(db: Session, booking_id: int, student_id: int):
    booking = booking_crud.get_booking(db, booking_id)
    if not booking:
        raise NotFound("Booking not found")

    if booking.student_id != student_id:
        raise Forbidden("You can only review your own bookings")

    if booking.status != BookingStatus.COMPLETED:
        raise NotEligible()

    if review_crud.get_review_by_booking(db, booking_id):
        raise AlreadyReviewed()

    return booking


def create_review(
    db: Session,
    booking_id: int,
    student_id: int,
    rating: int,
    comment: Optional[str] = None
) -> Review:
    """
    Submit a review for a completed booking and refresh the tutor aggregate.

    Args:
        db: Database session
        booking_id: Booking identifier
        student_id: Student submitting the review
        rating: Rating value (1-5)
        comment: Optional text comment

    Returns:
        The created Review

    Raises:
        InvalidRating, NotFound, Forbidden, NotEligible, AlreadyReviewed
    """
    rating = _validate_rating(rating)

    if comment is not None:
        comment = comment.strip() or None
    if comment and len(comment) > MAX_COMMENT_LENGTH:
        raise ValidationError(f"Comment must be {MAX_COMMENT_LENGTH} characters or less")

    booking = _load_reviewable_booking(db, booking_id, student_id)

    try:
        review = review_crud.create_review(
            db=db,
            booking_id=booking.id,
            student_id=student_id,
            tutor_profile_id=booking.tutor_profile_id,
            rating=rating,
            comment=comment
        )

        # Full recomputation from the review set, same transaction
        profile = review_crud.update_tutor_rating(db, booking.tutor_profile_id)

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Review created (review_id=%s, booking_id=%s, tutor_profile_id=%s, rating_avg=%s, rating_count=%s)",
        review.id,
        booking.id,
        booking.tutor_profile_id,
        profile.rating_avg,
        profile.rating_count,
    )
    return review_crud.get_review_by_id(db, review.id)


# ======================
# REVIEW RETRIEVAL
# ======================

def get_tutor_reviews(
    db: Session,
    tutor_profile_id: int,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    min_rating: Optional[int] = None
) -> Tuple[List[Review], Dict[str, Any]]:
    """Public, newest-first reviews for a tutor."""
    if not tutor_crud.get_tutor_profile(db, tutor_profile_id):
        raise NotFound("Tutor profile not found")

    if min_rating is not None and not (1 <= min_rating <= 5):
        raise InvalidRating("minRating must be between 1 and 5")

    query = review_crud.tutor_reviews_query(db, tutor_profile_id, min_rating)
    return paginate(query, page, limit)


def get_review_by_id(db: Session, review_id: int) -> Review:
    review = review_crud.get_review_by_id(db, review_id)
    if not review:
        raise NotFound("Review not found")
    return review


def get_tutor_rating_summary(db: Session, tutor_profile_id: int) -> Dict[str, Any]:
    """
    Stored aggregate plus the live rating distribution for a tutor.

    Returns:
        Dictionary with rating statistics
    """
    profile = tutor_crud.get_tutor_profile(db, tutor_profile_id)
    if not profile:
        raise NotFound("Tutor profile not found")

    distribution = review_crud.get_rating_distribution(db, tutor_profile_id)

    return {
        "tutor_profile_id": tutor_profile_id,
        "rating_avg": profile.rating_avg,
        "rating_count": profile.rating_count,
        "rating_distribution": distribution,
    }


# ======================
# ADMIN OPERATIONS
# ======================

def recalculate_all_ratings(db: Session) -> Dict[str, Any]:
    """
    Recompute every tutor's rating aggregate (admin maintenance).

    Tutors without reviews are reset to (0.0, 0).
    """
    tutor_ids = [row[0] for row in db.query(TutorProfile.id).order_by(TutorProfile.id).all()]

    try:
        for tutor_profile_id in tutor_ids:
            review_crud.update_tutor_rating(db, tutor_profile_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Rating recalculation complete (tutors=%s)", len(tutor_ids))
    return {
        "total_tutors": len(tutor_ids),
        "updated_count": len(tutor_ids),
        "message": "Rating recalculation complete"
    }
