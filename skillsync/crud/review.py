# skillsync/crud/review.py
"""
Review CRUD Operations
Core database operations for reviews and the tutor rating aggregate
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, List

from sqlalchemy import func
from sqlalchemy.orm import Session, Query, joinedload

from skillsync.models.review import Review
from skillsync.models.tutor import TutorProfile


# ======================
# REVIEW CRUD
# ======================

def create_review(
    db: Session,
    booking_id: int,
    student_id: int,
    tutor_profile_id: int,
    rating: int,
    comment: Optional[str] = None
) -> Review:
    """
    Create a new review for a completed booking.

    Args:
        db: Database session
        booking_id: Booking identifier
        student_id: Student user ID
        tutor_profile_id: Tutor profile reviewed
        rating: Rating value (1-5)
        comment: Optional text comment

    Returns:
        Created Review object
    """
    review = Review(
        booking_id=booking_id,
        student_id=student_id,
        tutor_profile_id=tutor_profile_id,
        rating=rating,
        comment=comment
    )

    db.add(review)
    db.flush()
    return review


def get_review_by_id(db: Session, review_id: int) -> Optional[Review]:
    return (
        db.query(Review)
        .options(joinedload(Review.student), joinedload(Review.booking))
        .filter(Review.id == review_id)
        .first()
    )


def get_review_by_booking(db: Session, booking_id: int) -> Optional[Review]:
    """
    Get review for a specific booking.

    Returns:
        Review object or None if no review exists for this booking
    """
    return db.query(Review).filter(Review.booking_id == booking_id).first()


def tutor_reviews_query(
    db: Session,
    tutor_profile_id: int,
    min_rating: Optional[int] = None
) -> Query:
    """Newest-first reviews for a tutor, optionally only ratings >= min_rating."""
    query = (
        db.query(Review)
        .options(joinedload(Review.student))
        .filter(Review.tutor_profile_id == tutor_profile_id)
    )
    if min_rating:
        query = query.filter(Review.rating >= min_rating)
    return query.order_by(Review.created_at.desc(), Review.id.desc())


def get_recent_reviews(db: Session, tutor_profile_id: int, limit: int = 5) -> List[Review]:
    return tutor_reviews_query(db, tutor_profile_id).limit(limit).all()


# ======================
# TUTOR RATING AGGREGATE
# ======================

def round_rating(value) -> float:
    """Round to one decimal, halves away from zero (4.25 -> 4.3)."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def aggregate_ratings(ratings: Iterable[int]) -> tuple[float, int]:
    """
    Pure aggregate over a set of ratings.

    Returns:
        Tuple of (rounded average, count); (0.0, 0) for no ratings
    """
    values = list(ratings)
    if not values:
        return (0.0, 0)
    return (round_rating(Decimal(sum(values)) / Decimal(len(values))), len(values))


def calculate_tutor_rating(db: Session, tutor_profile_id: int) -> tuple[float, int]:
    """
    Calculate average rating and total reviews for a tutor from the review table.

    Returns:
        Tuple of (average_rating, total_reviews)
    """
    rows = db.query(Review.rating).filter(Review.tutor_profile_id == tutor_profile_id).all()
    return aggregate_ratings(rating for (rating,) in rows)


def update_tutor_rating(db: Session, tutor_profile_id: int) -> TutorProfile:
    """
    Recalculate and store a tutor's rating aggregate.

    The profile row is locked first so concurrent reviews for the same tutor
    recompute one after another instead of overwriting each other.

    Returns:
        Updated TutorProfile object
    """
    profile = (
        db.query(TutorProfile)
        .filter(TutorProfile.id == tutor_profile_id)
        .with_for_update()
        .one()
    )
    avg_rating, total = calculate_tutor_rating(db, tutor_profile_id)

    profile.rating_avg = avg_rating
    profile.rating_count = total

    db.flush()
    return profile


def get_rating_distribution(db: Session, tutor_profile_id: int) -> dict:
    """
    Get distribution of ratings for a tutor.

    Returns:
        Dictionary with rating counts: {1: count, 2: count, ...}
    """
    distribution = {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}

    results = db.query(
        Review.rating,
        func.count(Review.id).label('count')
    ).filter(
        Review.tutor_profile_id == tutor_profile_id
    ).group_by(
        Review.rating
    ).all()

    for rating, count in results:
        distribution[rating] = count

    return distribution
