# skillsync/api/review.py
"""
Review & Rating API Router

Endpoints:
- POST /reviews - Review a completed booking (students)
- GET /reviews/tutor/{tutor_profile_id} - Public reviews for a tutor
- GET /reviews/tutor/{tutor_profile_id}/rating - Rating summary for a tutor
- GET /reviews/eligibility/{booking_id} - Can the caller review this booking
- GET /reviews/{review_id} - Single review
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from skillsync.database import get_db
from skillsync.models.user import User, UserRole
from skillsync.schemas.common import envelope
from skillsync.schemas.review import ReviewCreate, ReviewResponse, TutorRatingResponse
from skillsync.services import review_service
from skillsync.utils.security import require_roles

router = APIRouter(prefix="/reviews", tags=["reviews"])


# ======================
# SUBMIT REVIEW
# ======================
@router.post("", status_code=status.HTTP_201_CREATED)
def submit_review(
    review: ReviewCreate,
    current_user: User = Depends(require_roles(UserRole.STUDENT)),
    db: Session = Depends(get_db)
):
    """
    Submit a review for a completed booking.

    Requirements:
    - Booking must be completed
    - User must be the booking's student
    - Only one review per booking
    - Rating must be 1-5, comment max 1000 characters
    """
    created = review_service.create_review(
        db=db,
        booking_id=review.booking_id,
        student_id=current_user.id,
        rating=review.rating,
        comment=review.comment
    )
    return envelope(ReviewResponse.model_validate(created), message="Review created successfully")


# ======================
# GET TUTOR REVIEWS
# ======================
@router.get("/tutor/{tutor_profile_id}")
def get_tutor_reviews(
    tutor_profile_id: int,
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    min_rating: Optional[int] = Query(None, alias="minRating"),
    db: Session = Depends(get_db)
):
    """Public endpoint, newest reviews first."""
    reviews, pagination = review_service.get_tutor_reviews(
        db,
        tutor_profile_id,
        page=page,
        limit=limit,
        min_rating=min_rating,
    )
    return envelope(
        [ReviewResponse.model_validate(r) for r in reviews],
        message="Reviews retrieved successfully",
        pagination=pagination,
    )


@router.get("/tutor/{tutor_profile_id}/rating")
def get_tutor_rating(tutor_profile_id: int, db: Session = Depends(get_db)):
    summary = review_service.get_tutor_rating_summary(db, tutor_profile_id)
    return envelope(TutorRatingResponse(**summary), message="Rating retrieved successfully")


# ======================
# CHECK REVIEW ELIGIBILITY
# ======================
@router.get("/eligibility/{booking_id}")
def check_review_eligibility(
    booking_id: int,
    current_user: User = Depends(require_roles(UserRole.STUDENT)),
    db: Session = Depends(get_db)
):
    can_review, reason = review_service.check_review_eligibility(db, booking_id, current_user.id)
    return envelope({"booking_id": booking_id, "can_review": can_review, "reason": reason})


# ======================
# GET REVIEW
# ======================
@router.get("/{review_id}")
def get_review(review_id: int, db: Session = Depends(get_db)):
    review = review_service.get_review_by_id(db, review_id)
    return envelope(ReviewResponse.model_validate(review), message="Review retrieved successfully")
