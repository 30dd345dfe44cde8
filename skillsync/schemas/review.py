# skillsync/schemas/review.py
"""
Review & Rating Pydantic Schemas
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import UTCDateTime, UserSummary


# ======================
# REVIEW SCHEMAS
# ======================

class ReviewCreate(BaseModel):
    """Schema for creating a review; range and length are enforced by the service"""
    booking_id: int = Field(..., description="Completed booking being reviewed")
    rating: int = Field(..., strict=True, description="Rating from 1 to 5 stars")
    comment: Optional[str] = Field(None, description="Review comment (max 1000 chars)")


class ReviewResponse(BaseModel):
    id: int
    booking_id: int
    student_id: int
    tutor_profile_id: int
    rating: int
    comment: Optional[str] = None
    created_at: Optional[UTCDateTime] = None
    student: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)


class ReviewBrief(BaseModel):
    id: int
    rating: int
    comment: Optional[str] = None
    created_at: Optional[UTCDateTime] = None

    model_config = ConfigDict(from_attributes=True)


class TutorRatingResponse(BaseModel):
    tutor_profile_id: int
    rating_avg: float = Field(..., description="Average rating, one decimal")
    rating_count: int
    rating_distribution: Dict[int, int]
