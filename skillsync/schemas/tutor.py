from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .availability import AvailabilitySlotResponse
from .category import CategoryResponse
from .common import UserSummary
from .review import ReviewResponse


class TutorProfileUpdate(BaseModel):
    bio: Optional[str] = None
    hourly_rate: Optional[float] = Field(None, allow_inf_nan=False)
    experience: Optional[int] = None
    category_ids: Optional[List[int]] = None


class TutorCounts(BaseModel):
    bookings: int = 0
    reviews: int = 0


class TutorProfileResponse(BaseModel):
    id: int
    user_id: int
    bio: Optional[str] = None
    hourly_rate: float
    experience: int
    rating_avg: float
    rating_count: int
    user: Optional[UserSummary] = None
    categories: List[CategoryResponse] = []

    model_config = ConfigDict(from_attributes=True)


class TutorListItem(TutorProfileResponse):
    counts: TutorCounts = Field(default_factory=TutorCounts)


class TutorDetail(TutorListItem):
    availability: List[AvailabilitySlotResponse] = []
    recent_reviews: List[ReviewResponse] = []
    rating_distribution: Dict[int, int] = {}


class TutorStats(BaseModel):
    upcoming_sessions: int
    completed_sessions: int
    total_earnings: float


class MyTutorProfile(TutorListItem):
    availability: List[AvailabilitySlotResponse] = []
    stats: TutorStats
