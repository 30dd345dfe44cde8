from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import UTCDateTime


class TutorProfileBrief(BaseModel):
    id: int
    hourly_rate: float
    rating_avg: float
    rating_count: int

    model_config = ConfigDict(from_attributes=True)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    status: str
    email_verified: bool
    phone: Optional[str] = None
    image: Optional[str] = None
    created_at: Optional[UTCDateTime] = None
    tutor_profile: Optional[TutorProfileBrief] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)


class UserStatusUpdate(BaseModel):
    status: str


# ======================
# STUDENT AREA
# ======================

class StudentStats(BaseModel):
    total_bookings: int
    upcoming_bookings: int
    completed_bookings: int
    cancelled_bookings: int


class StudentProfileResponse(UserResponse):
    stats: StudentStats
