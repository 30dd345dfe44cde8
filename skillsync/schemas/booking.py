# skillsync/schemas/booking.py
"""
Booking Pydantic Schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import UTCDateTime, UserSummary
from .review import ReviewBrief


class BookingCreate(BaseModel):
    """Naive datetimes are read as UTC."""
    tutor_profile_id: int
    start_time: datetime
    end_time: datetime
    price: float = Field(..., allow_inf_nan=False, description="Session price, must be positive")


class BookingStatusUpdate(BaseModel):
    status: str = Field(..., description="CONFIRMED, COMPLETED or CANCELLED")


class BookingTutorSummary(BaseModel):
    id: int
    hourly_rate: float
    rating_avg: float
    user: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)


class BookingResponse(BaseModel):
    id: int
    student_id: int
    tutor_profile_id: int
    start_time: UTCDateTime
    end_time: UTCDateTime
    price: float
    status: str
    created_at: Optional[UTCDateTime] = None
    updated_at: Optional[UTCDateTime] = None
    student: Optional[UserSummary] = None
    tutor_profile: Optional[BookingTutorSummary] = None
    review: Optional[ReviewBrief] = None

    model_config = ConfigDict(from_attributes=True)
