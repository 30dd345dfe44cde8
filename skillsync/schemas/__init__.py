# skillsync/schemas/__init__.py

from .common import UserSummary, envelope
from .auth import UserLogin, UserRegister, VerifyEmailRequest
from .user import (
    ProfileUpdate,
    StudentProfileResponse,
    UserResponse,
    UserStatusUpdate,
)
from .category import CategoryCreate, CategoryResponse, CategoryUpdate, CategoryWithCount
from .availability import AvailabilityReplace, AvailabilitySlotIn, AvailabilitySlotResponse
from .review import ReviewCreate, ReviewResponse, TutorRatingResponse
from .booking import BookingCreate, BookingResponse, BookingStatusUpdate
from .tutor import (
    MyTutorProfile,
    TutorDetail,
    TutorListItem,
    TutorProfileResponse,
    TutorProfileUpdate,
)

__all__ = [
    "UserSummary",
    "envelope",
    "UserLogin",
    "UserRegister",
    "VerifyEmailRequest",
    "ProfileUpdate",
    "StudentProfileResponse",
    "UserResponse",
    "UserStatusUpdate",
    "CategoryCreate",
    "CategoryResponse",
    "CategoryUpdate",
    "CategoryWithCount",
    "AvailabilityReplace",
    "AvailabilitySlotIn",
    "AvailabilitySlotResponse",
    "ReviewCreate",
    "ReviewResponse",
    "TutorRatingResponse",
    "BookingCreate",
    "BookingResponse",
    "BookingStatusUpdate",
    "MyTutorProfile",
    "TutorDetail",
    "TutorListItem",
    "TutorProfileResponse",
    "TutorProfileUpdate",
]
