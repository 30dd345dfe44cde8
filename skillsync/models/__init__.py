# skillsync/models/__init__.py
# Import models in dependency order
from .user import User, UserRole, UserStatus
from .category import Category
from .tutor import TutorProfile, tutor_categories
from .availability import AvailabilitySlot, DayOfWeek
from .booking import Booking, BookingStatus
from .review import Review

__all__ = [
    "User",
    "UserRole",
    "UserStatus",
    "Category",
    "TutorProfile",
    "tutor_categories",
    "AvailabilitySlot",
    "DayOfWeek",
    "Booking",
    "BookingStatus",
    "Review",
]
