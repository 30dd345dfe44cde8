# skillsync/exceptions.py
"""
Domain exceptions for the SkillSync platform.

Services raise these; the API layer renders them as
``{"success": false, "message": ..., "code": ...}`` with the mapped HTTP status.
"""

from typing import Any, Dict, Optional

from fastapi import status


class DomainError(Exception):
    """Base exception for all business-rule failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Request could not be processed"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.default_message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


# ======================
# ERROR KINDS
# ======================

class ValidationError(DomainError):
    """Malformed or rule-violating input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthenticated(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "You are not authorized!"


class Forbidden(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden! You don't have permission to access these resources!"


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class Conflict(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource conflict"


# ======================
# ACCESS GATE
# ======================

class EmailNotVerified(Forbidden):
    default_message = "Email verification required. Please verify your email!"


class AccountBanned(Forbidden):
    default_message = "Your account has been banned. Please contact support!"


# ======================
# BOOKINGS
# ======================

class SelfBookingDenied(Forbidden):
    default_message = "You cannot book a session with yourself"


class InvalidInterval(ValidationError):
    default_message = "End time must be after start time"


class PastBooking(ValidationError):
    default_message = "Cannot book sessions in the past"


class SlotConflict(Conflict):
    default_message = "This time slot is already booked. Please choose a different time."


class InvalidStatus(ValidationError):
    default_message = "Invalid booking status"


class InvalidTransition(ValidationError):
    default_message = "Booking status change is not allowed"


# ======================
# REVIEWS
# ======================

class InvalidRating(ValidationError):
    default_message = "Rating must be between 1 and 5"


class NotEligible(ValidationError):
    default_message = "You can only review completed bookings"


class AlreadyReviewed(Conflict):
    default_message = "You have already reviewed this booking"
