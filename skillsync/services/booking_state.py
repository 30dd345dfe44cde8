# skillsync/services/booking_state.py
"""
Booking status state machine.

CONFIRMED is the entry state; COMPLETED and CANCELLED are terminal. The
allowed moves live in ``TRANSITIONS`` as data, so callers (and tests) can
enumerate every (state, target, actor) combination.
"""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, FrozenSet, Optional, Tuple

from skillsync.exceptions import InvalidTransition
from skillsync.models.booking import Booking, BookingStatus
from skillsync.models.user import UserRole


class BookingActor(str, enum.Enum):
    """How a requester relates to one particular booking."""
    STUDENT = "STUDENT"  # the booking's student
    TUTOR = "TUTOR"      # owner of the booked tutor profile
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class TransitionRule:
    allowed_actors: FrozenSet[BookingActor]
    actor_message: str
    guard: Optional[Callable[[Booking, datetime], bool]] = None
    guard_message: str = ""


def _session_has_ended(booking: Booking, now: datetime) -> bool:
    return now >= booking.end_time


TRANSITIONS: Dict[Tuple[BookingStatus, BookingStatus], TransitionRule] = {
    (BookingStatus.CONFIRMED, BookingStatus.COMPLETED): TransitionRule(
        allowed_actors=frozenset({BookingActor.TUTOR, BookingActor.ADMIN}),
        actor_message="Only tutors can mark bookings as completed",
        guard=_session_has_ended,
        guard_message="Cannot mark future bookings as completed",
    ),
    (BookingStatus.CONFIRMED, BookingStatus.CANCELLED): TransitionRule(
        allowed_actors=frozenset({BookingActor.STUDENT, BookingActor.TUTOR, BookingActor.ADMIN}),
        actor_message="You don't have permission to cancel this booking",
    ),
}

# Messages for moves with no rule
REJECTIONS: Dict[Tuple[BookingStatus, BookingStatus], str] = {
    (BookingStatus.CONFIRMED, BookingStatus.CONFIRMED): "Booking is already confirmed",
    (BookingStatus.COMPLETED, BookingStatus.CANCELLED): "Cannot cancel completed bookings",
    (BookingStatus.COMPLETED, BookingStatus.COMPLETED): "Booking is already completed",
    (BookingStatus.COMPLETED, BookingStatus.CONFIRMED): "Cannot reopen a completed booking",
    (BookingStatus.CANCELLED, BookingStatus.CANCELLED): "Booking is already cancelled",
    (BookingStatus.CANCELLED, BookingStatus.COMPLETED): "Only confirmed bookings can be marked as completed",
    (BookingStatus.CANCELLED, BookingStatus.CONFIRMED): "Cannot reopen a cancelled booking",
}

TERMINAL_STATES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})


def resolve_actors(booking: Booking, user_id: int, role: str) -> FrozenSet[BookingActor]:
    """Every capacity in which ``user_id`` may act on ``booking`` (empty if none)."""
    actors = set()
    if booking.student_id == user_id:
        actors.add(BookingActor.STUDENT)
    if booking.tutor_profile is not None and booking.tutor_profile.user_id == user_id:
        actors.add(BookingActor.TUTOR)
    if role == UserRole.ADMIN:
        actors.add(BookingActor.ADMIN)
    return frozenset(actors)


def check_transition(
    booking: Booking,
    actors: FrozenSet[BookingActor],
    target: BookingStatus,
    now: datetime
) -> TransitionRule:
    """
    Validate a status change against the transition table.

    Raises:
        InvalidTransition: with the reason the move is refused
    """
    current = BookingStatus(booking.status)
    rule = TRANSITIONS.get((current, target))
    if rule is None:
        raise InvalidTransition(REJECTIONS.get((current, target)))

    if not actors & rule.allowed_actors:
        raise InvalidTransition(rule.actor_message)

    if rule.guard is not None and not rule.guard(booking, now):
        raise InvalidTransition(rule.guard_message)

    return rule
