# skillsync/services/availability_service.py
"""
Tutor weekly availability.

Slots only describe when a tutor is usually free; booking conflict checks
never read them.
"""

import logging
import re
from typing import Any, Iterable, List, Mapping

from sqlalchemy.orm import Session

from skillsync.crud import availability as availability_crud
from skillsync.exceptions import NotFound, ValidationError
from skillsync.models.availability import AvailabilitySlot, DayOfWeek
from skillsync.services.tutor_service import get_own_profile

logger = logging.getLogger(__name__)

TIME_OF_DAY_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_slot(slot: Mapping[str, Any]) -> dict:
    """Normalize one slot payload, raising ValidationError on bad input."""
    day = str(slot.get("day_of_week", "")).strip().upper()
    if day not in DayOfWeek.__members__:
        raise ValidationError(f"Invalid day of week: {slot.get('day_of_week')}")

    start_time = str(slot.get("start_time", "")).strip()
    end_time = str(slot.get("end_time", "")).strip()
    for value in (start_time, end_time):
        if not TIME_OF_DAY_RE.match(value):
            raise ValidationError(f"Invalid time of day: {value!r} (expected HH:MM)")

    # Zero-padded HH:MM compares correctly as text
    if start_time >= end_time:
        raise ValidationError("Availability end time must be after start time")

    is_active = slot.get("is_active")
    return {
        "day_of_week": day,
        "start_time": start_time,
        "end_time": end_time,
        "is_active": True if is_active is None else bool(is_active),
    }


def get_availability(db: Session, user_id: int) -> List[AvailabilitySlot]:
    profile = get_own_profile(db, user_id)
    return availability_crud.list_slots(db, profile.id)


def add_availability(db: Session, user_id: int, slot: Mapping[str, Any]) -> AvailabilitySlot:
    data = validate_slot(slot)
    profile = get_own_profile(db, user_id)

    try:
        created = availability_crud.add_slot(db, profile.id, **data)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(created)
    logger.info("Availability slot added (tutor_profile_id=%s, slot_id=%s)", profile.id, created.id)
    return created


def delete_availability(db: Session, user_id: int, slot_id: int) -> AvailabilitySlot:
    profile = get_own_profile(db, user_id)

    slot = availability_crud.get_slot(db, profile.id, slot_id)
    if not slot:
        raise NotFound("Availability slot not found")

    try:
        db.delete(slot)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Availability slot deleted (tutor_profile_id=%s, slot_id=%s)", profile.id, slot_id)
    return slot


def replace_availability(db: Session, user_id: int, slots: Iterable[Mapping[str, Any]]) -> List[AvailabilitySlot]:
    """
    Replace all of the caller's slots with ``slots``.

    Every slot is validated before anything is written, and the delete plus
    inserts commit together, so a failure leaves the old set in place.
    """
    validated = [validate_slot(slot) for slot in slots]
    profile = get_own_profile(db, user_id)

    try:
        removed = availability_crud.delete_slots_for_tutor(db, profile.id)
        for data in validated:
            availability_crud.add_slot(db, profile.id, **data)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Availability replaced (tutor_profile_id=%s, removed=%s, added=%s)",
        profile.id,
        removed,
        len(validated),
    )
    return availability_crud.list_slots(db, profile.id)
