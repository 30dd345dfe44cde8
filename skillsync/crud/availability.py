from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from skillsync.models.availability import AvailabilitySlot, DAY_ORDER


def _sorted(slots: Iterable[AvailabilitySlot]) -> List[AvailabilitySlot]:
    return sorted(slots, key=lambda s: (DAY_ORDER.get(s.day_of_week, 7), s.start_time, s.id or 0))


def list_slots(db: Session, tutor_profile_id: int, active_only: bool = False) -> List[AvailabilitySlot]:
    """Slots in week order (MON..SUN), then by start time."""
    query = db.query(AvailabilitySlot).filter(AvailabilitySlot.tutor_profile_id == tutor_profile_id)
    if active_only:
        query = query.filter(AvailabilitySlot.is_active.is_(True))
    return _sorted(query.all())


def get_slot(db: Session, tutor_profile_id: int, slot_id: int) -> Optional[AvailabilitySlot]:
    return db.query(AvailabilitySlot).filter(
        AvailabilitySlot.id == slot_id,
        AvailabilitySlot.tutor_profile_id == tutor_profile_id,
    ).first()


def add_slot(
    db: Session,
    tutor_profile_id: int,
    day_of_week: str,
    start_time: str,
    end_time: str,
    is_active: bool = True
) -> AvailabilitySlot:
    slot = AvailabilitySlot(
        tutor_profile_id=tutor_profile_id,
        day_of_week=day_of_week,
        start_time=start_time,
        end_time=end_time,
        is_active=is_active,
    )
    db.add(slot)
    db.flush()
    return slot


def delete_slots_for_tutor(db: Session, tutor_profile_id: int) -> int:
    deleted = db.query(AvailabilitySlot).filter(
        AvailabilitySlot.tutor_profile_id == tutor_profile_id
    ).delete(synchronize_session=False)
    db.flush()
    return int(deleted)
