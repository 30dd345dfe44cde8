# skillsync/api/tutor.py
"""
Tutor API Routers

Public directory (``/tutors``) and the tutor's own area (``/tutor``).
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from skillsync.database import get_db
from skillsync.models.user import User, UserRole
from skillsync.schemas.availability import (
    AvailabilityReplace,
    AvailabilitySlotIn,
    AvailabilitySlotResponse,
)
from skillsync.schemas.common import envelope
from skillsync.schemas.review import ReviewResponse
from skillsync.schemas.tutor import (
    MyTutorProfile,
    TutorDetail,
    TutorListItem,
    TutorProfileResponse,
    TutorProfileUpdate,
)
from skillsync.services import availability_service, tutor_service
from skillsync.utils.security import require_roles

router = APIRouter(prefix="/tutors", tags=["tutors"])
self_router = APIRouter(prefix="/tutor", tags=["tutor"])

require_tutor = require_roles(UserRole.TUTOR)


def _profile_fields(profile) -> Dict[str, Any]:
    return TutorProfileResponse.model_validate(profile).model_dump()


# ======================
# PUBLIC DIRECTORY
# ======================
@router.get("")
def list_tutors(
    category: Optional[str] = None,
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    min_rating: Optional[float] = Query(None, alias="minRating"),
    search: Optional[str] = None,
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db)
):
    """Active tutors, best rated first. ``category`` is a category slug."""
    rows, pagination = tutor_service.list_tutors(
        db,
        category=category,
        min_price=min_price,
        max_price=max_price,
        min_rating=min_rating,
        search=search,
        page=page,
        limit=limit,
    )
    data = [
        TutorListItem(**_profile_fields(row["profile"]), counts=row["counts"])
        for row in rows
    ]
    return envelope(data, message="Tutors retrieved successfully", pagination=pagination)


@router.get("/{tutor_profile_id}")
def get_tutor(tutor_profile_id: int, db: Session = Depends(get_db)):
    detail = tutor_service.get_tutor(db, tutor_profile_id)
    data = TutorDetail(
        **_profile_fields(detail["profile"]),
        counts=detail["counts"],
        availability=[AvailabilitySlotResponse.model_validate(s) for s in detail["availability"]],
        recent_reviews=[ReviewResponse.model_validate(r) for r in detail["recent_reviews"]],
        rating_distribution=detail["rating_distribution"],
    )
    return envelope(data, message="Tutor retrieved successfully")


# ======================
# TUTOR PROFILE
# ======================
@self_router.get("/profile/me")
def get_my_profile(current_user: User = Depends(require_tutor), db: Session = Depends(get_db)):
    result = tutor_service.get_my_tutor_profile(db, current_user.id)
    data = MyTutorProfile(
        **_profile_fields(result["profile"]),
        counts=result["counts"],
        availability=[AvailabilitySlotResponse.model_validate(s) for s in result["availability"]],
        stats=result["stats"],
    )
    return envelope(data, message="Tutor profile retrieved successfully")


@self_router.put("/profile")
def update_my_profile(
    payload: TutorProfileUpdate,
    current_user: User = Depends(require_tutor),
    db: Session = Depends(get_db)
):
    profile = tutor_service.update_tutor_profile(
        db,
        current_user.id,
        bio=payload.bio,
        hourly_rate=payload.hourly_rate,
        experience=payload.experience,
        category_ids=payload.category_ids,
    )
    return envelope(TutorProfileResponse.model_validate(profile), message="Tutor profile updated successfully")


# ======================
# AVAILABILITY
# ======================
@self_router.get("/availability")
def get_availability(current_user: User = Depends(require_tutor), db: Session = Depends(get_db)):
    slots = availability_service.get_availability(db, current_user.id)
    return envelope(
        [AvailabilitySlotResponse.model_validate(s) for s in slots],
        message="Availability retrieved successfully",
    )


@self_router.post("/availability", status_code=status.HTTP_201_CREATED)
def add_availability(
    payload: AvailabilitySlotIn,
    current_user: User = Depends(require_tutor),
    db: Session = Depends(get_db)
):
    slot = availability_service.add_availability(db, current_user.id, payload.model_dump())
    return envelope(AvailabilitySlotResponse.model_validate(slot), message="Availability slot added successfully")


@self_router.put("/availability")
def replace_availability(
    payload: AvailabilityReplace,
    current_user: User = Depends(require_tutor),
    db: Session = Depends(get_db)
):
    slots = availability_service.replace_availability(
        db, current_user.id, [slot.model_dump() for slot in payload.slots]
    )
    return envelope(
        [AvailabilitySlotResponse.model_validate(s) for s in slots],
        message="Availability updated successfully",
    )


@self_router.delete("/availability/{slot_id}")
def delete_availability(
    slot_id: int,
    current_user: User = Depends(require_tutor),
    db: Session = Depends(get_db)
):
    availability_service.delete_availability(db, current_user.id, slot_id)
    return envelope(None, message="Availability slot deleted successfully")
