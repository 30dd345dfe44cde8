from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skillsync.database import get_db
from skillsync.models.user import User, UserRole
from skillsync.schemas.booking import BookingResponse
from skillsync.schemas.common import envelope
from skillsync.schemas.user import ProfileUpdate, StudentProfileResponse, UserResponse
from skillsync.services import student_service
from skillsync.utils.security import require_roles

router = APIRouter(prefix="/students", tags=["students"])

require_student = require_roles(UserRole.STUDENT)


@router.get("/profile")
def get_profile(current_user: User = Depends(require_student), db: Session = Depends(get_db)):
    result = student_service.get_student_profile(db, current_user.id)
    data = StudentProfileResponse(
        **UserResponse.model_validate(result["user"]).model_dump(),
        stats=result["stats"],
    )
    return envelope(data, message="Student profile retrieved successfully")


@router.put("/profile")
def update_profile(
    payload: ProfileUpdate,
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db)
):
    user = student_service.update_student_profile(db, current_user.id, name=payload.name, phone=payload.phone)
    return envelope(UserResponse.model_validate(user), message="Profile updated successfully")


@router.get("/bookings")
def get_bookings(
    status_filter: Optional[str] = Query(None, alias="status"),
    upcoming: bool = False,
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db)
):
    bookings, pagination = student_service.get_student_bookings(
        db,
        current_user.id,
        status=status_filter,
        upcoming=upcoming,
        page=page,
        limit=limit,
    )
    return envelope(
        [BookingResponse.model_validate(b) for b in bookings],
        message="Bookings retrieved successfully",
        pagination=pagination,
    )
