# skillsync/api/admin.py
"""
Admin Module
Admin-only endpoints for user moderation, booking oversight, platform
statistics and rating maintenance.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from skillsync.database import get_db
from skillsync.models.user import User, UserRole
from skillsync.schemas.booking import BookingResponse
from skillsync.schemas.common import UserSummary, envelope
from skillsync.schemas.user import UserResponse, UserStatusUpdate
from skillsync.services import admin_service, booking_service, review_service
from skillsync.utils.security import require_roles

router = APIRouter(prefix="/admin", tags=["Admin"])

require_admin = require_roles(UserRole.ADMIN)


# ─────────────────────────────────────────
# GET /admin/users: User list with filters
# ─────────────────────────────────────────
@router.get("/users")
def list_users(
    role: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = None,
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    users, pagination = admin_service.list_users(
        db,
        role=role,
        status=status_filter,
        search=search,
        page=page,
        limit=limit,
    )
    return envelope(
        [UserResponse.model_validate(u) for u in users],
        message="Users retrieved successfully",
        pagination=pagination,
    )


# ─────────────────────────────────────────
# PATCH /admin/users/{id}: Ban / unban
# ─────────────────────────────────────────
@router.patch("/users/{user_id}")
def update_user_status(
    user_id: int,
    payload: UserStatusUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    user = admin_service.update_user_status(db, user_id, payload.status, admin_id=admin.id)
    return envelope(UserResponse.model_validate(user), message="User status updated successfully")


# ─────────────────────────────────────────
# GET /admin/bookings: All bookings
# ─────────────────────────────────────────
@router.get("/bookings")
def list_bookings(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    bookings, pagination = booking_service.list_all_bookings(
        db, status=status_filter, page=page, limit=limit
    )
    return envelope(
        [BookingResponse.model_validate(b) for b in bookings],
        message="Bookings retrieved successfully",
        pagination=pagination,
    )


# ─────────────────────────────────────────
# GET /admin/stats: Dashboard overview
# ─────────────────────────────────────────
@router.get("/stats")
def get_dashboard_stats(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    stats = admin_service.get_stats(db)
    stats["recent_users"] = [
        {**UserSummary.model_validate(u).model_dump(), "role": u.role, "created_at": u.created_at}
        for u in stats["recent_users"]
    ]
    return envelope(stats, message="Statistics retrieved successfully")


# ─────────────────────────────────────────
# POST /admin/ratings/recalculate: Maintenance
# ─────────────────────────────────────────
@router.post("/ratings/recalculate")
def recalculate_ratings(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    result = review_service.recalculate_all_ratings(db)
    return envelope(result, message=result["message"])
