from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from skillsync.database import get_db
from skillsync.models.user import User, UserRole
from skillsync.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate, CategoryWithCount
from skillsync.schemas.common import envelope
from skillsync.services import category_service
from skillsync.utils.security import require_roles

router = APIRouter(prefix="/categories", tags=["categories"])

require_admin = require_roles(UserRole.ADMIN)


def _with_count(row) -> CategoryWithCount:
    base = CategoryResponse.model_validate(row["category"]).model_dump()
    return CategoryWithCount(**base, tutor_count=row["tutor_count"])


@router.get("")
def list_categories(db: Session = Depends(get_db)):
    rows = category_service.list_categories(db)
    return envelope([_with_count(row) for row in rows], message="Categories retrieved successfully")


@router.get("/{category_id}")
def get_category(category_id: int, db: Session = Depends(get_db)):
    row = category_service.get_category(db, category_id)
    return envelope(_with_count(row), message="Category retrieved successfully")


# ===== ADMIN WRITES =====

@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    category = category_service.create_category(db, payload.name, payload.slug)
    return envelope(CategoryResponse.model_validate(category), message="Category created successfully")


@router.put("/{category_id}")
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    category = category_service.update_category(db, category_id, name=payload.name, slug=payload.slug)
    return envelope(CategoryResponse.model_validate(category), message="Category updated successfully")


@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    category_service.delete_category(db, category_id)
    return envelope(None, message="Category deleted successfully")
