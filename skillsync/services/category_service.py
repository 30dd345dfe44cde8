# skillsync/services/category_service.py
import logging
import re
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from skillsync.crud import category as category_crud
from skillsync.exceptions import Conflict, NotFound, ValidationError
from skillsync.models.category import Category

logger = logging.getLogger(__name__)

SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def _validate_slug(slug: str) -> str:
    if not SLUG_RE.match(slug or ""):
        raise ValidationError(
            "Slug must be lowercase letters and digits separated by single hyphens"
        )
    return slug


def _raise_on_clash(db: Session, name: Optional[str], slug: Optional[str], exclude_id: Optional[int] = None) -> None:
    clash = category_crud.find_name_or_slug_clash(db, name=name, slug=slug, exclude_id=exclude_id)
    if not clash:
        return
    if name and clash.name == name:
        raise Conflict("Category with this name already exists")
    raise Conflict("Category with this slug already exists")


def list_categories(db: Session) -> List[Dict[str, Any]]:
    return [
        {"category": category, "tutor_count": int(count)}
        for category, count in category_crud.list_categories_with_counts(db)
    ]


def get_category(db: Session, category_id: int) -> Dict[str, Any]:
    category = category_crud.get_category(db, category_id)
    if not category:
        raise NotFound("Category not found")
    return {"category": category, "tutor_count": category_crud.tutor_count(db, category_id)}


def create_category(db: Session, name: str, slug: str) -> Category:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name is required")
    slug = _validate_slug((slug or "").strip())

    _raise_on_clash(db, name, slug)

    category = Category(name=name, slug=slug)
    try:
        db.add(category)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(category)
    logger.info("Category created (category_id=%s, slug=%s)", category.id, category.slug)
    return category


def update_category(
    db: Session,
    category_id: int,
    name: Optional[str] = None,
    slug: Optional[str] = None
) -> Category:
    category = category_crud.get_category(db, category_id)
    if not category:
        raise NotFound("Category not found")

    name = name.strip() if name else None
    slug = _validate_slug(slug.strip()) if slug else None

    _raise_on_clash(db, name, slug, exclude_id=category_id)

    try:
        if name:
            category.name = name
        if slug:
            category.slug = slug
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(category)
    logger.info("Category updated (category_id=%s)", category.id)
    return category


def delete_category(db: Session, category_id: int) -> None:
    category = category_crud.get_category(db, category_id)
    if not category:
        raise NotFound("Category not found")

    if category_crud.tutor_count(db, category_id) > 0:
        raise Conflict("Cannot delete category with active tutors. Please reassign tutors first.")

    try:
        db.delete(category)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Category deleted (category_id=%s)", category_id)
