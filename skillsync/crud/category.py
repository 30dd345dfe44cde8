from typing import List, Optional, Sequence

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from skillsync.models.category import Category
from skillsync.models.tutor import tutor_categories


def get_category(db: Session, category_id: int) -> Optional[Category]:
    return db.query(Category).filter(Category.id == category_id).first()


def get_categories_by_ids(db: Session, category_ids: Sequence[int]) -> List[Category]:
    if not category_ids:
        return []
    return db.query(Category).filter(Category.id.in_(list(category_ids))).all()


def find_name_or_slug_clash(
    db: Session,
    name: Optional[str] = None,
    slug: Optional[str] = None,
    exclude_id: Optional[int] = None
) -> Optional[Category]:
    clauses = []
    if name:
        clauses.append(Category.name == name)
    if slug:
        clauses.append(Category.slug == slug)
    if not clauses:
        return None

    query = db.query(Category).filter(or_(*clauses))
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    return query.first()


def tutor_count(db: Session, category_id: int) -> int:
    return int(
        db.query(func.count(tutor_categories.c.tutor_profile_id))
        .filter(tutor_categories.c.category_id == category_id)
        .scalar()
        or 0
    )


def list_categories_with_counts(db: Session) -> List[tuple]:
    """(Category, tutor_count) pairs ordered by name."""
    count_column = func.count(tutor_categories.c.tutor_profile_id).label("tutor_count")
    return (
        db.query(Category, count_column)
        .outerjoin(tutor_categories, tutor_categories.c.category_id == Category.id)
        .group_by(Category.id)
        .order_by(Category.name.asc())
        .all()
    )
