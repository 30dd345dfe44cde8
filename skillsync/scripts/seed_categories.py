"""
Upsert the default subject categories.

    python -m skillsync.scripts.seed_categories
"""

import logging
from typing import List, Tuple

from sqlalchemy.orm import Session

from skillsync.database import Base, SessionLocal, engine
from skillsync.models.category import Category

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: List[Tuple[str, str]] = [
    ("Mathematics", "mathematics"),
    ("Physics", "physics"),
    ("Chemistry", "chemistry"),
    ("Biology", "biology"),
    ("English", "english"),
    ("Computer Science", "computer-science"),
    ("History", "history"),
    ("Music", "music"),
]


def seed_categories(db: Session) -> int:
    """Insert missing categories by slug; returns how many were created."""
    created = 0
    try:
        for name, slug in DEFAULT_CATEGORIES:
            category = db.query(Category).filter(Category.slug == slug).first()
            if category:
                category.name = name
                continue
            db.add(Category(name=name, slug=slug))
            created += 1
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Categories seeded (created=%s, total=%s)", created, len(DEFAULT_CATEGORIES))
    return created


def main() -> int:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        created = seed_categories(db)
    finally:
        db.close()
    print(f"Seeded {created} new categories")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    raise SystemExit(main())
