"""
Create the first ADMIN account from environment variables.

    ENABLE_ADMIN_BOOTSTRAP=true ADMIN_BOOTSTRAP_CONFIRM=CREATE-FIRST-ADMIN \
    ADMIN_NAME=... ADMIN_EMAIL=... ADMIN_PASSWORD=... \
    python -m skillsync.scripts.bootstrap_admin
"""

import logging
import os
import re
import sys
from typing import Optional

from skillsync.crud import user as user_crud
from skillsync.database import Base, SessionLocal, engine
from skillsync.models.user import User, UserRole
from skillsync.utils.security import get_password_hash

logger = logging.getLogger(__name__)

CONFIRM_PHRASE = "CREATE-FIRST-ADMIN"
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "y", "on"}


def _required_env(key: str) -> str:
    value = os.getenv(key, "").strip()
    if not value:
        raise ValueError(f"Missing required environment variable: {key}")
    return value


def _validate_password(password: str) -> None:
    if len(password) < 8:
        raise ValueError("ADMIN_PASSWORD must be at least 8 characters.")
    if len(password.encode("utf-8")) > 72:
        raise ValueError("ADMIN_PASSWORD must be <= 72 bytes (bcrypt limit).")
    if not re.search(r"[A-Z]", password):
        raise ValueError("ADMIN_PASSWORD must contain at least one uppercase letter.")
    if not re.search(r"[a-z]", password):
        raise ValueError("ADMIN_PASSWORD must contain at least one lowercase letter.")
    if not re.search(r"\d", password):
        raise ValueError("ADMIN_PASSWORD must contain at least one digit.")


def create_first_admin(db, name: str, email: str, password: str) -> User:
    """Insert the admin; refuses when any admin or the email already exists."""
    email = email.strip().lower()
    if not EMAIL_RE.match(email):
        raise ValueError("ADMIN_EMAIL is not a valid email format.")
    _validate_password(password)

    if db.query(User).filter(User.role == UserRole.ADMIN.value).count() > 0:
        raise ValueError(
            "Admin bootstrap blocked: an admin already exists. "
            "This command is one-time for first admin creation."
        )

    if user_crud.get_user_by_email(db, email):
        raise ValueError("ADMIN_EMAIL is already registered.")

    try:
        user = user_crud.create_user(
            db,
            name=name,
            email=email,
            password_hash=get_password_hash(password),
            role=UserRole.ADMIN.value,
            email_verified=True,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Admin created (user_id=%s)", user.id)
    return user


def bootstrap_admin() -> int:
    try:
        if not _is_truthy(os.getenv("ENABLE_ADMIN_BOOTSTRAP")):
            raise ValueError(
                "Bootstrap disabled. Set ENABLE_ADMIN_BOOTSTRAP=true to run."
            )
        confirm = _required_env("ADMIN_BOOTSTRAP_CONFIRM")
        if confirm != CONFIRM_PHRASE:
            raise ValueError(
                f"Invalid ADMIN_BOOTSTRAP_CONFIRM. Expected exact phrase: {CONFIRM_PHRASE}"
            )

        name = _required_env("ADMIN_NAME")
        email = _required_env("ADMIN_EMAIL")
        password = _required_env("ADMIN_PASSWORD")

        Base.metadata.create_all(bind=engine)
        db = SessionLocal()
        try:
            create_first_admin(db, name, email, password)
        finally:
            db.close()

        print(f"Admin created successfully: {email.lower()}")
        return 0
    except Exception as exc:
        print(f"Admin bootstrap failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    raise SystemExit(bootstrap_admin())
