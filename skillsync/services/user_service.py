# skillsync/services/user_service.py
"""
Account registration, login and self-service profile edits
"""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from sqlalchemy.orm import Session

from skillsync.config import settings
from skillsync.crud import user as user_crud
from skillsync.exceptions import Conflict, NotFound, Unauthenticated, ValidationError
from skillsync.models.user import User, UserRole
from skillsync.services.tutor_service import on_user_created
from skillsync.utils.security import (
    authenticate_user,
    create_access_token,
    create_user_token,
    ensure_user_allowed,
    get_password_hash,
)

logger = logging.getLogger(__name__)

SELF_REGISTER_ROLES = {UserRole.STUDENT.value, UserRole.TUTOR.value}
VERIFY_EMAIL_PURPOSE = "verify_email"
VERIFY_EMAIL_EXPIRE = timedelta(hours=24)


def create_verification_token(user: User) -> str:
    return create_access_token(
        data={"sub": str(user.id), "purpose": VERIFY_EMAIL_PURPOSE},
        expires_delta=VERIFY_EMAIL_EXPIRE,
    )


def register_user(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: str = UserRole.STUDENT.value,
    phone: Optional[str] = None
) -> Dict[str, Any]:
    """
    Create a STUDENT or TUTOR account.

    Tutor accounts get their profile in the same transaction. Admin accounts
    are only created by the bootstrap script.

    Returns:
        {"user": User, "verification_token": str or None}
    """
    role = str(role).strip().upper()
    if role not in SELF_REGISTER_ROLES:
        raise ValidationError("Role must be STUDENT or TUTOR")

    if user_crud.get_user_by_email(db, email):
        raise Conflict("Email already registered")

    try:
        user = user_crud.create_user(
            db,
            name=name.strip(),
            email=email,
            password_hash=get_password_hash(password),
            role=role,
            email_verified=not settings.REQUIRE_EMAIL_VERIFICATION,
            phone=phone,
        )
        on_user_created(db, user)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(user)
    logger.info("User registered (user_id=%s, role=%s)", user.id, user.role)

    token = None if user.email_verified else create_verification_token(user)
    return {"user": user, "verification_token": token}


def verify_email(db: Session, token: str) -> User:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        if payload.get("purpose") != VERIFY_EMAIL_PURPOSE:
            raise ValueError("wrong token purpose")
        user_id = int(payload.get("sub"))
    except (JWTError, ValueError, TypeError):
        raise ValidationError("Invalid or expired verification token")

    user = user_crud.get_user(db, user_id)
    if not user:
        raise NotFound("User not found")

    if not user.email_verified:
        user.email_verified = True
        db.commit()
        db.refresh(user)
        logger.info("Email verified (user_id=%s)", user.id)

    return user


def login(db: Session, email: str, password: str) -> Dict[str, Any]:
    user = authenticate_user(db, email, password)
    if not user:
        raise Unauthenticated("Invalid email or password")

    ensure_user_allowed(user)

    logger.info("User logged in (user_id=%s)", user.id)
    return {
        "access_token": create_user_token(user),
        "token_type": "bearer",
        "user": user,
    }


def get_me(db: Session, user_id: int) -> User:
    user = user_crud.get_user(db, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def update_profile(
    db: Session,
    user_id: int,
    name: Optional[str] = None,
    phone: Optional[str] = None,
    required_role: Optional[str] = None
) -> User:
    """
    Change the caller's name and/or phone.

    ``required_role`` lets role-scoped areas (the student area) refuse
    other accounts.
    """
    user = user_crud.get_user(db, user_id)
    if not user:
        raise NotFound("User not found")

    if required_role and user.role != required_role:
        raise ValidationError(f"User is not a {required_role.lower()}")

    name = name.strip() if name else None
    phone = phone.strip() if phone else None
    if not name and not phone:
        raise ValidationError("At least one field (name or phone) is required")

    try:
        user_crud.update_user(db, user, name=name, phone=phone)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(user)
    logger.info("Profile updated (user_id=%s)", user.id)
    return user
