import logging
from datetime import datetime, timedelta, UTC
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from skillsync.config import settings
from skillsync.database import get_db
from skillsync.exceptions import AccountBanned, EmailNotVerified, Forbidden, Unauthenticated
from skillsync.models.user import User, UserRole, UserStatus

logger = logging.getLogger(__name__)


# ==========================
# AUTH CONFIG
# ==========================

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto"
)


# ==========================
# PASSWORD UTILS
# ==========================

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Bcrypt max input length = 72 bytes
    Truncate safely to avoid crash
    """
    password_bytes = password.encode("utf-8")

    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]
        password = password_bytes.decode("utf-8", errors="ignore")

    return pwd_context.hash(password)


# ==========================
# JWT TOKEN
# ==========================

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({"exp": expire})

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )


def create_user_token(user: User) -> str:
    return create_access_token(data={"sub": str(user.id), "role": user.role})


# ==========================
# AUTH HELPERS
# ==========================

def authenticate_user(db: Session, email: str, password: str):
    user = db.query(User).filter(
        User.email == email.strip().lower()
    ).first()

    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user


def ensure_user_allowed(user: User) -> User:
    """Account-state checks every authenticated request must pass."""
    if settings.REQUIRE_EMAIL_VERIFICATION and not user.email_verified:
        raise EmailNotVerified()

    if user.status == UserStatus.BANNED:
        raise AccountBanned()

    return user


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    if not token:
        raise Unauthenticated()

    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
        subject = payload.get("sub")
        user_id = int(subject) if subject is not None else None
    except (JWTError, ValueError):
        raise Unauthenticated("Could not validate credentials")

    if user_id is None:
        raise Unauthenticated("Could not validate credentials")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise Unauthenticated("User not found!")

    return ensure_user_allowed(user)


def require_roles(*roles: UserRole):
    """Dependency factory restricting a route to the given roles."""
    allowed = {role.value for role in roles}

    def _checker(current_user: User = Depends(get_current_user)) -> User:
        if allowed and current_user.role not in allowed:
            logger.info(
                "Role check failed (user_id=%s, role=%s, allowed=%s)",
                current_user.id,
                current_user.role,
                sorted(allowed),
            )
            raise Forbidden()
        return current_user

    return _checker
