from typing import Optional

from sqlalchemy.orm import Session

from skillsync.models.user import User, UserStatus


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def create_user(
    db: Session,
    *,
    name: str,
    email: str,
    password_hash: str,
    role: str,
    email_verified: bool = False,
    phone: Optional[str] = None,
    image: Optional[str] = None,
) -> User:
    db_user = User(
        name=name,
        email=email.strip().lower(),
        password_hash=password_hash,
        role=role,
        status=UserStatus.ACTIVE.value,
        email_verified=email_verified,
        phone=phone,
        image=image,
    )
    db.add(db_user)
    db.flush()
    return db_user


def update_user(db: Session, user: User, **fields) -> User:
    for key, value in fields.items():
        if value is not None:
            setattr(user, key, value)
    db.flush()
    return user
