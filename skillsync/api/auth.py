from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from skillsync.database import get_db
from skillsync.models.user import User
from skillsync.schemas.auth import UserLogin, UserRegister, VerifyEmailRequest
from skillsync.schemas.common import envelope
from skillsync.schemas.user import ProfileUpdate, UserResponse
from skillsync.services import user_service
from skillsync.utils.security import get_current_user

router = APIRouter(prefix="/auth", tags=["Authentication"])


# ===== REGISTER ENDPOINT =====

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, db: Session = Depends(get_db)):
    """Register a STUDENT or TUTOR account (tutors get an empty profile)"""
    result = user_service.register_user(
        db,
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        role=user_data.role,
        phone=user_data.phone,
    )

    data = {"user": UserResponse.model_validate(result["user"])}
    if result["verification_token"]:
        data["verification_token"] = result["verification_token"]

    return envelope(data, message="User registered successfully")


@router.post("/verify-email")
def verify_email(payload: VerifyEmailRequest, db: Session = Depends(get_db)):
    user = user_service.verify_email(db, payload.token)
    return envelope(UserResponse.model_validate(user), message="Email verified successfully")


# ===== LOGIN ENDPOINT =====

@router.post("/login")
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Verify credentials and return an access token"""
    result = user_service.login(db, credentials.email, credentials.password)
    return envelope(
        {
            "access_token": result["access_token"],
            "token_type": result["token_type"],
            "role": result["user"].role,
            "user": UserResponse.model_validate(result["user"]),
        },
        message="Login successful",
    )


# ===== CURRENT USER =====

@router.get("/me")
def me(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    user = user_service.get_me(db, current_user.id)
    return envelope(UserResponse.model_validate(user), message="User retrieved successfully")


@router.put("/profile")
def update_profile(
    payload: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user = user_service.update_profile(db, current_user.id, name=payload.name, phone=payload.phone)
    return envelope(UserResponse.model_validate(user), message="Profile updated successfully")
