from typing import Optional

from pydantic import BaseModel, EmailStr, Field


# ======================
# USER AUTHENTICATION SCHEMAS
# ======================

class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserRegister(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    # Bcrypt limit is 72 bytes
    password: str = Field(..., min_length=6, max_length=72)
    # ADMIN is reserved for the bootstrap script
    role: str = "STUDENT"
    phone: Optional[str] = Field(None, max_length=20)


class VerifyEmailRequest(BaseModel):
    token: str
