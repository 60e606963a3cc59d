# juliecraft/schemas/auth.py

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

# ***************************************************************
# 1. Request schemas
# ***************************************************************

class RegisterRequest(BaseModel):
    """Sign-up payload. The full name is split into first/last on save."""
    email: EmailStr
    password: str
    name: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = Field(None, max_length=50)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetVerify(BaseModel):
    code: str
    email: EmailStr


class PasswordResetChange(BaseModel):
    code: str
    email: EmailStr
    new_password: str = Field(..., alias="newPassword")
    token_id: Optional[UUID] = Field(None, alias="tokenId")

    model_config = ConfigDict(populate_by_name=True)


# ***************************************************************
# 2. Response schemas
# ***************************************************************

class ProfileOut(BaseModel):
    """Public view of a profile (never includes the password hash)."""
    id: UUID
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    is_admin: bool = False
    role: str
    status: str
    is_verified: Optional[bool] = False
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    message: str
    user: ProfileOut
    token: str


class VerifyResponse(BaseModel):
    valid: bool = True
    user: ProfileOut


class MessageResponse(BaseModel):
    message: str
    success: bool = True
