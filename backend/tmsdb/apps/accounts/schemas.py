# backend/tmsdb/apps/accounts/schemas.py

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, model_validator

from ...schemas import WireModel

MIN_PASSWORD_LENGTH = 6


# ---------------------------------------------------------------------------
# REQUESTS
# ---------------------------------------------------------------------------


class LoginRequest(WireModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(WireModel):
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=100)
    confirm_password: str
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    date_of_birth: Optional[datetime] = None

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("The password and confirmation password do not match.")
        return self


class ChangePasswordRequest(WireModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=100)
    confirm_new_password: str

    @model_validator(mode="after")
    def _passwords_match(self) -> "ChangePasswordRequest":
        if self.new_password != self.confirm_new_password:
            raise ValueError("The new password and confirmation password do not match.")
        return self


# ---------------------------------------------------------------------------
# RESPONSES
# ---------------------------------------------------------------------------


class UserRead(WireModel):
    id: int
    email: str
    first_name: str
    last_name: str
    full_name: str
    date_of_birth: Optional[datetime] = None
    profile_picture_url: Optional[str] = None
    roles: List[str] = []


class AuthResponse(WireModel):
    success: bool
    message: str
    token: Optional[str] = None
    expires_at: Optional[datetime] = None
    user: Optional[UserRead] = None
