"""
Pydantic v2 schemas for the authentication endpoints.

Login itself uses the OAuth2 password form, where ``username`` carries the
account email, so it has no request model here.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.utils.constants import MIN_PASSWORD_LENGTH


class TokenResponse(BaseModel):
    """Bearer token issued by ``/login`` and ``/refresh``."""

    access_token: str = Field(..., description="Signed JWT; send as ``Authorization: Bearer <token>``.")
    token_type: str = Field(default="bearer")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "token_type": "bearer",
            }
        }
    )


class PasswordChange(BaseModel):
    """Payload for ``POST /api/auth/change-password``."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=128)

    @model_validator(mode="after")
    def _check_differs(self) -> "PasswordChange":
        if self.new_password == self.current_password:
            raise ValueError("new_password must differ from current_password")
        return self


class UserResponse(BaseModel):
    """Profile returned by ``GET /api/auth/me``; never includes the password hash."""

    id: str
    email: str
    first_name: str
    last_name: str | None
    full_name: str
    role: str
    is_active: bool
    last_login_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
