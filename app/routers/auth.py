"""
Authentication router for the research budget ledger API.

Mounts under ``/api/auth`` (prefix set in ``main.py``).

Endpoints:
    POST /login           — OAuth2 password form (username = email), returns a JWT.
    POST /refresh         — Fresh JWT for the holder of a still-valid one.
    GET  /me              — Profile of the caller.
    POST /change-password — Replace the caller's password.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.auth import PasswordChange, TokenResponse, UserResponse
from app.schemas.common import MessageResponse
from app.services import auth_service
from app.services.audit_service import RequestMeta, request_meta
from app.services.auth_service import get_current_user
from app.utils.security import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


def _issue_token(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token({"sub": user.id, "email": user.email, "role": user.role})
    )


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in",
    description=(
        "Send the account email as ``username`` in the OAuth2 password form. "
        "The token is valid for ``JWT_EXPIRATION_MINUTES``."
    ),
    responses={401: {"description": "Wrong credentials or inactive account."}},
)
def login(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: Annotated[Session, Depends(get_db)],
    meta: Annotated[RequestMeta, Depends(request_meta)],
) -> TokenResponse:
    user = auth_service.authenticate_user(db, form_data.username, form_data.password, meta)
    if user is None:
        logger.warning("Failed login for email='%s' from %s", form_data.username, meta.ip_address)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info("Login: user=%s role=%s", user.id, user.role)
    return _issue_token(user)


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Refresh token",
    responses={401: {"description": "Invalid or expired token."}},
)
def refresh_token(
    current_user: Annotated[User, Depends(get_current_user)],
) -> TokenResponse:
    return _issue_token(current_user)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Current user profile",
    responses={401: {"description": "Missing, invalid or expired token."}},
)
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.post(
    "/change-password",
    response_model=MessageResponse,
    summary="Change password",
    responses={
        400: {"description": "New password too short or equal to the current one."},
        401: {"description": "Current password is incorrect."},
    },
)
def change_password(
    payload: PasswordChange,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    meta: Annotated[RequestMeta, Depends(request_meta)],
) -> MessageResponse:
    """Existing tokens stay valid until they expire."""
    auth_service.change_password(db, current_user, payload, meta)
    return MessageResponse(message="Password changed")
