"""
Password hashing and access tokens.

Hashes are bcrypt with a configurable cost (``BCRYPT_ROUNDS``).  Tokens are
HS256 JWTs from python-jose carrying ``sub`` (user id), ``email``, ``role``
and a ``typ`` marker so that only access tokens pass :func:`verify_token`.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from app.config import get_settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=get_settings().BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a bcrypt hash")
        return False


def create_access_token(claims: dict[str, Any], expires_in: timedelta | None = None) -> str:
    """Sign *claims* into an access token.

    ``exp`` defaults to ``JWT_EXPIRATION_MINUTES`` from now.
    """
    settings = get_settings()
    issued = datetime.now(timezone.utc)
    lifetime = expires_in or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    to_encode = {**claims, "typ": ACCESS_TOKEN_TYPE, "iat": issued, "exp": issued + lifetime}
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> dict[str, Any]:
    """Return the claims of a valid access token.

    Raises:
        ValueError: Bad signature, expired, or not an access token.
    """
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        logger.debug("Rejected token: %s", exc)
        raise ValueError("Invalid or expired token") from exc

    if claims.get("typ") != ACCESS_TOKEN_TYPE:
        raise ValueError("Not an access token")
    return claims
