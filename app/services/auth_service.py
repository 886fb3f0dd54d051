"""
Authentication and authorization logic for the research budget ledger.

Provides:
- ``authenticate_user`` — credential check; a successful login stamps
  ``last_login_at`` and leaves a ``LOGIN`` audit entry.
- ``change_password`` — re-verifies the current password before rehashing.
- ``get_current_user`` — FastAPI dependency that extracts and validates
  the Bearer JWT from the ``Authorization`` header.
- ``authorize`` — the single permission gate; evaluates the role table and,
  for ``Grant.MEMBER``, project membership.
- ``require_permission`` — dependency factory for endpoints whose permission
  does not depend on a particular project.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.project import Project, ProjectStaff
from app.models.user import User
from app.schemas.auth import PasswordChange
from app.services import audit_service
from app.services.audit_service import RequestMeta
from app.utils.constants import AUDIT_CHANGE_PASSWORD, AUDIT_LOGIN
from app.utils.permissions import Grant, get_grant
from app.utils.security import hash_password, verify_password, verify_token

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


# ---------------------------------------------------------------------------
# Credentials
# ---------------------------------------------------------------------------


def authenticate_user(
    db: Session, email: str, password: str, meta: RequestMeta | None = None
) -> User | None:
    """Check an email/password pair and record the login.

    Returns ``None`` rather than raising so the router owns the 401.  The
    ``last_login_at`` stamp and the audit entry are best-effort: a failure
    to write them does not block the login.
    """
    user: User | None = (
        db.query(User)
        .filter(User.email == email.strip().lower(), User.is_active.is_(True))
        .first()
    )
    if user is None or not verify_password(password, user.password_hash):
        logger.debug("authenticate_user: rejected credentials for '%s'", email)
        return None

    try:
        user.last_login_at = datetime.now(timezone.utc)
        audit_service.record(db, user.id, AUDIT_LOGIN, "User", user.id, meta=meta)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Could not record login for user=%s", user.id)

    return user


def change_password(
    db: Session, user: User, data: PasswordChange, meta: RequestMeta | None = None
) -> None:
    """Replace the caller's password after re-checking the current one.

    Raises:
        HTTPException 401: If ``current_password`` is wrong.
    """
    if not verify_password(data.current_password, user.password_hash):
        logger.info("change_password: wrong current password for user=%s", user.id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Current password is incorrect",
        )

    user.password_hash = hash_password(data.new_password)
    audit_service.record(db, user.id, AUDIT_CHANGE_PASSWORD, "User", user.id, meta=meta)
    db.commit()
    logger.info("change_password: updated for user=%s", user.id)


# ---------------------------------------------------------------------------
# FastAPI dependency: current authenticated user
# ---------------------------------------------------------------------------


def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """FastAPI dependency that resolves the caller's identity from a JWT.

    Raises:
        HTTPException 401: If the token is missing, invalid, or expired,
                           or if the referenced user no longer exists or
                           has been deactivated.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = verify_token(token)
    except ValueError:
        raise credentials_exception

    # The ``sub`` claim stores the user's id.
    user_id: str | None = payload.get("sub")
    if not user_id:
        raise credentials_exception

    user: User | None = (
        db.query(User)
        .filter(User.id == str(user_id), User.is_active.is_(True))
        .first()
    )

    if user is None:
        raise credentials_exception

    return user


# ---------------------------------------------------------------------------
# Authorization gate
# ---------------------------------------------------------------------------


def is_project_member(db: Session, user: User, project: Project) -> bool:
    """Return True when *user* heads *project* or is active staff on it."""
    if project.project_head_id == user.id:
        return True
    assignment = (
        db.query(ProjectStaff.id)
        .filter(
            ProjectStaff.project_id == project.id,
            ProjectStaff.user_id == user.id,
            ProjectStaff.is_active.is_(True),
        )
        .first()
    )
    return assignment is not None


def get_project_or_404(db: Session, project_id: str) -> Project:
    project: Project | None = db.query(Project).filter(Project.id == project_id).first()
    if project is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Project with id={project_id} not found.",
        )
    return project


def authorize(
    db: Session,
    user: User,
    resource: str,
    action: str,
    project_id: str | None = None,
) -> Project | None:
    """Single permission gate for every ledger operation.

    Looks up ``ROLE_PERMISSIONS[user.role][resource][action]``:

    - no grant → 403;
    - ``Grant.ALL`` → allowed;
    - ``Grant.MEMBER`` → allowed only when *project_id* names a project the
      user heads or is active staff on.

    When *project_id* is given the project is resolved first, so a missing
    project is a 404 regardless of the caller's role.

    Returns:
        The resolved ``Project`` when *project_id* was given, else ``None``.

    Raises:
        HTTPException 404: If *project_id* does not exist.
        HTTPException 403: If the role or membership check fails.
    """
    project = get_project_or_404(db, project_id) if project_id is not None else None

    grant = get_grant(user.role, resource, action)
    if grant is None:
        logger.info(
            "authorize: denied %s:%s for user=%s role=%s",
            resource, action, user.id, user.role,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Permission denied: {resource}:{action}",
        )

    if grant == Grant.ALL:
        return project

    if project is None or not is_project_member(db, user, project):
        logger.info(
            "authorize: non-member %s:%s for user=%s project=%s",
            resource, action, user.id, project_id,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Permission denied: not a member of this project",
        )
    return project


def require_permission(resource: str, action: str):
    """Return a FastAPI dependency enforcing a project-independent permission.

    .. code-block:: python

        @router.post("/allocate")
        def allocate(
            current_user: Annotated[User, Depends(require_permission(BUDGET, "allocate"))],
        ):
            ...

    Only ``Grant.ALL`` satisfies it: a ``Grant.MEMBER`` holder has no
    project to be a member of at this level.
    """

    def _check_permission(
        current_user: Annotated[User, Depends(get_current_user)],
        db: Annotated[Session, Depends(get_db)],
    ) -> User:
        authorize(db, current_user, resource, action)
        return current_user

    return _check_permission
