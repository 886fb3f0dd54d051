"""User model — portal account with a role that drives ledger permissions."""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base, generate_uuid


class User(Base):
    """Portal user.

    Roles (see ``constants.Role``):
        - ADMIN / SUPERVISOR: manage the ledger (allocate, approve, transfer,
          archive).
        - DIRECTOR, DIRECTOR_GENERAL, RC_MEMBER: institution-wide read access.
        - PROJECT_HEAD, EMPLOYEE: act only on projects they belong to.
        - EXTERNAL_OWNER: no ledger access.

    Attributes:
        id: Opaque UUID primary key.
        email: Unique email address, also the login name.
        password_hash: Bcrypt-hashed password.
        first_name: Given name used in notification emails.
        last_name: Family name.
        role: Role identifier.
        is_active: Inactive accounts cannot log in or receive notifications.
        last_login_at: Timestamp of the last successful login.
    """

    __tablename__ = "app_user"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(200), unique=True, nullable=False)
    password_hash = Column(String(200), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    role = Column(String(30), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    headed_projects = relationship("Project", back_populates="project_head", lazy="select")
    staff_assignments = relationship("ProjectStaff", back_populates="user", lazy="select")

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)
