"""Project and ProjectStaff models — read by the ledger for existence and membership."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base, generate_uuid


class Project(Base):
    """Research project that owns budget slots.

    Attributes:
        id: Opaque UUID primary key.
        code: Short unique code shown in notifications, e.g. ``"GAP-0142"``.
        title: Full project title.
        project_head_id: FK to the User heading the project.
        is_active: Soft-delete flag.
    """

    __tablename__ = "project"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    code = Column(String(30), unique=True, nullable=False)
    title = Column(String(500), nullable=False)
    project_head_id = Column(String(36), ForeignKey("app_user.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    project_head = relationship("User", back_populates="headed_projects", lazy="select")
    staff = relationship(
        "ProjectStaff",
        back_populates="project",
        lazy="select",
        cascade="all, delete-orphan",
    )
    budget_entries = relationship("BudgetEntry", back_populates="project", lazy="select")


class ProjectStaff(Base):
    """Assignment of a user to a project.

    Only active assignments count as project membership.
    """

    __tablename__ = "project_staff"
    __table_args__ = (UniqueConstraint("project_id", "user_id", name="uq_project_staff_member"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    project_id = Column(String(36), ForeignKey("project.id"), nullable=False)
    user_id = Column(String(36), ForeignKey("app_user.id"), nullable=False)
    designation = Column(String(100), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    project = relationship("Project", back_populates="staff", lazy="select")
    user = relationship("User", back_populates="staff_assignments", lazy="select")
