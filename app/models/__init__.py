"""SQLAlchemy models package for the research budget ledger.

Importing all models here ensures that SQLAlchemy's mapper registry is
populated before ``Base.metadata.create_all()`` or Alembic migrations run.
The import order follows the foreign-key dependency graph so that parent
tables are always registered before their children.

Usage from other modules:
    from app.models import BudgetEntry, Project
"""

# Identity and projects
from app.models.user import User  # noqa: F401
from app.models.project import Project, ProjectStaff  # noqa: F401

# Ledger
from app.models.budget_entry import BudgetEntry  # noqa: F401
from app.models.budget_request import BudgetRequest  # noqa: F401
from app.models.budget_transfer import BudgetTransfer  # noqa: F401
from app.models.budget_archive import BudgetArchive  # noqa: F401
from app.models.expense import Expense  # noqa: F401

# Cross-cutting concerns
from app.models.notification import Notification  # noqa: F401
from app.models.audit_log import AuditLog  # noqa: F401

__all__ = [
    "User",
    "Project",
    "ProjectStaff",
    "BudgetEntry",
    "BudgetRequest",
    "BudgetTransfer",
    "BudgetArchive",
    "Expense",
    "Notification",
    "AuditLog",
]
