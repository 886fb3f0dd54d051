"""
Application-wide constants for the research budget ledger.

Defines domain enumerations and lookup lists used across routers,
services, and models.
"""

from enum import Enum
from typing import Final

# ---------------------------------------------------------------------------
# User roles
# ---------------------------------------------------------------------------


class Role(str, Enum):
    ADMIN = "ADMIN"
    DIRECTOR = "DIRECTOR"
    SUPERVISOR = "SUPERVISOR"
    PROJECT_HEAD = "PROJECT_HEAD"
    EMPLOYEE = "EMPLOYEE"
    EXTERNAL_OWNER = "EXTERNAL_OWNER"
    DIRECTOR_GENERAL = "DIRECTOR_GENERAL"
    RC_MEMBER = "RC_MEMBER"


ROLES: Final[list[str]] = [role.value for role in Role]

# ---------------------------------------------------------------------------
# Budget categories
# ---------------------------------------------------------------------------


class BudgetCategory(str, Enum):
    MANPOWER = "MANPOWER"
    EQUIPMENT = "EQUIPMENT"
    TRAVEL = "TRAVEL"
    CONSUMABLES = "CONSUMABLES"
    OVERHEAD = "OVERHEAD"
    CONTINGENCY = "CONTINGENCY"
    OTHER = "OTHER"


# ---------------------------------------------------------------------------
# Budget request lifecycle: PENDING → one terminal status, exactly once
# ---------------------------------------------------------------------------


class RequestStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PARTIALLY_APPROVED = "PARTIALLY_APPROVED"


TERMINAL_REQUEST_STATUSES: Final[frozenset[RequestStatus]] = frozenset({
    RequestStatus.APPROVED,
    RequestStatus.REJECTED,
    RequestStatus.PARTIALLY_APPROVED,
})

# Statuses whose approval credits the ledger
CREDITING_REQUEST_STATUSES: Final[frozenset[RequestStatus]] = frozenset({
    RequestStatus.APPROVED,
    RequestStatus.PARTIALLY_APPROVED,
})

# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class NotificationType(str, Enum):
    BUDGET_REQUEST = "BUDGET_REQUEST"
    BUDGET_WARNING = "BUDGET_WARNING"


# ---------------------------------------------------------------------------
# Audit actions
# ---------------------------------------------------------------------------

AUDIT_ALLOCATE: Final[str] = "ALLOCATE"
AUDIT_CREATE: Final[str] = "CREATE"
AUDIT_APPROVE: Final[str] = "APPROVE"
AUDIT_TRANSFER: Final[str] = "TRANSFER"
AUDIT_ARCHIVE: Final[str] = "ARCHIVE"
AUDIT_LOGIN: Final[str] = "LOGIN"
AUDIT_CHANGE_PASSWORD: Final[str] = "CHANGE_PASSWORD"

# ---------------------------------------------------------------------------
# Fiscal year (April 1 – March 31, labelled "YYYY-YY")
# ---------------------------------------------------------------------------

FISCAL_YEAR_PATTERN: Final[str] = r"^\d{4}-\d{2}$"
FISCAL_YEAR_START_MONTH: Final[int] = 4

# ---------------------------------------------------------------------------
# Field limits
# ---------------------------------------------------------------------------

MIN_JUSTIFICATION_LENGTH: Final[int] = 10
MIN_TRANSFER_REASON_LENGTH: Final[int] = 5
MIN_PASSWORD_LENGTH: Final[int] = 8
