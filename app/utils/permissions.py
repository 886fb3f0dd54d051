"""
Role/resource/action capability table.

Every authorization decision in the ledger is a lookup in
``ROLE_PERMISSIONS[role][resource][action]``:

- ``Grant.ALL``    — allowed on any project.
- ``Grant.MEMBER`` — allowed only on projects the caller heads or is active
  staff on.
- missing          — denied.

The table is evaluated by a single gate, ``auth_service.authorize``, so role
checks and project-membership checks share one code path.

Every role holds ``budget:request`` at ``MEMBER``: heading or staffing a
project is enough to ask for funds on it.
"""

from __future__ import annotations

from enum import Enum
from typing import Final

from app.utils.constants import Role


class Grant(str, Enum):
    ALL = "ALL"
    MEMBER = "MEMBER"


# Resources
BUDGET: Final[str] = "budget"
EXPENSE: Final[str] = "expense"
REPORT: Final[str] = "report"

_LEDGER_MANAGER: dict[str, Grant] = {
    "read": Grant.ALL,
    "request": Grant.MEMBER,
    "allocate": Grant.ALL,
    "approve": Grant.ALL,
    "transfer": Grant.ALL,
    "archive": Grant.ALL,
}

ROLE_PERMISSIONS: Final[dict[Role, dict[str, dict[str, Grant]]]] = {
    Role.ADMIN: {
        BUDGET: dict(_LEDGER_MANAGER),
        EXPENSE: {"read": Grant.ALL, "create": Grant.ALL},
        REPORT: {"export": Grant.ALL},
    },
    Role.SUPERVISOR: {
        BUDGET: dict(_LEDGER_MANAGER),
        EXPENSE: {"read": Grant.ALL, "create": Grant.ALL},
        REPORT: {"export": Grant.ALL},
    },
    Role.DIRECTOR: {
        BUDGET: {"read": Grant.ALL, "request": Grant.MEMBER},
        EXPENSE: {"read": Grant.ALL, "create": Grant.ALL},
        REPORT: {"export": Grant.ALL},
    },
    Role.PROJECT_HEAD: {
        BUDGET: {"read": Grant.MEMBER, "request": Grant.MEMBER},
        EXPENSE: {"read": Grant.MEMBER, "create": Grant.MEMBER},
    },
    Role.EMPLOYEE: {
        BUDGET: {"read": Grant.MEMBER, "request": Grant.MEMBER},
        EXPENSE: {"read": Grant.MEMBER},
    },
    Role.EXTERNAL_OWNER: {
        BUDGET: {"request": Grant.MEMBER},
    },
    Role.DIRECTOR_GENERAL: {
        BUDGET: {"read": Grant.ALL, "request": Grant.MEMBER},
        EXPENSE: {"read": Grant.ALL},
        REPORT: {"export": Grant.ALL},
    },
    Role.RC_MEMBER: {
        BUDGET: {"read": Grant.ALL, "request": Grant.MEMBER},
        EXPENSE: {"read": Grant.ALL},
    },
}


def get_grant(role: str | None, resource: str, action: str) -> Grant | None:
    """Look up the grant a role holds for ``resource:action``.

    Unknown roles, resources and actions all resolve to ``None`` (denied).
    """
    try:
        role_key = Role(role)
    except ValueError:
        return None
    return ROLE_PERMISSIONS.get(role_key, {}).get(resource, {}).get(action)
