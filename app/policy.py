"""Role-based authorization policy for todo operations.

Every role maps to the set of operations it may perform and to the subset
of todos it may read. Anything that is not a known :class:`UserRole` is
denied everything.
"""
import enum
from typing import Optional, Union

from app.models.user import UserRole


class Operation(str, enum.Enum):
    """Operations gated by the policy."""
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    TOGGLE = "toggle"
    DELETE = "delete"


class ReadScope(str, enum.Enum):
    """Which todos a role may see."""
    ALL = "all"
    OWN = "own"


PERMISSIONS = {
    UserRole.ADMIN: frozenset(Operation),
    UserRole.MANAGER: frozenset({
        Operation.READ,
        Operation.UPDATE,
        Operation.TOGGLE,
        Operation.DELETE,
    }),
    UserRole.EMPLOYEE: frozenset({Operation.READ}),
}

READ_SCOPES = {
    UserRole.ADMIN: ReadScope.ALL,
    UserRole.MANAGER: ReadScope.ALL,
    UserRole.EMPLOYEE: ReadScope.OWN,
}

# A new role must be given an entry in both tables.
for _table in (PERMISSIONS, READ_SCOPES):
    _missing = set(UserRole) - set(_table)
    if _missing:
        raise RuntimeError(f"Policy table has no entry for roles: {sorted(_missing)}")


def coerce_role(value: Union[UserRole, str, None]) -> Optional[UserRole]:
    """Return the matching role, or None for anything unrecognised."""
    if isinstance(value, UserRole):
        return value
    try:
        return UserRole(value)
    except ValueError:
        return None


def is_permitted(role: Union[UserRole, str, None], operation: Operation) -> bool:
    """Whether ``role`` may perform ``operation``. Unknown roles fail closed."""
    known = coerce_role(role)
    if known is None:
        return False
    return operation in PERMISSIONS[known]


def read_scope(role: Union[UserRole, str, None]) -> Optional[ReadScope]:
    known = coerce_role(role)
    if known is None:
        return None
    return READ_SCOPES[known]
