"""Domain enumerations for the access control engine.

Enums represent fixed sets of domain values (space, lifecycle status).
"""

from enum import Enum


class _ValuesMixin:
    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings (e.g. for CHECK constraints)."""
        return [member.value for member in cls]


class Space(_ValuesMixin, str, Enum):
    """Top-level isolation tier of a role or permission.

    SYSTEM is platform-wide; TENANT is scoped to exactly one tenant.
    """

    SYSTEM = "system"
    TENANT = "tenant"


class TenantStatus(_ValuesMixin, str, Enum):
    """Tenant lifecycle status. Only ACTIVE tenants may receive new roles."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    ARCHIVED = "archived"


class UserStatus(_ValuesMixin, str, Enum):
    """User lifecycle status. Only ACTIVE users hold effective permissions."""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    DELETED = "deleted"


class RecordStatus(_ValuesMixin, str, Enum):
    """Soft-disable status for roles, permissions, modules and links."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class DelegationStatus(_ValuesMixin, str, Enum):
    """Delegation lifecycle. Expiry is evaluated at query time, not stored."""

    ACTIVE = "active"
    REVOKED = "revoked"
