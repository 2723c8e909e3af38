"""Shared enumerations.

Cross-cutting enums used by application and infrastructure (audit actions,
standard menu actions). Domain enums (Space, RoleStatus, ...) live in
gatekeeper.domain.enums.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class AuditAction(_ValuesMixin, str, Enum):
    """Audit action types recorded by the audit hook."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    ACTIVATED = "activated"
    DEACTIVATED = "deactivated"
    GRANTED = "granted"
    REVOKED = "revoked"
    REPLACED = "replaced"
    ASSIGNED = "assigned"
    UNASSIGNED = "unassigned"
    DELEGATED = "delegated"


class MenuAction(_ValuesMixin, str, Enum):
    """Standard action keys shown in a role permission matrix."""

    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    APPROVE = "approve"
    EXPORT = "export"
