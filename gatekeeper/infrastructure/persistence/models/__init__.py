"""Persistence models: ORM entities and mixins."""

from gatekeeper.infrastructure.persistence.models.audit_log import AuditLog
from gatekeeper.infrastructure.persistence.models.delegation import (
    PermissionDelegation,
)
from gatekeeper.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    CuidMixin,
    TimestampMixin,
)
from gatekeeper.infrastructure.persistence.models.module import Module
from gatekeeper.infrastructure.persistence.models.permission import (
    Permission,
    RolePermission,
    UserRole,
)
from gatekeeper.infrastructure.persistence.models.role import Role
from gatekeeper.infrastructure.persistence.models.tenant import Tenant
from gatekeeper.infrastructure.persistence.models.user import User

__all__ = [
    "AuditLog",
    "CreatedAtMixin",
    "CuidMixin",
    "Module",
    "Permission",
    "PermissionDelegation",
    "Role",
    "RolePermission",
    "Tenant",
    "TimestampMixin",
    "User",
    "UserRole",
]
