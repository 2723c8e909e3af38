"""DTOs for engine use cases (no dependency on ORM)."""

from gatekeeper.application.dtos.access import (
    AccessContext,
    BulkReplaceResult,
    ConstraintDecision,
    ResolvedGrant,
)
from gatekeeper.application.dtos.delegation import DelegationResult
from gatekeeper.application.dtos.pagination import Page, PageParams
from gatekeeper.application.dtos.permission import (
    ModuleResult,
    PermissionResult,
    RolePermissionResult,
)
from gatekeeper.application.dtos.role import (
    PermissionMatrixRow,
    RoleUpdate,
    RoleWithPermissions,
)
from gatekeeper.application.dtos.user import TenantResult, UserResult

__all__ = [
    "AccessContext",
    "BulkReplaceResult",
    "ConstraintDecision",
    "DelegationResult",
    "ModuleResult",
    "Page",
    "PageParams",
    "PermissionMatrixRow",
    "PermissionResult",
    "ResolvedGrant",
    "RolePermissionResult",
    "RoleUpdate",
    "RoleWithPermissions",
    "TenantResult",
    "UserResult",
]
