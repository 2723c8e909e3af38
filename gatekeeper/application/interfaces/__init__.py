"""Ports: protocols implemented by infrastructure."""

from gatekeeper.application.interfaces.repositories import (
    IDelegationRepository,
    IModuleRepository,
    IPermissionRepository,
    IRolePermissionRepository,
    IRoleRepository,
    ITenantRepository,
    IUserRepository,
    IUserRoleRepository,
)
from gatekeeper.application.interfaces.services import (
    IAuditHook,
    IPermissionResolver,
    IUnitOfWork,
)

__all__ = [
    "IAuditHook",
    "IDelegationRepository",
    "IModuleRepository",
    "IPermissionRepository",
    "IPermissionResolver",
    "IRolePermissionRepository",
    "IRoleRepository",
    "ITenantRepository",
    "IUnitOfWork",
    "IUserRepository",
    "IUserRoleRepository",
]
