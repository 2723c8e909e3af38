"""Repositories: SQLAlchemy implementations of the application ports."""

from gatekeeper.infrastructure.persistence.repositories.base import BaseRepository
from gatekeeper.infrastructure.persistence.repositories.delegation_repo import (
    DelegationRepository,
)
from gatekeeper.infrastructure.persistence.repositories.module_repo import (
    ModuleRepository,
)
from gatekeeper.infrastructure.persistence.repositories.permission_repo import (
    PermissionRepository,
)
from gatekeeper.infrastructure.persistence.repositories.role_permission_repo import (
    RolePermissionRepository,
)
from gatekeeper.infrastructure.persistence.repositories.role_repo import RoleRepository
from gatekeeper.infrastructure.persistence.repositories.tenant_repo import (
    TenantRepository,
)
from gatekeeper.infrastructure.persistence.repositories.user_repo import UserRepository
from gatekeeper.infrastructure.persistence.repositories.user_role_repo import (
    UserRoleRepository,
)

__all__ = [
    "BaseRepository",
    "DelegationRepository",
    "ModuleRepository",
    "PermissionRepository",
    "RolePermissionRepository",
    "RoleRepository",
    "TenantRepository",
    "UserRepository",
    "UserRoleRepository",
]
