"""Domain entities: principals and space-bound roles."""

from gatekeeper.domain.entities.principal import Principal
from gatekeeper.domain.entities.role import Role, SystemRole, TenantRole, role_from_fields

__all__ = ["Principal", "Role", "SystemRole", "TenantRole", "role_from_fields"]
