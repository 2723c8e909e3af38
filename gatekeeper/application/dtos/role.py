"""DTOs for role use cases (no dependency on ORM).

The role read-model itself is the domain variant gatekeeper.domain.entities.Role.
"""

from dataclasses import dataclass, field

from gatekeeper.application.dtos.permission import RolePermissionResult
from gatekeeper.domain.entities import Role
from gatekeeper.domain.enums import RecordStatus


@dataclass(frozen=True)
class RoleUpdate:
    """Patch for update_role. None means unchanged.

    space and tenant_id are accepted only so that attempts to change them
    can be rejected explicitly.
    """

    name: str | None = None
    description: str | None = None
    status: RecordStatus | None = None
    space: str | None = None
    tenant_id: str | None = None


@dataclass(frozen=True)
class RoleWithPermissions:
    role: Role
    permissions: tuple[RolePermissionResult, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PermissionMatrixRow:
    """One module row of a role's permission matrix: action key -> granted."""

    menu_key: str
    display_name: str
    actions: dict[str, bool]
