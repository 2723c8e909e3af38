"""DTOs for the permission catalog (no dependency on ORM)."""

from dataclasses import dataclass, field
from typing import Any

from gatekeeper.domain.enums import RecordStatus, Space


@dataclass(frozen=True)
class PermissionResult:
    """Permission read-model. menu_key is the effective menu (resource when unset)."""

    id: str
    permission_key: str
    resource: str
    action: str
    description: str | None
    space: Space
    menu_key: str
    status: RecordStatus


@dataclass(frozen=True)
class ModuleResult:
    """Module (menu entry) read-model."""

    id: str
    menu_key: str
    display_name: str
    description: str | None
    icon: str | None
    route_path: str | None
    parent_menu_key: str | None
    menu_order: int
    space: Space
    action_keys: tuple[str, ...]
    status: RecordStatus


@dataclass(frozen=True)
class RolePermissionResult:
    """A permission held by a role, with the link's constraint payload."""

    permission: PermissionResult
    status: RecordStatus
    constraints: dict[str, Any] | None = field(default=None, compare=False)
