"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill.
All types reference application DTOs or domain entities; no infrastructure
imports.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from gatekeeper.domain.enums import RecordStatus, Space, TenantStatus, UserStatus

if TYPE_CHECKING:
    from gatekeeper.application.dtos.delegation import DelegationResult
    from gatekeeper.application.dtos.permission import (
        ModuleResult,
        PermissionResult,
        RolePermissionResult,
    )
    from gatekeeper.application.dtos.user import TenantResult, UserResult
    from gatekeeper.domain.entities import Role


class ITenantRepository(Protocol):
    async def get_by_id(self, tenant_id: str) -> TenantResult | None: ...

    async def create_tenant(
        self, code: str, name: str, status: TenantStatus = TenantStatus.ACTIVE
    ) -> TenantResult: ...


class IUserRepository(Protocol):
    async def get_by_id(self, user_id: str) -> UserResult | None: ...

    async def create_user(
        self,
        email: str,
        tenant_id: str | None,
        status: UserStatus = UserStatus.ACTIVE,
    ) -> UserResult: ...


class IRoleRepository(Protocol):
    async def get_role(self, role_id: str) -> Role | None: ...

    async def get_role_for_update(self, role_id: str) -> Role | None:
        """Return the role with its row locked until the transaction ends."""

    async def name_exists(
        self, name: str, tenant_id: str | None, exclude_id: str | None = None
    ) -> bool: ...

    async def create_role(
        self, name: str, description: str | None, space: Space, tenant_id: str | None
    ) -> Role: ...

    async def update_role(
        self,
        role_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        status: RecordStatus | None = None,
    ) -> Role | None: ...

    async def delete_role(self, role_id: str) -> bool: ...

    async def list_roles(
        self,
        *,
        visible_to_tenant: str | None,
        space: Space | None,
        include_inactive: bool,
        skip: int,
        limit: int,
    ) -> tuple[list[Role], int]:
        """Return (page, total). visible_to_tenant None means all roles."""


class IPermissionRepository(Protocol):
    async def get_by_key(self, permission_key: str) -> PermissionResult | None: ...

    async def get_by_keys(
        self, permission_keys: Iterable[str]
    ) -> dict[str, PermissionResult]: ...

    async def get_by_menu_action(
        self, menu_key: str, action: str
    ) -> PermissionResult | None: ...

    async def list_permissions(
        self, space: Space | None = None, *, include_inactive: bool = False
    ) -> list[PermissionResult]: ...

    async def create_permission(
        self,
        resource: str,
        action: str,
        space: Space,
        description: str | None = None,
        menu_key: str | None = None,
    ) -> PermissionResult: ...

    async def set_status(
        self, permission_key: str, status: RecordStatus
    ) -> PermissionResult | None: ...


class IModuleRepository(Protocol):
    async def get_by_menu_key(self, menu_key: str) -> ModuleResult | None: ...

    async def list_modules(
        self, space: Space | None = None, *, include_inactive: bool = False
    ) -> list[ModuleResult]: ...

    async def create_module(
        self,
        menu_key: str,
        display_name: str,
        space: Space,
        action_keys: list[str],
        *,
        description: str | None = None,
        icon: str | None = None,
        route_path: str | None = None,
        parent_menu_key: str | None = None,
        menu_order: int = 0,
    ) -> ModuleResult: ...


class IRolePermissionRepository(Protocol):
    async def grant(
        self,
        role_id: str,
        permission_id: str,
        granted_by: str | None,
        constraints: dict[str, Any] | None = None,
    ) -> bool:
        """Insert or re-activate the link. Return True when anything changed."""

    async def revoke(self, role_id: str, permission_id: str) -> bool: ...

    async def delete_all_for_role(self, role_id: str) -> int: ...

    async def insert_links(
        self, role_id: str, permission_ids: Iterable[str], granted_by: str | None
    ) -> int: ...

    async def list_for_role(
        self, role_id: str, *, include_inactive: bool = False
    ) -> list[RolePermissionResult]: ...


class IUserRoleRepository(Protocol):
    async def assign(
        self,
        user_id: str,
        role_id: str,
        assigned_by: str | None,
        expires_at: datetime | None = None,
    ) -> bool: ...

    async def unassign(self, user_id: str, role_id: str) -> bool: ...

    async def holds_role(self, user_id: str, role_id: str) -> bool:
        """True when the user has a non-expired assignment of the role."""


class IDelegationRepository(Protocol):
    async def create_delegation(
        self,
        tenant_id: str | None,
        delegated_by: str,
        delegated_to: str,
        role_id: str,
        expires_at: datetime,
        reason: str | None = None,
    ) -> DelegationResult: ...

    async def get_by_id(self, delegation_id: str) -> DelegationResult | None: ...

    async def revoke(
        self, delegation_id: str, revoked_by: str | None
    ) -> DelegationResult | None: ...

    async def list_active_for_user(self, user_id: str) -> list[DelegationResult]: ...
