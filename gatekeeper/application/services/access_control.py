"""AccessControl: the engine's external facade.

Read checks return plain values and never raise. Role and link mutations
return Ok(value) or Err(domain exception) so callers must handle the error
kinds explicitly.

A mutation that returns Ok is committed, unless the caller began the
session transaction itself; then it is committed with that transaction.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from gatekeeper.application.dtos.access import (
    AccessContext,
    BulkReplaceResult,
    ConstraintDecision,
)
from gatekeeper.application.dtos.delegation import DelegationResult
from gatekeeper.application.dtos.pagination import Page, PageParams
from gatekeeper.application.dtos.role import RoleUpdate
from gatekeeper.application.result import Result, capture
from gatekeeper.application.services.access_evaluator import AccessEvaluator
from gatekeeper.application.services.delegation_service import DelegationService
from gatekeeper.application.services.grant_revoke_engine import GrantRevokeEngine
from gatekeeper.application.services.permission_catalog_service import (
    PermissionCatalogService,
)
from gatekeeper.application.services.role_registry_service import RoleRegistryService
from gatekeeper.domain.entities import Principal, Role
from gatekeeper.domain.enums import Space


class AccessControl:
    """Single entry point wiring catalog, registry, engine, evaluator and delegations."""

    def __init__(
        self,
        catalog: PermissionCatalogService,
        registry: RoleRegistryService,
        engine: GrantRevokeEngine,
        evaluator: AccessEvaluator,
        delegations: DelegationService,
    ) -> None:
        self.catalog = catalog
        self.registry = registry
        self.engine = engine
        self.evaluator = evaluator
        self.delegations = delegations

    # Access checks (fail closed, never raise)

    async def has_permission(self, user_id: str, resource: str, action: str) -> bool:
        return await self.evaluator.has_permission(user_id, resource, action)

    async def has_menu_access(self, user_id: str, menu_key: str) -> bool:
        return await self.evaluator.has_menu_access(user_id, menu_key)

    async def has_action(self, user_id: str, menu_key: str, action_key: str) -> bool:
        return await self.evaluator.has_action(user_id, menu_key, action_key)

    async def get_user_permissions(self, user_id: str) -> dict[str, list[str]]:
        return await self.evaluator.get_user_permissions(user_id)

    async def get_user_permission_keys(self, user_id: str) -> set[str]:
        return await self.evaluator.get_user_permission_keys(user_id)

    async def check_with_constraints(
        self,
        user_id: str,
        menu_key: str,
        action_key: str,
        context: AccessContext | None = None,
    ) -> ConstraintDecision:
        return await self.evaluator.check_with_constraints(
            user_id, menu_key, action_key, context
        )

    # Roles

    async def create_role(
        self,
        name: str,
        description: str | None,
        space: Space | str,
        tenant_id: str | None = None,
        *,
        principal: Principal,
    ) -> Result[Role]:
        return await capture(
            self.registry.create_role(
                name, description, space, tenant_id, principal=principal
            )
        )

    async def get_role(self, role_id: str, principal: Principal) -> Result[Role]:
        return await capture(self.registry.get_role(role_id, principal))

    async def list_roles(
        self, principal: Principal, page_params: PageParams | None = None
    ) -> Result[Page[Role]]:
        return await capture(self.registry.list_roles(principal, page_params))

    async def update_role(
        self, role_id: str, patch: RoleUpdate, principal: Principal
    ) -> Result[Role]:
        return await capture(self.registry.update_role(role_id, patch, principal))

    async def delete_role(self, role_id: str, principal: Principal) -> Result[None]:
        return await capture(self.registry.delete_role(role_id, principal))

    # Grants

    async def grant_permission(
        self,
        role_id: str,
        permission_key: str,
        principal: Principal,
        constraints: dict[str, Any] | None = None,
    ) -> Result[None]:
        return await capture(
            self.engine.grant_permission(role_id, permission_key, principal, constraints)
        )

    async def revoke_permission(
        self, role_id: str, permission_key: str, principal: Principal
    ) -> Result[None]:
        return await capture(
            self.engine.revoke_permission(role_id, permission_key, principal)
        )

    async def bulk_replace_permissions(
        self, role_id: str, permission_keys: list[str], principal: Principal
    ) -> Result[BulkReplaceResult]:
        return await capture(
            self.engine.bulk_replace_permissions(role_id, permission_keys, principal)
        )

    async def assign_role(
        self,
        user_id: str,
        role_id: str,
        principal: Principal,
        expires_at: datetime | None = None,
    ) -> Result[None]:
        return await capture(
            self.engine.assign_role(user_id, role_id, principal, expires_at)
        )

    async def unassign_role(
        self, user_id: str, role_id: str, principal: Principal
    ) -> Result[None]:
        return await capture(self.engine.unassign_role(user_id, role_id, principal))

    # Delegations

    async def delegate_role(
        self,
        principal: Principal,
        to_user_id: str,
        role_id: str,
        expires_at: datetime,
        reason: str | None = None,
    ) -> Result[DelegationResult]:
        return await capture(
            self.delegations.delegate_role(
                principal, to_user_id, role_id, expires_at, reason
            )
        )

    async def revoke_delegation(
        self, delegation_id: str, principal: Principal
    ) -> Result[DelegationResult]:
        return await capture(
            self.delegations.revoke_delegation(delegation_id, principal)
        )
