"""Grant/revoke engine: the only path that mutates role-permission and user-role links.

Every operation runs inside one unit of work and applies the ownership
checks (cross-space, cross-tenant, then permission/role space match) before
touching any link. A SecurityViolationException aborts the whole unit.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from gatekeeper.application.dtos.access import BulkReplaceResult
from gatekeeper.application.dtos.permission import PermissionResult
from gatekeeper.application.interfaces.repositories import (
    IPermissionRepository,
    IRolePermissionRepository,
    IRoleRepository,
    IUserRepository,
    IUserRoleRepository,
)
from gatekeeper.application.interfaces.services import IAuditHook, IUnitOfWork
from gatekeeper.application.services.base import AuditedService
from gatekeeper.application.services.constraints import normalize_constraints
from gatekeeper.application.services.ownership import (
    check_permission_space,
    check_role_ownership,
    check_user_matches_role,
)
from gatekeeper.domain.entities import Principal, Role
from gatekeeper.domain.exceptions import ResourceNotFoundException, ValidationException
from gatekeeper.shared.enums import AuditAction
from gatekeeper.shared.telemetry.logging import get_logger
from gatekeeper.shared.telemetry.tracing import add_span_attributes, traced
from gatekeeper.shared.utils.datetime import ensure_utc, utc_now

logger = get_logger(__name__)


class GrantRevokeEngine(AuditedService):
    """Grant, revoke and bulk-replace role permissions; assign and unassign roles."""

    def __init__(
        self,
        uow: IUnitOfWork,
        role_repo: IRoleRepository,
        permission_repo: IPermissionRepository,
        role_permission_repo: IRolePermissionRepository,
        user_repo: IUserRepository,
        user_role_repo: IUserRoleRepository,
        audit_hook: IAuditHook | None = None,
    ) -> None:
        super().__init__(audit_hook)
        self._uow = uow
        self._role_repo = role_repo
        self._permission_repo = permission_repo
        self._role_permission_repo = role_permission_repo
        self._user_repo = user_repo
        self._user_role_repo = user_role_repo

    @traced("grant_revoke.grant_permission")
    async def grant_permission(
        self,
        role_id: str,
        permission_key: str,
        principal: Principal,
        constraints: dict[str, Any] | None = None,
    ) -> None:
        """Attach a permission to a role. Granting a held permission is a no-op.

        A previously disabled link is re-activated. When constraints are
        given they replace the link's stored constraints.

        Raises:
            ResourceNotFoundException: If the role or permission does not exist.
            PermissionDeniedException: If ownership checks fail.
            SecurityViolationException: If the permission's space differs
                from the role's space.
            ValidationException: If the constraint payload is malformed.
        """
        stored = normalize_constraints(constraints)
        async with self._uow.atomic("grant_permission"):
            role = await self._load_role(role_id)
            check_role_ownership(principal, role)
            permission = await self._load_permission(permission_key)
            check_permission_space(role, permission)
            changed = await self._role_permission_repo.grant(
                role.id, permission.id, principal.user_id, stored
            )
        if changed:
            await self._record(
                principal,
                AuditAction.GRANTED,
                "role",
                role_id,
                {"permission_key": permission_key, "constraints": stored},
            )

    @traced("grant_revoke.revoke_permission")
    async def revoke_permission(
        self, role_id: str, permission_key: str, principal: Principal
    ) -> None:
        """Detach a permission from a role. Revoking an unheld permission is a no-op.

        Raises:
            ResourceNotFoundException: If the role or permission does not exist.
            PermissionDeniedException: If ownership checks fail.
        """
        async with self._uow.atomic("revoke_permission"):
            role = await self._load_role(role_id)
            check_role_ownership(principal, role)
            permission = await self._load_permission(permission_key)
            changed = await self._role_permission_repo.revoke(role.id, permission.id)
        if changed:
            await self._record(
                principal,
                AuditAction.REVOKED,
                "role",
                role_id,
                {"permission_key": permission_key},
            )

    @traced("grant_revoke.bulk_replace_permissions")
    async def bulk_replace_permissions(
        self, role_id: str, permission_keys: list[str], principal: Principal
    ) -> BulkReplaceResult:
        """Replace a role's entire permission set in one atomic unit.

        Keys absent from the catalog are skipped and reported. Any key of the
        wrong space aborts the whole replacement with no partial effect. The
        role row is locked for the duration, so concurrent replacements of
        the same role serialize.

        Raises:
            ResourceNotFoundException: If the role does not exist.
            PermissionDeniedException: If ownership checks fail.
            SecurityViolationException: If any key's space differs from the role's.
        """
        keys = list(dict.fromkeys(permission_keys))
        async with self._uow.atomic("bulk_replace_permissions"):
            role = await self._role_repo.get_role_for_update(role_id)
            if role is None:
                raise ResourceNotFoundException("role", role_id)
            check_role_ownership(principal, role)
            found: dict[str, PermissionResult] = await self._permission_repo.get_by_keys(
                keys
            )
            not_found = tuple(k for k in keys if k not in found)
            for key in not_found:
                logger.warning("Permission not found during bulk replace: %s", key)
            to_grant = [found[k] for k in keys if k in found]
            for permission in to_grant:
                check_permission_space(role, permission)
            before = await self._role_permission_repo.list_for_role(
                role.id, include_inactive=True
            )
            await self._role_permission_repo.delete_all_for_role(role.id)
            granted = await self._role_permission_repo.insert_links(
                role.id, [p.id for p in to_grant], principal.user_id
            )
        add_span_attributes(granted_count=granted, not_found_count=len(not_found))
        await self._record(
            principal,
            AuditAction.REPLACED,
            "role",
            role_id,
            {
                "before": sorted(link.permission.permission_key for link in before),
                "after": sorted(p.permission_key for p in to_grant),
                "not_found_keys": list(not_found),
            },
        )
        return BulkReplaceResult(granted_count=granted, not_found_keys=not_found)

    async def grant_menu_action(
        self,
        role_id: str,
        menu_key: str,
        action_key: str,
        principal: Principal,
        constraints: dict[str, Any] | None = None,
    ) -> None:
        """Grant by menu form: resolves the catalog permission for (menu_key, action_key)."""
        permission = await self._load_menu_permission(menu_key, action_key)
        await self.grant_permission(
            role_id, permission.permission_key, principal, constraints
        )

    async def revoke_menu_action(
        self, role_id: str, menu_key: str, action_key: str, principal: Principal
    ) -> None:
        """Revoke by menu form: resolves the catalog permission for (menu_key, action_key)."""
        permission = await self._load_menu_permission(menu_key, action_key)
        await self.revoke_permission(role_id, permission.permission_key, principal)

    @traced("grant_revoke.assign_role")
    async def assign_role(
        self,
        user_id: str,
        role_id: str,
        principal: Principal,
        expires_at: datetime | None = None,
    ) -> None:
        """Assign a role to a user, optionally until expires_at. Idempotent.

        Re-assigning a role whose assignment has expired renews it.

        Raises:
            ResourceNotFoundException: If the role or user does not exist.
            PermissionDeniedException: If ownership checks fail.
            UserSpaceMismatchException: If the user's space/tenant differs
                from the role's.
            ValidationException: If expires_at is not in the future.
        """
        expiry = ensure_utc(expires_at)
        if expiry is not None and expiry <= utc_now():
            raise ValidationException("expires_at must be in the future", field="expires_at")
        async with self._uow.atomic("assign_role"):
            role = await self._load_role(role_id)
            check_role_ownership(principal, role)
            user = await self._user_repo.get_by_id(user_id)
            if user is None:
                raise ResourceNotFoundException("user", user_id)
            check_user_matches_role(user, role)
            changed = await self._user_role_repo.assign(
                user_id, role_id, principal.user_id, expiry
            )
        if changed:
            await self._record(
                principal,
                AuditAction.ASSIGNED,
                "user",
                user_id,
                {
                    "role_id": role_id,
                    "expires_at": expiry.isoformat() if expiry else None,
                },
            )

    @traced("grant_revoke.unassign_role")
    async def unassign_role(
        self, user_id: str, role_id: str, principal: Principal
    ) -> None:
        """Remove a user's assignment of a role. Idempotent.

        Raises:
            ResourceNotFoundException: If the role or user does not exist.
            PermissionDeniedException: If ownership checks fail.
        """
        async with self._uow.atomic("unassign_role"):
            role = await self._load_role(role_id)
            check_role_ownership(principal, role)
            if await self._user_repo.get_by_id(user_id) is None:
                raise ResourceNotFoundException("user", user_id)
            changed = await self._user_role_repo.unassign(user_id, role_id)
        if changed:
            await self._record(
                principal, AuditAction.UNASSIGNED, "user", user_id, {"role_id": role_id}
            )

    async def _load_role(self, role_id: str) -> Role:
        role = await self._role_repo.get_role(role_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        return role

    async def _load_permission(self, permission_key: str) -> PermissionResult:
        permission = await self._permission_repo.get_by_key(permission_key)
        if permission is None:
            raise ResourceNotFoundException("permission", permission_key)
        return permission

    async def _load_menu_permission(
        self, menu_key: str, action_key: str
    ) -> PermissionResult:
        permission = await self._permission_repo.get_by_menu_action(menu_key, action_key)
        if permission is None:
            raise ResourceNotFoundException("permission", f"{menu_key}/{action_key}")
        return permission
