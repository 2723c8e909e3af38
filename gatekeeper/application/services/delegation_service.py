"""Delegation: time-boxed, revocable hand-over of a role from one user to another.

Active, unexpired, unrevoked delegations are resolved by the access
evaluator exactly like role assignments.
"""

from __future__ import annotations

from datetime import datetime

from gatekeeper.application.dtos.delegation import DelegationResult
from gatekeeper.application.interfaces.repositories import (
    IDelegationRepository,
    IRoleRepository,
    IUserRepository,
    IUserRoleRepository,
)
from gatekeeper.application.interfaces.services import IAuditHook, IUnitOfWork
from gatekeeper.application.services.base import AuditedService
from gatekeeper.application.services.ownership import (
    check_role_ownership,
    check_user_matches_role,
)
from gatekeeper.domain.entities import Principal
from gatekeeper.domain.enums import DelegationStatus
from gatekeeper.domain.exceptions import (
    PermissionDeniedException,
    ResourceNotFoundException,
    ValidationException,
)
from gatekeeper.shared.enums import AuditAction
from gatekeeper.shared.utils.datetime import ensure_utc, utc_now


class DelegationService(AuditedService):
    """Create, revoke and list delegations."""

    def __init__(
        self,
        uow: IUnitOfWork,
        role_repo: IRoleRepository,
        user_repo: IUserRepository,
        user_role_repo: IUserRoleRepository,
        delegation_repo: IDelegationRepository,
        audit_hook: IAuditHook | None = None,
    ) -> None:
        super().__init__(audit_hook)
        self._uow = uow
        self._role_repo = role_repo
        self._user_repo = user_repo
        self._user_role_repo = user_role_repo
        self._delegation_repo = delegation_repo

    async def delegate_role(
        self,
        principal: Principal,
        to_user_id: str,
        role_id: str,
        expires_at: datetime,
        reason: str | None = None,
    ) -> DelegationResult:
        """Delegate a role the principal currently holds to another user until expires_at.

        Raises:
            ValidationException: If expires_at is not in the future or the
                principal delegates to itself.
            ResourceNotFoundException: If the role or target user does not exist.
            PermissionDeniedException: If ownership checks fail or the
                principal does not hold the role.
            UserSpaceMismatchException: If the target user cannot hold the role.
        """
        expiry = ensure_utc(expires_at)
        if expiry is None or expiry <= utc_now():
            raise ValidationException("expires_at must be in the future", field="expires_at")
        if to_user_id == principal.user_id:
            raise ValidationException("Cannot delegate to yourself", field="delegated_to")
        async with self._uow.atomic("delegate_role"):
            role = await self._role_repo.get_role(role_id)
            if role is None:
                raise ResourceNotFoundException("role", role_id)
            check_role_ownership(principal, role)
            if not await self._user_role_repo.holds_role(principal.user_id, role_id):
                raise PermissionDeniedException(
                    role.name, role.space.value, "delegator does not hold this role"
                )
            target = await self._user_repo.get_by_id(to_user_id)
            if target is None:
                raise ResourceNotFoundException("user", to_user_id)
            check_user_matches_role(target, role)
            delegation = await self._delegation_repo.create_delegation(
                tenant_id=role.tenant_id,
                delegated_by=principal.user_id,
                delegated_to=to_user_id,
                role_id=role_id,
                expires_at=expiry,
                reason=reason,
            )
        await self._record(
            principal,
            AuditAction.DELEGATED,
            "delegation",
            delegation.id,
            {
                "role_id": role_id,
                "delegated_to": to_user_id,
                "expires_at": expiry.isoformat(),
            },
        )
        return delegation

    async def revoke_delegation(
        self, delegation_id: str, principal: Principal
    ) -> DelegationResult:
        """Revoke a delegation. Revoking an already revoked delegation is a no-op.

        Raises:
            ResourceNotFoundException: If the delegation or its role does not exist.
            PermissionDeniedException: If ownership checks fail for the role.
        """
        async with self._uow.atomic("revoke_delegation"):
            delegation = await self._delegation_repo.get_by_id(delegation_id)
            if delegation is None:
                raise ResourceNotFoundException("delegation", delegation_id)
            role = await self._role_repo.get_role(delegation.role_id)
            if role is None:
                raise ResourceNotFoundException("role", delegation.role_id)
            check_role_ownership(principal, role)
            if delegation.status == DelegationStatus.REVOKED:
                return delegation
            revoked = await self._delegation_repo.revoke(delegation_id, principal.user_id)
            if revoked is None:
                raise ResourceNotFoundException("delegation", delegation_id)
        await self._record(
            principal,
            AuditAction.REVOKED,
            "delegation",
            delegation_id,
            {"role_id": delegation.role_id, "delegated_to": delegation.delegated_to},
        )
        return revoked

    async def list_active_delegations(self, user_id: str) -> list[DelegationResult]:
        """Delegations currently in effect for the user (active and not expired)."""
        return await self._delegation_repo.list_active_for_user(user_id)
