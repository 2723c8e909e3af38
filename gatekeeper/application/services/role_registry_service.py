"""Role registry: create, read, list, update and delete space-bound roles."""

from __future__ import annotations

from typing import Any

from gatekeeper.application.dtos.pagination import Page, PageParams
from gatekeeper.application.dtos.role import (
    PermissionMatrixRow,
    RoleUpdate,
    RoleWithPermissions,
)
from gatekeeper.application.interfaces.repositories import (
    IModuleRepository,
    IRolePermissionRepository,
    IRoleRepository,
    ITenantRepository,
)
from gatekeeper.application.interfaces.services import IAuditHook, IUnitOfWork
from gatekeeper.application.services.base import AuditedService
from gatekeeper.application.services.ownership import (
    check_can_read_role,
    check_role_ownership,
)
from gatekeeper.domain.entities import Principal, Role, SystemRole, TenantRole
from gatekeeper.domain.enums import RecordStatus, Space
from gatekeeper.domain.exceptions import (
    InvalidRoleSpaceException,
    ResourceNotFoundException,
    ValidationException,
)
from gatekeeper.shared.enums import AuditAction, MenuAction
from gatekeeper.shared.telemetry.tracing import traced

_MAX_NAME_LENGTH = 100


def _role_summary(role: Role) -> dict[str, Any]:
    return {
        "name": role.name,
        "description": role.description,
        "space": role.space.value,
        "status": role.status.value,
    }


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationException("Role name is required", field="name")
    if len(cleaned) > _MAX_NAME_LENGTH:
        raise ValidationException(
            f"Role name must be at most {_MAX_NAME_LENGTH} characters", field="name"
        )
    return cleaned


class RoleRegistryService(AuditedService):
    """CRUD over roles. Every mutation runs the ownership checks first."""

    def __init__(
        self,
        uow: IUnitOfWork,
        role_repo: IRoleRepository,
        tenant_repo: ITenantRepository,
        role_permission_repo: IRolePermissionRepository,
        module_repo: IModuleRepository,
        audit_hook: IAuditHook | None = None,
        *,
        default_page_size: int = 20,
        max_page_size: int = 100,
    ) -> None:
        super().__init__(audit_hook)
        self._uow = uow
        self._role_repo = role_repo
        self._tenant_repo = tenant_repo
        self._role_permission_repo = role_permission_repo
        self._module_repo = module_repo
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    @traced("role_registry.create_role")
    async def create_role(
        self,
        name: str,
        description: str | None,
        space: Space | str,
        tenant_id: str | None = None,
        *,
        principal: Principal,
    ) -> Role:
        """Create a role bound to one space (and, for tenant roles, one tenant).

        Raises:
            InvalidRoleSpaceException: If space and tenant disagree, or the
                tenant does not exist or is not active.
            PermissionDeniedException: If the principal may not manage roles
                of that space/tenant.
            ValidationException: If the name is empty or already taken.
        """
        cleaned = _clean_name(name)
        role_space = self._parse_space(space)
        if role_space == Space.SYSTEM and tenant_id is not None:
            raise InvalidRoleSpaceException(
                "System roles must not reference a tenant",
                space=role_space.value,
                tenant_id=tenant_id,
            )
        if role_space == Space.TENANT and not tenant_id:
            raise InvalidRoleSpaceException(
                "Tenant roles must reference a tenant", space=role_space.value
            )
        # Ownership is checked against the role as it would exist.
        provisional: Role = (
            SystemRole(
                id="", name=cleaned, description=description, status=RecordStatus.ACTIVE
            )
            if role_space == Space.SYSTEM
            else TenantRole(
                id="",
                name=cleaned,
                description=description,
                status=RecordStatus.ACTIVE,
                tenant_id=tenant_id,
            )
        )
        check_role_ownership(principal, provisional)

        async with self._uow.atomic("create_role"):
            if tenant_id is not None:
                tenant = await self._tenant_repo.get_by_id(tenant_id)
                if tenant is None or not tenant.is_active:
                    raise InvalidRoleSpaceException(
                        "Tenant roles require an existing, active tenant",
                        space=role_space.value,
                        tenant_id=tenant_id,
                    )
            if await self._role_repo.name_exists(cleaned, tenant_id):
                raise ValidationException(
                    f"Role '{cleaned}' already exists in this space", field="name"
                )
            role = await self._role_repo.create_role(
                name=cleaned,
                description=description,
                space=role_space,
                tenant_id=tenant_id,
            )
        await self._record(
            principal, AuditAction.CREATED, "role", role.id, {"after": _role_summary(role)}
        )
        return role

    async def get_role(self, role_id: str, principal: Principal) -> Role:
        """Return a role visible to the principal.

        Tenant principals see their own tenant's roles and system roles.

        Raises:
            ResourceNotFoundException: If the role does not exist.
            PermissionDeniedException: If the role belongs to another tenant.
        """
        role = await self._load(role_id)
        check_can_read_role(principal, role)
        return role

    async def list_roles(
        self, principal: Principal, page_params: PageParams | None = None
    ) -> Page[Role]:
        """Page through roles visible to the principal.

        Ordered by status, space, name (then id) for stable pagination.
        """
        params = page_params or PageParams()
        page = max(params.page, 1)
        limit = min(max(params.limit or self._default_page_size, 1), self._max_page_size)
        items, total = await self._role_repo.list_roles(
            visible_to_tenant=principal.tenant_id,
            space=params.space,
            include_inactive=params.include_inactive,
            skip=(page - 1) * limit,
            limit=limit,
        )
        return Page(items=tuple(items), total=total, page=page, limit=limit)

    @traced("role_registry.update_role")
    async def update_role(
        self, role_id: str, patch: RoleUpdate, principal: Principal
    ) -> Role:
        """Apply a patch (name, description, status). Space and tenant are immutable.

        Raises:
            ResourceNotFoundException: If the role does not exist.
            PermissionDeniedException: If ownership checks fail.
            InvalidRoleSpaceException: If the patch changes space or tenant.
            ValidationException: If the new name is empty or already taken.
        """
        async with self._uow.atomic("update_role"):
            before = await self._load(role_id)
            check_role_ownership(principal, before)
            if patch.space is not None and patch.space != before.space.value:
                raise InvalidRoleSpaceException(
                    "Role space cannot be changed after creation",
                    space=before.space.value,
                )
            if patch.tenant_id is not None and patch.tenant_id != before.tenant_id:
                raise InvalidRoleSpaceException(
                    "Role tenant cannot be changed after creation",
                    space=before.space.value,
                )
            name = None
            if patch.name is not None:
                name = _clean_name(patch.name)
                if name != before.name and await self._role_repo.name_exists(
                    name, before.tenant_id, exclude_id=role_id
                ):
                    raise ValidationException(
                        f"Role '{name}' already exists in this space", field="name"
                    )
            after = await self._role_repo.update_role(
                role_id,
                name=name,
                description=patch.description,
                status=patch.status,
            )
            if after is None:
                raise ResourceNotFoundException("role", role_id)
        await self._record(
            principal,
            AuditAction.UPDATED,
            "role",
            role_id,
            {"before": _role_summary(before), "after": _role_summary(after)},
        )
        return after

    async def activate_role(self, role_id: str, principal: Principal) -> Role:
        return await self._set_status(role_id, principal, RecordStatus.ACTIVE)

    async def deactivate_role(self, role_id: str, principal: Principal) -> Role:
        """Soft-disable a role: links are kept but grant nothing while inactive."""
        return await self._set_status(role_id, principal, RecordStatus.INACTIVE)

    @traced("role_registry.delete_role")
    async def delete_role(self, role_id: str, principal: Principal) -> None:
        """Delete a role and its permission and user links.

        Raises:
            ResourceNotFoundException: If the role does not exist.
            PermissionDeniedException: If ownership checks fail.
        """
        async with self._uow.atomic("delete_role"):
            role = await self._load(role_id)
            check_role_ownership(principal, role)
            await self._role_repo.delete_role(role_id)
        await self._record(
            principal, AuditAction.DELETED, "role", role_id, {"before": _role_summary(role)}
        )

    async def get_role_permissions(
        self, role_id: str, principal: Principal
    ) -> RoleWithPermissions:
        """Role with its active permission links (same visibility as get_role)."""
        role = await self.get_role(role_id, principal)
        links = await self._role_permission_repo.list_for_role(role_id)
        return RoleWithPermissions(role=role, permissions=tuple(links))

    async def get_permission_matrix(
        self, role_id: str, principal: Principal
    ) -> list[PermissionMatrixRow]:
        """Modules of the role's space x actions, marking which the role holds."""
        role = await self.get_role(role_id, principal)
        links = await self._role_permission_repo.list_for_role(role_id)
        granted = {
            (link.permission.menu_key, link.permission.action)
            for link in links
            if link.permission.status == RecordStatus.ACTIVE
        }
        rows: list[PermissionMatrixRow] = []
        for module in await self._module_repo.list_modules(role.space):
            actions = list(MenuAction.values())
            actions.extend(a for a in module.action_keys if a not in actions)
            rows.append(
                PermissionMatrixRow(
                    menu_key=module.menu_key,
                    display_name=module.display_name,
                    actions={a: (module.menu_key, a) in granted for a in actions},
                )
            )
        return rows

    async def _set_status(
        self, role_id: str, principal: Principal, status: RecordStatus
    ) -> Role:
        async with self._uow.atomic("set_role_status"):
            role = await self._load(role_id)
            check_role_ownership(principal, role)
            updated = await self._role_repo.update_role(role_id, status=status)
            if updated is None:
                raise ResourceNotFoundException("role", role_id)
        if role.status != status:
            action = (
                AuditAction.ACTIVATED
                if status == RecordStatus.ACTIVE
                else AuditAction.DEACTIVATED
            )
            await self._record(principal, action, "role", role_id, None)
        return updated

    async def _load(self, role_id: str) -> Role:
        role = await self._role_repo.get_role(role_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        return role

    @staticmethod
    def _parse_space(space: Space | str) -> Space:
        try:
            return Space(space)
        except ValueError:
            raise InvalidRoleSpaceException(
                f"Unknown role space: {space!r}", space=str(space)
            ) from None
