"""Permission catalog: grantable capabilities and menu modules.

Read-mostly. Provisioning (create_permission, create_module, deactivate_permission,
deactivate_module) is restricted to system principals and is not on the
request path.
"""

from __future__ import annotations

from gatekeeper.application.dtos.permission import ModuleResult, PermissionResult
from gatekeeper.application.interfaces.repositories import (
    IModuleRepository,
    IPermissionRepository,
)
from gatekeeper.application.interfaces.services import IAuditHook, IUnitOfWork
from gatekeeper.application.services.base import AuditedService
from gatekeeper.domain.entities import Principal
from gatekeeper.domain.enums import RecordStatus, Space
from gatekeeper.domain.exceptions import (
    PermissionDeniedException,
    ResourceNotFoundException,
    ValidationException,
)
from gatekeeper.domain.value_objects import ActionKey, MenuKey, PermissionKey
from gatekeeper.shared.enums import AuditAction


class PermissionCatalogService(AuditedService):
    """List and look up permissions and modules; provision catalog entries."""

    def __init__(
        self,
        uow: IUnitOfWork,
        permission_repo: IPermissionRepository,
        module_repo: IModuleRepository,
        audit_hook: IAuditHook | None = None,
    ) -> None:
        super().__init__(audit_hook)
        self._uow = uow
        self._permission_repo = permission_repo
        self._module_repo = module_repo

    async def list_permissions(self, space: Space | None = None) -> list[PermissionResult]:
        """Active permissions, optionally filtered by space (ordered by resource, action)."""
        return await self._permission_repo.list_permissions(space)

    async def get_permission_by_key(self, permission_key: str) -> PermissionResult:
        """Return the permission for a flat key.

        Raises:
            ResourceNotFoundException: If no permission has this key.
        """
        permission = await self._permission_repo.get_by_key(permission_key)
        if permission is None:
            raise ResourceNotFoundException("permission", permission_key)
        return permission

    async def list_modules(self, space: Space | None = None) -> list[ModuleResult]:
        """Active modules, optionally filtered by space (ordered by menu_order)."""
        return await self._module_repo.list_modules(space)

    async def create_permission(
        self,
        principal: Principal,
        resource: str,
        action: str,
        space: Space,
        description: str | None = None,
        menu_key: str | None = None,
    ) -> PermissionResult:
        """Add a capability to the catalog. The key is derived as resource:action.

        Raises:
            PermissionDeniedException: If the principal is not system-space.
            ValidationException: If the key is malformed, already exists, or its
                menu action is already provided by another permission.
        """
        try:
            key = PermissionKey(resource=resource, action=action)
            if menu_key is not None:
                MenuKey(menu_key)
        except ValueError as e:
            raise ValidationException(str(e), field="permission_key") from e
        self._require_system(principal, str(key), space, "permission")
        async with self._uow.atomic("create_permission"):
            if await self._permission_repo.get_by_key(str(key)) is not None:
                raise ValidationException(
                    f"Permission '{key}' already exists", field="permission_key"
                )
            effective_menu = menu_key or key.resource
            clash = await self._permission_repo.get_by_menu_action(
                effective_menu, key.action
            )
            if clash is not None:
                raise ValidationException(
                    f"Menu action {effective_menu}.{key.action} is already provided "
                    f"by '{clash.permission_key}'",
                    field="menu_key",
                )
            created = await self._permission_repo.create_permission(
                resource=key.resource,
                action=key.action,
                space=space,
                description=description,
                menu_key=menu_key,
            )
        await self._record(
            principal,
            AuditAction.CREATED,
            "permission",
            created.id,
            {"permission_key": created.permission_key, "space": created.space.value},
        )
        return created

    async def deactivate_permission(
        self, principal: Principal, permission_key: str
    ) -> PermissionResult:
        """Soft-disable a permission; links stay but no longer grant access.

        Raises:
            ResourceNotFoundException: If no permission has this key.
            PermissionDeniedException: If the principal is not system-space.
        """
        existing = await self.get_permission_by_key(permission_key)
        self._require_system(principal, permission_key, existing.space, "permission")
        async with self._uow.atomic("deactivate_permission"):
            updated = await self._permission_repo.set_status(
                permission_key, RecordStatus.INACTIVE
            )
        if updated is None:
            raise ResourceNotFoundException("permission", permission_key)
        await self._record(
            principal,
            AuditAction.DEACTIVATED,
            "permission",
            updated.id,
            {"permission_key": permission_key},
        )
        return updated

    async def create_module(
        self,
        principal: Principal,
        menu_key: str,
        display_name: str,
        space: Space,
        action_keys: list[str] | tuple[str, ...] = ("view",),
        *,
        description: str | None = None,
        icon: str | None = None,
        route_path: str | None = None,
        parent_menu_key: str | None = None,
        menu_order: int = 0,
    ) -> ModuleResult:
        """Add a menu entry to the catalog.

        Raises:
            PermissionDeniedException: If the principal is not system-space.
            ValidationException: If keys are malformed or the menu key exists.
        """
        try:
            MenuKey(menu_key)
            for action_key in action_keys:
                ActionKey(action_key)
        except ValueError as e:
            raise ValidationException(str(e), field="menu_key") from e
        if not display_name or not display_name.strip():
            raise ValidationException("Module display name is required", field="display_name")
        self._require_system(principal, menu_key, space, "module")
        async with self._uow.atomic("create_module"):
            if await self._module_repo.get_by_menu_key(menu_key) is not None:
                raise ValidationException(
                    f"Module '{menu_key}' already exists", field="menu_key"
                )
            created = await self._module_repo.create_module(
                menu_key=menu_key,
                display_name=display_name.strip(),
                space=space,
                action_keys=list(dict.fromkeys(action_keys)),
                description=description,
                icon=icon,
                route_path=route_path,
                parent_menu_key=parent_menu_key,
                menu_order=menu_order,
            )
        await self._record(
            principal,
            AuditAction.CREATED,
            "module",
            created.id,
            {"menu_key": menu_key, "space": space.value},
        )
        return created

    async def deactivate_module(self, principal: Principal, menu_key: str) -> ModuleResult:
        """Hide a menu: menu-form checks for its actions deny; flat-key checks are unaffected."""
        existing = await self._module_repo.get_by_menu_key(menu_key)
        if existing is None:
            raise ResourceNotFoundException("module", menu_key)
        self._require_system(principal, menu_key, existing.space, "module")
        async with self._uow.atomic("deactivate_module"):
            updated = await self._module_repo.set_status(menu_key, RecordStatus.INACTIVE)
        if updated is None:
            raise ResourceNotFoundException("module", menu_key)
        await self._record(
            principal,
            AuditAction.DEACTIVATED,
            "module",
            updated.id,
            {"menu_key": menu_key},
        )
        return updated

    @staticmethod
    def _require_system(
        principal: Principal, name: str, space: Space, target_type: str
    ) -> None:
        if not principal.is_system:
            raise PermissionDeniedException(
                name,
                space.value,
                "only system principals may provision the catalog",
                target_type=target_type,
            )
