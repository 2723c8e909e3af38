"""Module repository. Read methods return ModuleResult."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.application.dtos.permission import ModuleResult
from gatekeeper.domain.enums import RecordStatus, Space
from gatekeeper.infrastructure.persistence.models.module import Module
from gatekeeper.infrastructure.persistence.repositories.base import BaseRepository


def _module_to_result(m: Module) -> ModuleResult:
    return ModuleResult(
        id=m.id,
        menu_key=m.menu_key,
        display_name=m.display_name,
        description=m.description,
        icon=m.icon,
        route_path=m.route_path,
        parent_menu_key=m.parent_menu_key,
        menu_order=m.menu_order,
        space=Space(m.space),
        action_keys=tuple(m.action_keys or ()),
        status=RecordStatus(m.status),
    )


class ModuleRepository(BaseRepository[Module]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Module)

    async def get_by_menu_key(self, menu_key: str) -> ModuleResult | None:
        result = await self.db.execute(select(Module).where(Module.menu_key == menu_key))
        row = result.scalar_one_or_none()
        return _module_to_result(row) if row else None

    async def list_modules(
        self, space: Space | None = None, *, include_inactive: bool = False
    ) -> list[ModuleResult]:
        q = select(Module)
        if space is not None:
            q = q.where(Module.space == space.value)
        if not include_inactive:
            q = q.where(Module.status == RecordStatus.ACTIVE.value)
        result = await self.db.execute(
            q.order_by(Module.menu_order, Module.display_name)
        )
        return [_module_to_result(m) for m in result.scalars().all()]

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
    ) -> ModuleResult:
        created = await self.create(
            Module(
                menu_key=menu_key,
                display_name=display_name,
                space=space.value,
                action_keys=list(action_keys),
                description=description,
                icon=icon,
                route_path=route_path,
                parent_menu_key=parent_menu_key,
                menu_order=menu_order,
                status=RecordStatus.ACTIVE.value,
            )
        )
        return _module_to_result(created)

    async def set_status(self, menu_key: str, status: RecordStatus) -> ModuleResult | None:
        result = await self.db.execute(select(Module).where(Module.menu_key == menu_key))
        row = result.scalar_one_or_none()
        if row is None:
            return None
        row.status = status.value
        return _module_to_result(await self.update(row))
