"""User repository. Read methods return UserResult."""

from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.application.dtos.user import UserResult
from gatekeeper.domain.enums import UserStatus
from gatekeeper.infrastructure.persistence.models.user import User
from gatekeeper.infrastructure.persistence.repositories.base import BaseRepository


def _user_to_result(u: User) -> UserResult:
    return UserResult(
        id=u.id, tenant_id=u.tenant_id, email=u.email, status=UserStatus(u.status)
    )


class UserRepository(BaseRepository[User]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_id(self, user_id: str) -> UserResult | None:
        row = await self.get_entity_by_id(user_id)
        return _user_to_result(row) if row else None

    async def create_user(
        self,
        email: str,
        tenant_id: str | None,
        status: UserStatus = UserStatus.ACTIVE,
    ) -> UserResult:
        created = await self.create(
            User(email=email, tenant_id=tenant_id, status=status.value)
        )
        return _user_to_result(created)

    async def set_status(self, user_id: str, status: UserStatus) -> UserResult | None:
        row = await self.get_entity_by_id(user_id)
        if row is None:
            return None
        row.status = status.value
        return _user_to_result(await self.update(row))
