"""SQLAlchemy unit of work (implements IUnitOfWork)."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeeper.domain.exceptions import StorageFailureException
from gatekeeper.infrastructure.persistence.database import atomic
from gatekeeper.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class SqlAlchemyUnitOfWork:
    """Wraps the caller's session; each atomic() block is one transaction or savepoint."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @asynccontextmanager
    async def atomic(self, operation: str = "write") -> AsyncIterator[AsyncSession]:
        """All-or-nothing block. Storage errors surface as StorageFailureException."""
        try:
            async with atomic(self.session) as session:
                yield session
        except SQLAlchemyError as e:
            logger.error("Storage failure during %s: %s", operation, e, exc_info=True)
            raise StorageFailureException(operation, type(e).__name__) from e
