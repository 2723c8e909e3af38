"""Pytest configuration and fixtures for gatekeeper.

DB-dependent fixtures run against in-memory SQLite (aiosqlite) with the
schema created from the ORM metadata. Each test gets a fresh database.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

import gatekeeper.infrastructure.persistence.models  # noqa: F401 (registers tables)
from gatekeeper.application.dtos.permission import PermissionResult
from gatekeeper.application.dtos.user import TenantResult, UserResult
from gatekeeper.application.services import AccessControl
from gatekeeper.core.config import Settings
from gatekeeper.domain.enums import Space, TenantStatus, UserStatus
from gatekeeper.infrastructure.composition import build_access_control
from gatekeeper.infrastructure.persistence.database import Base
from gatekeeper.infrastructure.persistence.repositories import (
    PermissionRepository,
    TenantRepository,
    UserRepository,
)


@dataclass
class RecordingAuditHook:
    """In-memory audit hook: keeps every recorded event for assertions."""

    events: list[dict[str, Any]] = field(default_factory=list)

    async def record(
        self,
        actor_id: str | None,
        tenant_id: str | None,
        action: str,
        entity_type: str,
        entity_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.events.append(
            {
                "actor_id": actor_id,
                "tenant_id": tenant_id,
                "action": action,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "details": details,
            }
        )

    def actions(self) -> list[str]:
        return [e["action"] for e in self.events]


def _sqlite_engine(url: str, **kwargs: Any) -> AsyncEngine:
    """SQLite engine with foreign keys and SAVEPOINT support."""
    eng = create_async_engine(url, **kwargs)

    @event.listens_for(eng.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, _connection_record: Any) -> None:
        # Let SQLAlchemy emit BEGIN itself so nested transactions map to SAVEPOINTs.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(eng.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")

    return eng


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite engine; one connection shared by every session."""
    eng = _sqlite_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
async def file_engine(tmp_path) -> AsyncIterator[AsyncEngine]:
    """File-backed SQLite engine: sessions use separate connections, so only
    committed work is visible across them."""
    eng = _sqlite_engine(f"sqlite+aiosqlite:///{tmp_path / 'gatekeeper.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def file_sessions(file_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=file_engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Session for repository/integration tests. Discarded with the database."""
    factory = async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def audit_hook() -> RecordingAuditHook:
    return RecordingAuditHook()


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="", default_page_size=20, max_page_size=100)


@pytest.fixture
def access(
    db_session: AsyncSession, audit_hook: RecordingAuditHook, settings: Settings
) -> AccessControl:
    """Facade wired to the test session and the recording audit hook."""
    return build_access_control(db_session, audit_hook=audit_hook, settings=settings)


@pytest.fixture
def make_tenant(db_session: AsyncSession) -> Callable[..., Awaitable[TenantResult]]:
    repo = TenantRepository(db_session)

    async def _make(
        code: str, status: TenantStatus = TenantStatus.ACTIVE
    ) -> TenantResult:
        return await repo.create_tenant(code=code, name=f"Tenant {code}", status=status)

    return _make


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[UserResult]]:
    repo = UserRepository(db_session)

    async def _make(
        email: str,
        tenant_id: str | None = None,
        status: UserStatus = UserStatus.ACTIVE,
    ) -> UserResult:
        return await repo.create_user(email=email, tenant_id=tenant_id, status=status)

    return _make


@pytest.fixture
def make_permission(
    db_session: AsyncSession,
) -> Callable[..., Awaitable[PermissionResult]]:
    repo = PermissionRepository(db_session)

    async def _make(
        key: str, space: Space, menu_key: str | None = None
    ) -> PermissionResult:
        resource, action = key.split(":", 1)
        return await repo.create_permission(
            resource=resource,
            action=action,
            space=space,
            description=None,
            menu_key=menu_key,
        )

    return _make
