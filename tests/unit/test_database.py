"""Tests for lazy session helpers."""

import pytest

from gatekeeper.core.config import get_settings
from gatekeeper.domain.exceptions import SqlNotConfiguredException
from gatekeeper.infrastructure.persistence import database


@pytest.fixture
def unconfigured(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setattr(database, "AsyncSessionLocal", None)
    monkeypatch.setattr(database, "engine", None)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


async def test_get_db_without_database_url_raises(unconfigured) -> None:
    with pytest.raises(SqlNotConfiguredException):
        async for _ in database.get_db():
            pass


async def test_get_db_transactional_without_database_url_raises(unconfigured) -> None:
    with pytest.raises(SqlNotConfiguredException):
        async for _ in database.get_db_transactional():
            pass


def test_engine_not_created_without_database_url(unconfigured) -> None:
    database._ensure_engine()
    assert database.AsyncSessionLocal is None
    assert database.engine is None
