"""Persistence: engine, session helpers, unit of work, ORM models, repositories."""

from gatekeeper.infrastructure.persistence.database import (
    Base,
    atomic,
    get_db,
    get_db_transactional,
)

__all__ = ["Base", "atomic", "get_db", "get_db_transactional"]
