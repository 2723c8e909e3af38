"""Typed success/error result returned by the external facade.

Callers match on the error class rather than on message text:

    match await access.grant_permission(role_id, key, principal):
        case Ok():
            ...
        case Err(error=SecurityViolationException()):
            ...
        case Err(error=PermissionDeniedException() | ResourceNotFoundException()):
            ...
"""

from __future__ import annotations

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar, Union

from gatekeeper.domain.exceptions import GatekeeperException

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: GatekeeperException

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def error_code(self) -> str:
        return self.error.error_code

    def unwrap(self) -> None:
        """Re-raise the wrapped domain exception."""
        raise self.error


Result: TypeAlias = Union[Ok[T], Err]


async def capture(operation: Awaitable[T]) -> Result[T]:
    """Await an engine operation, turning domain exceptions into Err.

    Non-domain exceptions propagate unchanged.
    """
    try:
        return Ok(await operation)
    except GatekeeperException as e:
        return Err(e)
