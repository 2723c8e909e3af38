"""Tests for the Ok/Err result type and capture()."""

import pytest

from gatekeeper.application.result import Err, Ok, capture
from gatekeeper.domain.exceptions import (
    PermissionDeniedException,
    SecurityViolationException,
)


async def _returns(value: int) -> int:
    return value


async def _raises_domain() -> None:
    raise SecurityViolationException("r1", "system", "users:create", "tenant")


async def _raises_other() -> None:
    raise RuntimeError("boom")


async def test_capture_wraps_value_in_ok() -> None:
    result = await capture(_returns(7))
    assert isinstance(result, Ok)
    assert result.is_ok is True
    assert result.unwrap() == 7


async def test_capture_wraps_domain_exception_in_err() -> None:
    result = await capture(_raises_domain())
    assert isinstance(result, Err)
    assert result.is_ok is False
    assert result.error_code == "SECURITY_VIOLATION"
    with pytest.raises(SecurityViolationException):
        result.unwrap()


async def test_capture_propagates_non_domain_exceptions() -> None:
    with pytest.raises(RuntimeError):
        await capture(_raises_other())


def test_err_supports_structural_matching() -> None:
    result = Err(PermissionDeniedException("r", "tenant", "no"))
    match result:
        case Err(error=SecurityViolationException()):
            matched = "violation"
        case Err(error=PermissionDeniedException()):
            matched = "denied"
        case _:
            matched = "other"
    assert matched == "denied"
