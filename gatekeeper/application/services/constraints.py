"""Grant constraints: optional restrictions attached to a role-permission link.

Constraints only ever restrict. A grant without constraints allows; a grant
whose payload fails validation denies.
"""

from __future__ import annotations

import ipaddress
from datetime import tzinfo
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gatekeeper.application.dtos.access import AccessContext, ConstraintDecision
from gatekeeper.domain.exceptions import ValidationException
from gatekeeper.shared.utils.datetime import ensure_utc, utc_now

REASON_NOT_GRANTED = "Permission not found"
REASON_IP = "IP not allowed"
REASON_HOURS = "Outside allowed hours"
REASON_RECORDS = "Record limit exceeded"
REASON_MALFORMED = "Invalid constraint configuration"
REASON_ERROR = "Error checking constraints"


class GrantConstraints(BaseModel):
    """Validated constraint payload stored on a role-permission link."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    allowed_ips: list[str] | None = None
    allowed_hours: list[int] | None = None
    max_records: int | None = Field(default=None, ge=0)

    @field_validator("allowed_ips")
    @classmethod
    def _validate_ips(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return value
        for entry in value:
            ipaddress.ip_network(entry, strict=False)
        return value

    @field_validator("allowed_hours")
    @classmethod
    def _validate_hours(cls, value: list[int] | None) -> list[int] | None:
        if value is None:
            return value
        for hour in value:
            if not 0 <= hour <= 23:
                raise ValueError(f"hour must be within 0-23, got {hour}")
        return value

    def is_empty(self) -> bool:
        return (
            self.allowed_ips is None
            and self.allowed_hours is None
            and self.max_records is None
        )

    def evaluate(self, context: AccessContext, zone: tzinfo) -> ConstraintDecision:
        """Evaluate against the call context. Missing context for a set constraint denies."""
        if self.allowed_ips is not None:
            if context.ip_address is None or not _ip_allowed(
                context.ip_address, self.allowed_ips
            ):
                return ConstraintDecision(False, REASON_IP)
        if self.allowed_hours is not None:
            moment = ensure_utc(context.at) if context.at else utc_now()
            if moment.astimezone(zone).hour not in self.allowed_hours:
                return ConstraintDecision(False, REASON_HOURS)
        if self.max_records is not None and context.record_count is not None:
            if context.record_count > self.max_records:
                return ConstraintDecision(False, REASON_RECORDS)
        return ConstraintDecision(True)


def _ip_allowed(ip_address: str, allowed: list[str]) -> bool:
    try:
        addr = ipaddress.ip_address(ip_address)
    except ValueError:
        return False
    return any(addr in ipaddress.ip_network(entry, strict=False) for entry in allowed)


def parse_constraints(payload: dict[str, Any] | None) -> GrantConstraints | None:
    """Parse a stored payload. Returns None for no constraints.

    Raises:
        pydantic.ValidationError: When the payload is malformed.
    """
    if not payload:
        return None
    parsed = GrantConstraints.model_validate(payload)
    return None if parsed.is_empty() else parsed


def normalize_constraints(payload: dict[str, Any] | None) -> dict[str, Any] | None:
    """Validate a payload supplied on grant and return its stored form.

    Raises:
        ValidationException: When the payload is malformed.
    """
    try:
        parsed = parse_constraints(payload)
    except ValidationError as e:
        raise ValidationException(
            f"Invalid grant constraints: {e.errors()[0]['msg']}", field="constraints"
        ) from e
    if parsed is None:
        return None
    return parsed.model_dump(exclude_none=True)


def evaluate_grant(
    payload: dict[str, Any] | None, context: AccessContext, zone: tzinfo
) -> ConstraintDecision:
    """Evaluate one grant's stored constraints; malformed payloads deny."""
    try:
        parsed = parse_constraints(payload)
    except ValidationError:
        return ConstraintDecision(False, REASON_MALFORMED)
    if parsed is None:
        return ConstraintDecision(True)
    return parsed.evaluate(context, zone)
