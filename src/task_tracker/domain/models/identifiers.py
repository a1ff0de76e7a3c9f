"""Validated value types for ledger identifiers and amounts.

Administrative ledger calls take role ids, interface ids, quorum sizes and
token amounts. Each gets its own type so a quorum can never be passed where a
role id is expected, and malformed input is rejected before it reaches the
ledger.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.task_tracker.domain.exceptions import InvalidValueError

UINT256_MAX = 2**256 - 1


class _LedgerValue(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    @classmethod
    def of(cls, raw: Any):
        if isinstance(raw, cls):
            return raw
        try:
            return cls(value=raw)
        except ValidationError as exc:
            raise InvalidValueError(cls.__name__, raw, exc.errors()[0]["msg"]) from exc

    @field_validator("value", check_fields=False)
    @classmethod
    def fits_uint256(cls, value: Any) -> Any:
        if isinstance(value, int) and value > UINT256_MAX:
            raise ValueError("does not fit in 256 bits")
        return value

    def __str__(self) -> str:
        return str(self.value)


class RoleId(_LedgerValue):
    value: int = Field(ge=0, description="Role id on the ledger.")

    def __int__(self) -> int:
        return self.value


class InterfaceId(_LedgerValue):
    value: str = Field(
        pattern=r"^0x[0-9a-fA-F]{8}$", description="Four-byte interface selector as hex."
    )


class QuorumAmount(_LedgerValue):
    value: int = Field(ge=1, description="Minimum number of approvals.")

    def __int__(self) -> int:
        return self.value


class TokenAmount(_LedgerValue):
    value: int = Field(gt=0, description="Amount in the token's smallest unit.")

    def __int__(self) -> int:
        return self.value


class Identity(_LedgerValue):
    value: str = Field(pattern=r"^0x[0-9a-fA-F]{40}$", description="Account address.")
