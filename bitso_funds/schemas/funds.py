"""Pydantic schemas for Bitso withdrawals and fundings."""

import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _parse_amount(value: Any) -> str:
    """Validate a non-negative decimal amount, keeping its original text."""
    text = str(value).strip()
    try:
        amount = Decimal(text)
    except InvalidOperation as e:
        raise ValueError(f"amount must be a decimal string, got {value!r}") from e
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"amount must be a non-negative decimal, got {value!r}")
    return text


class TransferBase(BaseModel):
    """Fields shared by withdrawals and fundings."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    status: str = Field(..., description="pending, complete or failed")
    created_at: datetime.datetime
    currency: str
    method: str
    amount: str = Field(..., description="Decimal string, never converted to float")
    details: dict[str, Any] = Field(default_factory=dict)

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v: Any) -> str:
        return _parse_amount(v)

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime.datetime) -> datetime.datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=datetime.UTC)
        return v

    @field_validator("details", mode="before")
    @classmethod
    def default_details(cls, v: Any) -> Any:
        return {} if v is None else v


class Withdrawal(TransferBase):
    """A withdrawal as returned by /api/v3/withdrawals."""

    wid: str
    asset: str | None = None
    network: str | None = None
    protocol: str | None = None
    origin_id: str | None = Field(None, description="Client-supplied reference ID")

    @property
    def id(self) -> str:
        return self.wid


class Funding(TransferBase):
    """A funding (deposit) as returned by /api/v3/fundings."""

    fid: str

    @property
    def id(self) -> str:
        return self.fid
