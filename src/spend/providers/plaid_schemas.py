"""Pydantic schemas for the Plaid API payloads the backend consumes.

Plaid SDK response objects are validated directly (``from_attributes``), and
plain dicts validate the same way, which keeps tests free of SDK models.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        extra="ignore",
        use_enum_values=True,
        str_strip_whitespace=True,
        from_attributes=True,
        populate_by_name=True,
    )


def _enum_to_str(v: Any) -> Any:
    """Accept a Plaid SDK enum (or enum-like model) or string and return a string."""
    if v is None:
        return None
    if isinstance(v, Enum):
        return v.value
    value = getattr(v, "value", None)
    if isinstance(value, str):
        return value
    return str(v)


class BalanceSchema(BaseSchema):
    """Schema for account balance information."""

    available: float | None = Field(None, description="Available balance")
    current: float | None = Field(None, description="Current balance")
    limit: float | None = Field(None, description="Credit limit or overdraft limit")
    iso_currency_code: str | None = Field(None, max_length=3)


class AccountSchema(BaseSchema):
    """Schema for Plaid account data."""

    account_id: str = Field(..., description="Plaid account ID")
    balances: BalanceSchema
    mask: str | None = Field(None, max_length=4)
    name: str = Field(..., description="Account name")
    official_name: str | None = None
    subtype: str | None = None
    type: str

    @field_validator("type", "subtype", mode="before")
    @classmethod
    def coerce_account_enums(cls, v: Any) -> Any:
        """Accept Plaid SDK enum or string and convert to string."""
        return _enum_to_str(v)


class TransactionSchema(BaseSchema):
    """Schema for Plaid transaction data."""

    transaction_id: str = Field(..., description="Plaid transaction ID")
    account_id: str = Field(..., description="Associated account ID")
    amount: Decimal = Field(..., description="Transaction amount, positive for spending")
    iso_currency_code: str | None = Field(None, max_length=3)

    transaction_date: date = Field(..., description="Transaction date", alias="date")

    name: str | None = None
    merchant_name: str | None = None

    category: list[str] = Field(default_factory=list)

    pending: bool = False

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, v: Any) -> Any:
        """Ensure category is a list of strings; Plaid may return None."""
        if v is None:
            return []
        if isinstance(v, list):
            items = cast(list[object], v)
            return [str(x) for x in items]
        return [str(v)]
