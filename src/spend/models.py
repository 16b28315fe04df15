"""Provider-agnostic response shapes returned by the Spend API.

Providers normalize their native payloads into these models. Field names
serialize in camelCase (``accountId``, ``merchantName``) to match what the
front-end consumes.
"""

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ProviderName = Literal["plaid", "simplefin"]


class BaseShape(BaseModel):
    """Base model for API response shapes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Balance(BaseShape):
    """Current and available balance of an account."""

    current: float | None = None
    available: float | None = None


class Account(BaseShape):
    """A single bank or card account."""

    id: str
    name: str
    mask: str | None = None
    balance: Balance = Field(default_factory=Balance)
    type: str = "other"
    institution: str | None = None


class Transaction(BaseShape):
    """A single transaction; spending is positive, money in is negative."""

    id: str
    account_id: str
    name: str
    merchant_name: str | None = None
    amount: float
    transaction_date: date = Field(..., alias="date")
    category: list[str] = Field(default_factory=list)
    pending: bool = False


class Credential(BaseModel):
    """Long-lived provider credential held for a session.

    ``value`` is a Plaid access token or a SimpleFIN access URL with embedded
    Basic-Auth credentials.
    """

    model_config = ConfigDict(frozen=True)

    provider: ProviderName
    value: str = Field(..., min_length=1, repr=False)
    item_id: str | None = None


def sort_transactions(transactions: list[Transaction]) -> list[Transaction]:
    """Sort transactions by date, most recent first.

    Transactions sharing a date have no defined relative order.
    """
    return sorted(transactions, key=lambda t: t.transaction_date, reverse=True)
