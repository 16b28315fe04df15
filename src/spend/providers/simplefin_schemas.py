"""Pydantic schemas for the SimpleFIN Bridge ``/accounts`` response.

SimpleFIN sends amounts and balances as decimal strings, timestamps as Unix
epoch seconds, and uses hyphenated keys (``available-balance``).
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        extra="ignore",
        str_strip_whitespace=True,
        populate_by_name=True,
    )


class OrganizationSchema(BaseSchema):
    """Institution that holds an account."""

    domain: str | None = None
    name: str | None = None
    sfin_url: str | None = Field(None, alias="sfin-url")


class SimpleFINTransactionSchema(BaseSchema):
    """A transaction as SimpleFIN reports it; debits are negative."""

    id: str
    posted: int = Field(0, description="Posting time; 0 while pending")
    amount: Decimal
    description: str = ""
    payee: str | None = None
    memo: str | None = None
    transacted_at: int | None = None
    pending: bool = False


class SimpleFINAccountSchema(BaseSchema):
    """An account with its balances and recent transactions."""

    org: OrganizationSchema = Field(default_factory=OrganizationSchema)
    id: str
    name: str
    currency: str = "USD"
    balance: Decimal
    available_balance: Decimal | None = Field(None, alias="available-balance")
    balance_date: int | None = Field(None, alias="balance-date")
    transactions: list[SimpleFINTransactionSchema] = Field(default_factory=list)


class AccountSetSchema(BaseSchema):
    """Top-level ``/accounts`` response."""

    errors: list[str] = Field(default_factory=list)
    accounts: list[SimpleFINAccountSchema] = Field(default_factory=list)
