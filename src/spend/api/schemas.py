"""Request and response bodies for the REST API."""

from pydantic import BaseModel

from ..models import Account, Transaction


class ConnectIn(BaseModel):
    setup_token: str | None = None
    public_token: str | None = None


class ExchangeTokenIn(BaseModel):
    public_token: str | None = None


class HealthOut(BaseModel):
    status: str
    provider: str
    env: str


class LinkTokenOut(BaseModel):
    link_token: str


class SuccessOut(BaseModel):
    success: bool = True


class StatusOut(BaseModel):
    connected: bool


class AccountsOut(BaseModel):
    accounts: list[Account]


class TransactionsOut(BaseModel):
    transactions: list[Transaction]


class ErrorOut(BaseModel):
    error: str
