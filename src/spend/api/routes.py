"""REST endpoints consumed by the front-end.

All routes live under /api and return JSON. Errors are raised as
``SpendError`` subclasses and rendered as ``{"error": ...}`` by the handlers
registered in ``spend.api.app``.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from ..config import SpendSettings
from ..errors import InvalidInputError
from ..service import SpendService
from .schemas import (
    AccountsOut,
    ConnectIn,
    ErrorOut,
    ExchangeTokenIn,
    HealthOut,
    LinkTokenOut,
    StatusOut,
    SuccessOut,
    TransactionsOut,
)

router = APIRouter(
    prefix="/api",
    responses={400: {"model": ErrorOut}, 500: {"model": ErrorOut}},
)


def get_service(request: Request) -> SpendService:
    return request.app.state.service


def get_app_settings(request: Request) -> SpendSettings:
    return request.app.state.settings


ServiceDep = Annotated[SpendService, Depends(get_service)]
SettingsDep = Annotated[SpendSettings, Depends(get_app_settings)]


@router.get("/health", response_model=HealthOut, operation_id="health")
async def health(settings: SettingsDep) -> HealthOut:
    return HealthOut(
        status="ok", provider=settings.provider, env=settings.environment_label
    )


@router.post(
    "/create-link-token", response_model=LinkTokenOut, operation_id="createLinkToken"
)
async def create_link_token(service: ServiceDep) -> LinkTokenOut:
    """Create a Plaid Link token for the front-end to open Link with."""
    return LinkTokenOut(link_token=await service.create_link_token())


@router.post("/exchange-token", response_model=SuccessOut, operation_id="exchangeToken")
async def exchange_token(
    service: ServiceDep, body: ExchangeTokenIn | None = None
) -> SuccessOut:
    """Exchange the public token returned by Plaid Link for an access token."""
    public_token = body.public_token if body else None
    if not public_token:
        raise InvalidInputError("public_token is required")
    await service.connect(public_token)
    return SuccessOut()


@router.post("/connect", response_model=SuccessOut, operation_id="connect")
async def connect(service: ServiceDep, body: ConnectIn | None = None) -> SuccessOut:
    """Connect with a setup/public token, or with the configured default when omitted."""
    token = None
    if body is not None:
        token = body.setup_token or body.public_token
    await service.connect(token)
    return SuccessOut()


@router.get("/status", response_model=StatusOut, operation_id="status")
async def status(service: ServiceDep) -> StatusOut:
    return StatusOut(connected=service.is_connected())


@router.get("/accounts", response_model=AccountsOut, operation_id="accounts")
async def accounts(service: ServiceDep) -> AccountsOut:
    return AccountsOut(accounts=await service.get_accounts())


@router.get("/transactions", response_model=TransactionsOut, operation_id="transactions")
async def transactions(service: ServiceDep) -> TransactionsOut:
    """Transactions across all accounts, most recent first."""
    return TransactionsOut(transactions=await service.get_transactions())


@router.post("/disconnect", response_model=SuccessOut, operation_id="disconnect")
async def disconnect(service: ServiceDep) -> SuccessOut:
    await service.disconnect()
    return SuccessOut()
