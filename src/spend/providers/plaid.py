"""Plaid provider: link token creation, public token exchange and data fetches.

Plaid's amount convention is already spend-positive (debits positive, credits
negative), so amounts pass through unchanged.
"""

import asyncio
import json
import logging
import time
from collections.abc import Callable, Sequence
from datetime import date, timedelta
from typing import Any

import urllib3
from plaid.api import plaid_api
from plaid.api_client import ApiClient
from plaid.configuration import Configuration
from plaid.exceptions import ApiException
from plaid.model.accounts_get_request import AccountsGetRequest
from plaid.model.country_code import CountryCode
from plaid.model.institutions_get_by_id_request import InstitutionsGetByIdRequest
from plaid.model.item_public_token_exchange_request import (
    ItemPublicTokenExchangeRequest,
)
from plaid.model.item_remove_request import ItemRemoveRequest
from plaid.model.link_token_create_request import LinkTokenCreateRequest
from plaid.model.link_token_create_request_user import LinkTokenCreateRequestUser
from plaid.model.products import Products
from plaid.model.transactions_get_request import TransactionsGetRequest
from plaid.model.transactions_get_request_options import TransactionsGetRequestOptions
from pydantic import ValidationError

from ..categorization import DEFAULT_RULES, CategoryRule, categorize
from ..config import PlaidConfig
from ..errors import InvalidInputError, ProviderError
from ..models import Account, Balance, Credential, Transaction
from .base import FinancialProvider
from .plaid_schemas import AccountSchema, TransactionSchema

logger = logging.getLogger(__name__)

PLAID_HOSTS = {
    "sandbox": "https://sandbox.plaid.com",
    "development": "https://development.plaid.com",
    "production": "https://production.plaid.com",
}


def _describe_api_error(exc: ApiException) -> str:
    """Pull Plaid's error_code/error_message out of an ApiException body."""
    body = getattr(exc, "body", None)
    if isinstance(body, (str, bytes)):
        try:
            details = json.loads(body)
        except ValueError:
            details = None
        if isinstance(details, dict):
            code = details.get("error_code", "UNKNOWN")
            message = details.get("error_message", "")
            return f"{code}: {message}"
    return f"HTTP {getattr(exc, 'status', '?')}: {getattr(exc, 'reason', exc)}"


class PlaidProvider(FinancialProvider):
    """Credential exchange flow backed by the Plaid Python SDK."""

    name = "plaid"

    def __init__(
        self,
        config: PlaidConfig,
        timeout: float = 30.0,
        rules: Sequence[CategoryRule] = DEFAULT_RULES,
        client: Any | None = None,
    ):
        """Initialize the Plaid provider.

        Args:
            config: Plaid credentials and fetch options
            timeout: Per-request timeout in seconds passed to the SDK
            rules: Category rules for transactions Plaid leaves uncategorized
            client: Preconfigured PlaidApi client; built from config when omitted
        """
        super().__init__(rules)
        self.config = config
        self.timeout = timeout

        if client is None:
            configuration = Configuration(
                host=PLAID_HOSTS[config.environment],
                api_key={
                    "clientId": config.client_id,
                    "secret": config.secret,
                },
            )
            # Type as Any to avoid pyright partial-unknowns from the SDK stubs
            client = plaid_api.PlaidApi(ApiClient(configuration))
        self.client: Any = client

        logger.info(f"Initialized Plaid provider for {config.environment} environment")

    async def _call(
        self, operation: Callable[..., Any], request: Any, failure_message: str
    ) -> Any:
        """Run a blocking SDK call off the event loop and map its failures.

        Raises:
            ProviderError: On any Plaid API or transport error
        """
        try:
            return await asyncio.to_thread(
                operation, request, _request_timeout=self.timeout
            )
        except ApiException as e:
            raise ProviderError(
                failure_message,
                detail=_describe_api_error(e),
                upstream_status=getattr(e, "status", None),
            ) from e
        except urllib3.exceptions.HTTPError as e:
            raise ProviderError(failure_message, detail=str(e)) from e

    async def create_link_token(self) -> str:
        request = LinkTokenCreateRequest(
            user=LinkTokenCreateRequestUser(
                client_user_id=f"spend-user-{int(time.time() * 1000)}"
            ),
            client_name=self.config.client_name,
            products=[Products("transactions")],
            country_codes=[CountryCode(c) for c in self.config.country_codes],
            language="en",
        )
        response = await self._call(
            self.client.link_token_create, request, "Failed to create link token"
        )
        link_token = getattr(response, "link_token", None)
        if not isinstance(link_token, str) or not link_token:
            raise ProviderError(
                "Failed to create link token", detail="Response had no link_token"
            )

        logger.info("✓ Link token created")
        return link_token

    async def connect(self, token: str) -> Credential:
        """Exchange a Link public token for an access token."""
        if not token:
            raise InvalidInputError("public_token is required")

        request = ItemPublicTokenExchangeRequest(public_token=token)
        response = await self._call(
            self.client.item_public_token_exchange, request, "Failed to exchange token"
        )
        access_token = getattr(response, "access_token", None)
        if not isinstance(access_token, str) or not access_token:
            raise ProviderError(
                "Failed to exchange token", detail="Response had no access_token"
            )

        logger.info("✓ Account connected successfully")
        return Credential(
            provider="plaid",
            value=access_token,
            item_id=getattr(response, "item_id", None),
        )

    def default_credential(self) -> Credential | None:
        if self.config.access_token:
            return Credential(provider="plaid", value=self.config.access_token)
        return None

    def default_setup_token(self) -> str | None:
        # Public tokens are single-use and short-lived, so none is ever configured
        return None

    async def _institution_name(self, institution_id: str | None) -> str | None:
        """Resolve an institution id to its display name, falling back to the id."""
        if not institution_id:
            return None

        request = InstitutionsGetByIdRequest(
            institution_id=institution_id,
            country_codes=[CountryCode(c) for c in self.config.country_codes],
        )
        try:
            response = await self._call(
                self.client.institutions_get_by_id,
                request,
                "Failed to fetch institution",
            )
        except ProviderError as e:
            logger.warning(f"Could not resolve institution {institution_id}: {e.detail}")
            return institution_id

        name = getattr(getattr(response, "institution", None), "name", None)
        return name if isinstance(name, str) and name else institution_id

    async def get_accounts(self, credential: Credential) -> list[Account]:
        request = AccountsGetRequest(access_token=credential.value)
        response = await self._call(
            self.client.accounts_get, request, "Failed to fetch accounts"
        )

        try:
            schemas = [
                AccountSchema.model_validate(acct)
                for acct in getattr(response, "accounts", [])
            ]
        except ValidationError as e:
            raise ProviderError(
                "Failed to fetch accounts", detail=f"Malformed response: {e}"
            ) from e

        institution_id = getattr(getattr(response, "item", None), "institution_id", None)
        institution = await self._institution_name(institution_id)

        accounts: list[Account] = []
        for schema in schemas:
            accounts.append(
                Account(
                    id=schema.account_id,
                    name=schema.name,
                    mask=schema.mask,
                    balance=Balance(
                        current=schema.balances.current,
                        available=schema.balances.available,
                    ),
                    type=schema.type,
                    institution=institution,
                )
            )

        logger.info(f"✓ Fetched {len(accounts)} accounts")
        return accounts

    def _normalize_transaction(self, schema: TransactionSchema) -> Transaction:
        name = schema.name or schema.merchant_name or ""
        category = schema.category or categorize(
            schema.merchant_name or schema.name, self.rules
        )
        return Transaction(
            id=schema.transaction_id,
            account_id=schema.account_id,
            name=name,
            merchant_name=schema.merchant_name,
            amount=float(schema.amount),
            transaction_date=schema.transaction_date,
            category=category,
            pending=schema.pending,
        )

    async def get_transactions(self, credential: Credential) -> list[Transaction]:
        end_date = date.today()
        start_date = end_date - timedelta(days=self.config.days_lookback)

        transactions: list[Transaction] = []
        offset = 0

        while True:
            request = TransactionsGetRequest(
                access_token=credential.value,
                start_date=start_date,
                end_date=end_date,
                options=TransactionsGetRequestOptions(
                    count=self.config.batch_size, offset=offset
                ),
            )
            response = await self._call(
                self.client.transactions_get, request, "Failed to fetch transactions"
            )

            try:
                page = [
                    TransactionSchema.model_validate(tx)
                    for tx in getattr(response, "transactions", [])
                ]
            except ValidationError as e:
                raise ProviderError(
                    "Failed to fetch transactions", detail=f"Malformed response: {e}"
                ) from e
            transactions.extend(self._normalize_transaction(tx) for tx in page)

            total = getattr(response, "total_transactions", 0)
            offset += self.config.batch_size
            if offset >= total or not page:
                break

        logger.info(f"✓ Fetched {len(transactions)} transactions")
        return transactions

    async def disconnect(self, credential: Credential) -> None:
        request = ItemRemoveRequest(access_token=credential.value)
        await self._call(self.client.item_remove, request, "Failed to disconnect")
        logger.info("✓ Plaid item removed")
