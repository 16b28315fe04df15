"""Connection lifecycle and data retrieval for one session.

``SpendService`` ties a provider to a credential store. Read operations call
``ensure_connected()`` first, which auto-connects from an environment-configured
default when no credential is held.

Concurrent auto-connects may race to claim the same setup token. Only one
claim can succeed upstream; the losers log the failure, re-read the store and
use whatever credential the winner stored. A failed connect never writes.

An explicit disconnect turns auto-connect off until the next explicit
connect. A configured Plaid access token is revoked by the disconnect, so
reusing it would only fail.
"""

import logging

from .errors import InvalidInputError, NotConnectedError, ProviderError
from .models import Account, Credential, Transaction, sort_transactions
from .providers.base import FinancialProvider
from .session import DEFAULT_SESSION_ID, CredentialStore

logger = logging.getLogger(__name__)


class SpendService:
    """Operations exposed by the REST API, independent of HTTP."""

    def __init__(
        self,
        provider: FinancialProvider,
        store: CredentialStore,
        session_id: str = DEFAULT_SESSION_ID,
    ):
        self.provider = provider
        self.store = store
        self.session_id = session_id
        self._auto_connect = True

    def is_connected(self) -> bool:
        return self.store.has(self.session_id)

    async def create_link_token(self) -> str:
        return await self.provider.create_link_token()

    async def connect(self, token: str | None = None) -> Credential:
        """Connect with an explicit token or the configured default.

        Without a token the configured credential is preferred over the
        configured setup token, which may already have been claimed.

        Args:
            token: Public token (Plaid) or setup token (SimpleFIN)

        Returns:
            Credential: The stored credential

        Raises:
            InvalidInputError: If no token was given and no default is configured
            ProviderError: If the provider rejects the token
        """
        if token:
            credential = await self.provider.connect(token)
        elif default := self.provider.default_credential():
            credential = default
        elif setup_token := self.provider.default_setup_token():
            credential = await self.provider.connect(setup_token)
        else:
            raise InvalidInputError("setup_token is required")

        self.store.set(credential, self.session_id)
        self._auto_connect = True
        return credential

    async def ensure_connected(self) -> Credential:
        """Return the held credential, auto-connecting from defaults if possible.

        Raises:
            NotConnectedError: If no credential is held and none can be obtained
        """
        credential = self.store.get(self.session_id)
        if credential is not None:
            return credential
        if not self._auto_connect:
            raise NotConnectedError()

        default = self.provider.default_credential()
        if default is not None:
            logger.info(f"Auto-connecting with configured {self.provider.name} credential")
            self.store.set(default, self.session_id)
            return default

        setup_token = self.provider.default_setup_token()
        if not setup_token:
            raise NotConnectedError()

        logger.info(f"Auto-connecting with configured {self.provider.name} setup token")
        try:
            credential = await self.provider.connect(setup_token)
        except (ProviderError, InvalidInputError) as e:
            detail = getattr(e, "detail", None) or e.message
            logger.warning(f"Auto-connect failed: {detail}")
            # A concurrent request may have claimed the token first
            credential = self.store.get(self.session_id)
            if credential is None:
                raise NotConnectedError() from e
            return credential

        self.store.set(credential, self.session_id)
        return credential

    async def get_accounts(self) -> list[Account]:
        credential = await self.ensure_connected()
        return await self.provider.get_accounts(credential)

    async def get_transactions(self) -> list[Transaction]:
        """Return transactions across all accounts, most recent first."""
        credential = await self.ensure_connected()
        transactions = await self.provider.get_transactions(credential)
        return sort_transactions(transactions)

    async def disconnect(self) -> None:
        """Forget the held credential, revoking it upstream where supported.

        The local credential is cleared even when upstream revocation fails.

        Raises:
            NotConnectedError: If no credential is held
        """
        credential = self.store.get(self.session_id)
        if credential is None:
            raise NotConnectedError()

        try:
            await self.provider.disconnect(credential)
        except ProviderError as e:
            logger.warning(f"Upstream disconnect failed, clearing credential anyway: {e.detail}")
        finally:
            self.store.clear(self.session_id)
            self._auto_connect = False

        logger.info("✓ Account disconnected")
