"""Common interface for upstream financial-data providers."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from ..categorization import DEFAULT_RULES, CategoryRule
from ..errors import InvalidInputError
from ..models import Account, Credential, ProviderName, Transaction


class FinancialProvider(ABC):
    """A data aggregator the backend proxies to.

    Implementations turn a one-time token into a long-lived ``Credential`` and
    use that credential to list accounts and transactions in the common shapes.
    Transaction amounts are always reported spend-positive.
    """

    name: ProviderName

    def __init__(self, rules: Sequence[CategoryRule] = DEFAULT_RULES):
        self.rules = rules

    async def create_link_token(self) -> str:
        """Create a short-lived token for the provider's hosted link UI."""
        raise InvalidInputError(f"Link tokens are not supported by the {self.name} provider")

    @abstractmethod
    async def connect(self, token: str) -> Credential:
        """Exchange or claim a one-time token for a long-lived credential."""

    @abstractmethod
    def default_credential(self) -> Credential | None:
        """Return a credential configured directly in the environment, if any."""

    @abstractmethod
    def default_setup_token(self) -> str | None:
        """Return a one-time token configured in the environment, if any."""

    @abstractmethod
    async def get_accounts(self, credential: Credential) -> list[Account]:
        """List the accounts reachable with the credential."""

    @abstractmethod
    async def get_transactions(self, credential: Credential) -> list[Transaction]:
        """List recent transactions across all accounts, unsorted."""

    async def disconnect(self, credential: Credential) -> None:
        """Revoke the credential upstream. Providers without revocation do nothing."""
        return None

    async def aclose(self) -> None:
        """Release network resources held by the provider."""
        return None
