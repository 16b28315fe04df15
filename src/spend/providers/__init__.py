"""Upstream financial-data providers.

Each provider implements ``FinancialProvider`` and normalizes its payloads
into the shapes in ``spend.models``.
"""

from ..categorization import DEFAULT_RULES, load_rules
from ..config import SpendSettings
from .base import FinancialProvider
from .plaid import PlaidProvider
from .simplefin import SimpleFINProvider

__all__ = [
    "FinancialProvider",
    "PlaidProvider",
    "SimpleFINProvider",
    "build_provider",
]


def build_provider(settings: SpendSettings) -> FinancialProvider:
    """Create the provider selected by ``settings.provider``.

    Args:
        settings: Application settings

    Returns:
        FinancialProvider: Configured provider instance

    Raises:
        ValueError: If a configured categories file cannot be loaded
    """
    rules = load_rules(settings.categories_file) if settings.categories_file else DEFAULT_RULES
    timeout = settings.server.http_timeout

    if settings.provider == "simplefin":
        return SimpleFINProvider(settings.simplefin, timeout=timeout, rules=rules)
    return PlaidProvider(settings.plaid, timeout=timeout, rules=rules)
