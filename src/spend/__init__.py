"""Spend: backend proxy for personal finance front-ends.

This package exposes a small REST API in front of a financial-data aggregator
and reshapes its responses into one provider-agnostic format:
- Plaid (link token + public token exchange)
- SimpleFIN (setup token claim + access URL)
- Keyword-based transaction categorization
- Typer CLI for serving the API and local utilities
"""

__version__ = "0.1.0"
