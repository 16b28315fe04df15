"""HTTP API for the Spend backend."""

from .app import create_app

__all__ = ["create_app"]
