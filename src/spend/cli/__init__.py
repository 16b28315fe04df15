"""Spend CLI package.

This package provides the command-line interface for running the API server
and for local utilities such as categorizing a description or claiming a
SimpleFIN setup token.
"""

from .main import app, main

__all__ = ["app", "main"]
