"""SimpleFIN setup token commands for the Spend CLI.

Claiming from the command line lets an operator store the resulting access
URL in SIMPLEFIN_ACCESS_URL, so the server keeps its connection across restarts.
"""

import asyncio
import logging

import typer

from ...config import SimpleFINConfig
from ...errors import SpendError
from ...providers.simplefin import SimpleFINProvider, decode_setup_token

app = typer.Typer(help="SimpleFIN setup token utilities")
logger = logging.getLogger(__name__)


@app.command("decode-token")
def decode_token(
    setup_token: str = typer.Argument(..., help="Base64 setup token"),
) -> None:
    """Print the claim URL a setup token decodes to, without claiming it."""
    try:
        typer.echo(decode_setup_token(setup_token))
    except SpendError as e:
        logger.error(f"❌ {e.message}")
        raise typer.Exit(1) from e


@app.command("claim")
def claim(
    setup_token: str = typer.Argument(..., help="Base64 setup token"),
    timeout: float = typer.Option(30.0, "--timeout", help="Request timeout in seconds"),
) -> None:
    """Claim a setup token and print the permanent access URL.

    A setup token can only be claimed once. Store the printed URL as
    SIMPLEFIN_ACCESS_URL.
    """

    async def _claim() -> str:
        provider = SimpleFINProvider(SimpleFINConfig(), timeout=timeout)
        try:
            return await provider.claim(setup_token)
        finally:
            await provider.aclose()

    try:
        access_url = asyncio.run(_claim())
    except SpendError as e:
        detail = getattr(e, "detail", None)
        logger.error(f"❌ {e.message}" + (f" ({detail})" if detail else ""))
        raise typer.Exit(1) from e

    typer.echo(access_url)
