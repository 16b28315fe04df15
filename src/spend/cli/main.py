"""Main CLI application for the Spend backend."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from ..categorization import DEFAULT_RULES, categorize, load_rules
from ..logging import setup_logging
from .commands import simplefin

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="spend",
    help="Spend: provider-agnostic backend for bank accounts and transactions",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose debug logging",
        ),
    ] = False,
) -> None:
    """Global options for the Spend CLI."""
    setup_logging(cli_mode=True, verbose=verbose)


@app.command("serve")
def serve(
    host: Annotated[
        str | None, typer.Option("--host", help="Interface to bind (default from settings)")
    ] = None,
    port: Annotated[
        int | None, typer.Option("--port", "-p", help="Port to listen on (default from settings)")
    ] = None,
    reload: Annotated[
        bool, typer.Option("--reload", help="Restart on code changes (development)")
    ] = False,
) -> None:
    """Run the REST API server.

    Provider credentials come from the environment or a .env file:
      PLAID_CLIENT_ID / PLAID_SECRET / PLAID_ENV for Plaid,
      SPEND_PROVIDER=simplefin with SIMPLEFIN_SETUP_TOKEN or SIMPLEFIN_ACCESS_URL for SimpleFIN.
    """
    import uvicorn

    from ..config import get_settings

    try:
        settings = get_settings()
    except ValueError as e:
        logger.error(f"❌ {e}")
        logger.info("Set PLAID_CLIENT_ID and PLAID_SECRET, or SPEND_PROVIDER=simplefin")
        raise typer.Exit(1) from e

    setup_logging(settings.logging, force=True)

    bind_host = host or settings.server.host
    bind_port = port or settings.server.port

    logger.info("Spend backend server")
    logger.info(f"  Provider: {settings.provider} ({settings.environment_label})")
    logger.info(f"  Listening on http://{bind_host}:{bind_port}")

    uvicorn.run(
        "spend.api.app:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_config=None,
    )


@app.command("categorize")
def categorize_command(
    description: Annotated[str, typer.Argument(help="Transaction description")],
    categories_file: Annotated[
        str | None,
        typer.Option("--categories-file", "-c", help="YAML file with custom rules"),
    ] = None,
) -> None:
    """Print the category a description would be assigned."""
    try:
        rules = load_rules(Path(categories_file)) if categories_file else DEFAULT_RULES
    except ValueError as e:
        logger.error(f"❌ {e}")
        raise typer.Exit(1) from e

    typer.echo(", ".join(categorize(description, rules)))


app.add_typer(simplefin.app, name="simplefin", help="SimpleFIN setup token utilities")


def main() -> None:
    """Entry point for the Spend CLI application."""
    app()


if __name__ == "__main__":
    main()
