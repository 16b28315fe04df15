"""FastAPI application factory for the Spend backend.

The provider, credential store and settings are created once per app and kept
on ``app.state`` for dependency injection. Pass them explicitly to build an
app around test doubles.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import SpendSettings, get_settings
from ..errors import ProviderError, SpendError
from ..providers import FinancialProvider, build_provider
from ..service import SpendService
from ..session import CredentialStore, InMemoryCredentialStore
from .routes import router

logger = logging.getLogger(__name__)


async def _spend_error_handler(request: Request, exc: SpendError) -> JSONResponse:
    if isinstance(exc, ProviderError):
        logger.error(
            f"✗ {request.method} {request.url.path}: {exc.message} "
            f"(upstream status={exc.upstream_status}, detail={exc.detail})"
        )
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} -> 400: invalid request body")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


def create_app(
    settings: SpendSettings | None = None,
    provider: FinancialProvider | None = None,
    store: CredentialStore | None = None,
) -> FastAPI:
    """Build the API application.

    Args:
        settings: Application settings; loaded from the environment when omitted
        provider: Upstream provider; built from settings when omitted
        store: Credential store; a fresh in-memory store when omitted

    Returns:
        FastAPI: The configured application
    """
    settings = settings or get_settings()
    provider = provider or build_provider(settings)
    store = store or InMemoryCredentialStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            f"Spend backend starting: provider={settings.provider}, "
            f"env={settings.environment_label}"
        )
        yield
        await provider.aclose()
        logger.info("Spend backend stopped")

    app = FastAPI(
        title="Spend Backend",
        description="Provider-agnostic proxy for bank accounts and transactions",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(SpendError, _spend_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    app.state.settings = settings
    app.state.service = SpendService(provider, store)

    app.include_router(router)
    return app
