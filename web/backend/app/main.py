"""FastAPI application for the Nebula package marketplace.

Provides REST API endpoints wrapping the ``nebula`` package for:
- Catalog listing and package lookup (public)
- Package creation and asset upload (pre-shared key, feature flag)
- Static delivery of package assets under ``/packages/``

Run with ``nebula serve`` or
``uvicorn --factory web.backend.app.main:create_app``.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from nebula import __version__
from nebula.catalog.assets import AssetDirectoryManager
from nebula.catalog.gateway import MutationGateway
from nebula.catalog.query import CatalogQuery
from nebula.catalog.seed import load_seed_file, seed_catalog
from nebula.catalog.store import CatalogStore
from nebula.config import NebulaConfig, load_config
from nebula.errors import MarketplaceError
from web.backend.app.routers import catalog, marketplace

logger = logging.getLogger(__name__)


def _message_key(request: Request) -> str:
    """Write endpoints report ``status``; read endpoints report ``error``."""
    return "status" if request.method == "POST" else "error"


def register_error_handlers(app: FastAPI) -> None:
    """Convert every handler-level fault into a short, non-leaking message."""

    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(request: Request, exc: MarketplaceError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log("%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(
            status_code=exc.status_code, content={_message_key(request): exc.message}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        fields = ", ".join(
            ".".join(str(loc) for loc in err["loc"] if loc != "body") or "body"
            for err in exc.errors()
        )
        logger.warning("Invalid request on %s %s: %s", request.method, request.url.path, fields)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={_message_key(request): f"Invalid request: {fields}"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={_message_key(request): "An unexpected error occurred"},
        )


def create_app(config: Optional[NebulaConfig] = None) -> FastAPI:
    """Build the application around *config* (loaded from disk if omitted)."""
    config = config or load_config()

    store = CatalogStore(config.db.path)
    store.initialize()
    assets = AssetDirectoryManager(config.server.assets_dir)
    assets.initialize()
    if config.db.seed_file:
        seed_catalog(store, assets, load_seed_file(config.db.seed_file))

    app = FastAPI(
        title="Nebula Marketplace API",
        description=(
            "Catalog of installable themes and plugins, with gated package "
            "creation and asset upload."
        ),
        version=__version__,
    )
    app.state.config = config
    app.state.query = CatalogQuery(store)
    app.state.gateway = MutationGateway(store, assets, config.marketplace)

    # -----------------------------------------------------------------------
    # CORS middleware (the extension fetches the catalog cross-origin)
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(catalog.router)
    app.include_router(marketplace.router)

    @app.get("/api", tags=["meta"])
    async def health_check():
        """Health check endpoint."""
        return {"Server": "Active"}

    app.mount("/packages", StaticFiles(directory=str(assets.root)), name="packages")

    logger.info(
        "Marketplace app ready (db=%s, assets=%s, writes %s)",
        config.db.path,
        assets.root,
        "enabled" if config.marketplace.writable else "disabled",
    )
    return app
