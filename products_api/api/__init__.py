"""FastAPI application setup."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from products_api import __version__
from products_api.api.controller import products_router
from products_api.config import get_config, get_environment

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Set the root log level and format."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load configuration and set up logging before serving requests."""
    config = get_config()
    configure_logging(config.logging.level)
    logger.info(f"Products API started (environment: {get_environment()}, log level: {config.logging.level})")
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Products API",
        description="Product list from Azure SQL with token authentication",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS for browser clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production: specify allowed origins
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(products_router)

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
