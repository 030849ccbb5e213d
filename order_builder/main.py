"""
Order Builder API
=================

FastAPI application exposing the cart mutation surface to the hosting POS
UI. The item customizers and the navigation state machine run inside the
POS process; the API only stores each ordering session's cart and its
running totals.

Router Registration:
--------------------
Routers are registered under two prefixes:
1. /api/v1/* - Versioned API (recommended)
2. /* - Unversioned paths for older POS terminals

Usage:
------
    uvicorn order_builder.main:app --reload
"""

import logging

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .logging_config import setup_logging
from .routes.cart import cart_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Create the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Order Builder API",
        description="Cart and order summary API for the restaurant POS order builder",
        version="1.0.0",
        openapi_tags=[
            {"name": "Health", "description": "Health check endpoints"},
            {"name": "Cart", "description": "Ordering sessions and cart mutations"},
        ],
    )

    # CORS configuration
    # In production, set CORS_ORIGINS to the POS frontend origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["Health"])
    def health() -> dict:
        return {"status": "ok"}

    api_v1_router = APIRouter(prefix="/api/v1")
    api_v1_router.include_router(cart_router)
    app.include_router(api_v1_router)

    # Unversioned routes for backwards compatibility
    app.include_router(cart_router)

    logger.info("Order builder API created (CORS origins: %s)", ", ".join(config.CORS_ORIGINS))
    return app


setup_logging()
app = create_app()
