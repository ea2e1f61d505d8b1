import time
from contextlib import asynccontextmanager
from typing import Any, Dict

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from loyalty_gateway.core.settings import settings
from .api.routes import AVAILABLE_ENDPOINTS, api_router
from .core.errors import install_error_handlers
from .core.logging import configure_logging, install_request_logging


APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # No timeout: a hung upstream only stalls the request waiting on it.
    http_client = httpx.AsyncClient(timeout=None)
    app.state.http_client = http_client
    app.state.started_at = time.monotonic()
    logger.info(
        "Loyalty gateway started",
        shopify_configured=settings.shopify_configured,
        rivo_configured=settings.rivo_configured,
        email_configured=settings.email_configured,
    )
    if not settings.email_configured:
        logger.warning("Email provider not configured; confirmation emails are disabled")

    try:
        yield
    finally:
        await http_client.aclose()


def create_app() -> FastAPI:
    """Application factory for the POS loyalty gateway."""
    configure_logging(
        service_name="loyalty-gateway",
        environment=settings.environment,
        version=APP_VERSION,
    )

    app = FastAPI(
        title="Loyalty Gateway",
        version=APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    install_error_handlers(app, available_endpoints=AVAILABLE_ENDPOINTS)
    install_request_logging(app)

    app.include_router(api_router)

    @app.get("/", tags=["Meta"])
    async def service_metadata() -> Dict[str, Any]:
        return {
            "message": "Rivo Middleware API",
            "version": APP_VERSION,
            "endpoints": {
                "customers": "GET /customers",
                "rewards": "GET /rewards",
                "points": "GET /points/:email",
                "redeemPoints": "POST /redeem-points",
                "checkout": "POST /checkout (adds points via Rivo points_events)",
                "notifyRedemption": "POST /notify-point-redemption",
                "health": "GET /health",
            },
            "note": f"Checkout endpoint automatically awards {settings.points_per_item} points per item purchased",
        }

    return app
