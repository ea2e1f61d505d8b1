from fastapi import APIRouter

from .endpoints import checkout, health, loyalty, webhooks

AVAILABLE_ENDPOINTS = (
    "GET /",
    "GET /health",
    "GET /customers",
    "GET /rewards",
    "GET /points/:email",
    "POST /redeem-points",
    "POST /checkout",
    "POST /notify-point-redemption",
)

api_router = APIRouter()
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(loyalty.router)
api_router.include_router(checkout.router)
api_router.include_router(webhooks.router)
