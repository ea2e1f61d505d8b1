from __future__ import annotations

import time
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from loyalty_gateway.api.dependencies.clients import get_app_settings
from loyalty_gateway.core.settings import Settings

router = APIRouter()


@router.get("/health", summary="Service health check")
async def service_health(request: Request, settings: Settings = Depends(get_app_settings)) -> Dict[str, Any]:
    started_at = getattr(request.app.state, "started_at", None) or time.monotonic()
    return {
        "uptime": round(time.monotonic() - started_at, 3),
        "message": "OK",
        "timestamp": int(time.time() * 1000),
        "environment": settings.environment,
        "configured": {
            "shopify": settings.shopify_configured,
            "rivo": settings.rivo_configured,
            "email": settings.email_configured,
        },
    }
