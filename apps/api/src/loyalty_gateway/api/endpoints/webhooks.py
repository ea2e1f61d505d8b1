"""Webhooks posted by the loyalty provider."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from loyalty_gateway.api.dependencies.clients import get_webhook_handler
from loyalty_gateway.services.notifications.webhooks import RedemptionWebhookHandler

router = APIRouter(tags=["Webhooks"])


@router.post("/notify-point-redemption", summary="Send a reward confirmation email")
async def notify_point_redemption(
    payload: Dict[str, Any] = Body(...),
    handler: RedemptionWebhookHandler = Depends(get_webhook_handler),
) -> Dict[str, Any]:
    data = await handler.handle(payload)
    return {"success": True, "message": "Email sent successfully", "data": data}
