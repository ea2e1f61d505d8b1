"""Per-request wiring of settings, the shared HTTP client and upstream adapters."""

from __future__ import annotations

import httpx
from fastapi import Depends, Request

from loyalty_gateway.core.settings import Settings, get_settings
from loyalty_gateway.services.checkout.orchestrator import CheckoutOrchestrator
from loyalty_gateway.services.loyalty.client import RivoClient
from loyalty_gateway.services.loyalty.service import LoyaltyGatewayService
from loyalty_gateway.services.notifications.backend import EmailBackend, ResendEmailBackend
from loyalty_gateway.services.notifications.webhooks import RedemptionWebhookHandler


def get_app_settings() -> Settings:
    return get_settings()


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the process-wide client opened in the application lifespan."""

    return request.app.state.http_client


def get_optional_rivo_client(
    http_client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_app_settings),
) -> RivoClient | None:
    if not settings.rivo_configured:
        return None
    return RivoClient.from_settings(http_client, settings)


def get_email_backend(
    http_client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_app_settings),
) -> EmailBackend | None:
    if not settings.email_configured:
        return None
    return ResendEmailBackend.from_settings(http_client, settings)


def get_loyalty_service(
    client: RivoClient | None = Depends(get_optional_rivo_client),
) -> LoyaltyGatewayService:
    return LoyaltyGatewayService(client)


def get_checkout_orchestrator(
    settings: Settings = Depends(get_app_settings),
    loyalty_client: RivoClient | None = Depends(get_optional_rivo_client),
    email_backend: EmailBackend | None = Depends(get_email_backend),
) -> CheckoutOrchestrator:
    return CheckoutOrchestrator(settings, loyalty_client, email_backend)


def get_webhook_handler(
    settings: Settings = Depends(get_app_settings),
    email_backend: EmailBackend | None = Depends(get_email_backend),
) -> RedemptionWebhookHandler:
    return RedemptionWebhookHandler(settings, email_backend)
