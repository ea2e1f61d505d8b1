"""Inbound loyalty-provider webhooks that trigger customer email."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping

from loguru import logger

from loyalty_gateway.core.errors import NotConfiguredError, ValidationError
from loyalty_gateway.core.settings import Settings
from loyalty_gateway.services.loyalty.normalizers import extract_path, first_present
from loyalty_gateway.services.notifications.backend import EmailBackend, OutboundEmail
from loyalty_gateway.services.notifications.templates import render_reward_confirmation

REWARD_NAME_PATHS = (
    "name",
    "title",
    "event_attributes.name",
    "event_attributes.reward_name",
    "event_attributes.title",
)
REWARD_CODE_PATHS = (
    "code",
    "event_attributes.code",
    "event_attributes.discount_code",
    "event_attributes.reward_code",
)
DEFAULT_CUSTOMER_NAME = "Valued Customer"
DEFAULT_REWARD_NAME = "Reward"
WEBHOOK_SENDER_NAME = "Rivo Loyalty"


@dataclass(frozen=True)
class RedemptionEvent:
    email: str
    customer_name: str
    points_redeemed: Any
    points_remaining: Any
    reward_name: str | None
    reward_code: str | None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RedemptionEvent":
        """Pull the fields we need out of a loosely shaped webhook body.

        Raises :class:`ValidationError` when the email, the redeemed points or
        the remaining balance is missing; a zero redemption counts as missing.
        """

        email = extract_path(payload, "customer.email")
        first_name = extract_path(payload, "customer.first_name") or ""
        last_name = extract_path(payload, "customer.last_name") or ""
        points_redeemed = payload.get("points_amount")
        points_remaining = extract_path(payload, "customer.points_tally")

        if not email or not points_redeemed or points_remaining is None:
            raise ValidationError("Missing required fields from Rivo webhook")

        customer_name = f"{first_name} {last_name}".strip() or DEFAULT_CUSTOMER_NAME
        return cls(
            email=str(email),
            customer_name=customer_name,
            points_redeemed=points_redeemed,
            points_remaining=points_remaining,
            reward_name=first_present(payload, REWARD_NAME_PATHS),
            reward_code=first_present(payload, REWARD_CODE_PATHS),
        )


class RedemptionWebhookHandler:
    def __init__(self, settings: Settings, email_backend: EmailBackend | None) -> None:
        self._settings = settings
        self._email = email_backend

    async def handle(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        logger.info("Redemption webhook received")
        event = RedemptionEvent.from_payload(payload)

        if self._email is None:
            raise NotConfiguredError("resend_api_key", service="Email service")

        reward_name = event.reward_name or DEFAULT_REWARD_NAME
        template = render_reward_confirmation(
            brand_name=self._settings.brand_name,
            customer_name=event.customer_name,
            reward_name=reward_name,
            reward_code=event.reward_code,
            points_redeemed=event.points_redeemed,
            points_remaining=event.points_remaining,
        )
        message = OutboundEmail(
            sender=self._settings.sender(WEBHOOK_SENDER_NAME),
            recipient=event.email,
            subject=template.subject,
            html=template.html_body,
            text=template.text_body,
        )
        message_id = await self._email.send_email(message)
        logger.info("Reward confirmation sent", email=event.email, message_id=message_id)

        return {
            "email": event.email,
            "customerName": event.customer_name,
            "pointsRedeemed": event.points_redeemed,
            "pointsRemaining": event.points_remaining,
            "rewardName": reward_name,
            "rewardCode": event.reward_code,
            "messageId": message_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "provider": self._email.provider,
        }


__all__ = ["RedemptionEvent", "RedemptionWebhookHandler"]
