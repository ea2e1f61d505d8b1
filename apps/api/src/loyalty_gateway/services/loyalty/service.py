"""Orchestrators for the loyalty lookup and redemption endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from loguru import logger

from loyalty_gateway.core.errors import (
    CustomerNotFoundError,
    MalformedResponseError,
    NotConfiguredError,
    UpstreamProtocolError,
    UpstreamRequestError,
    ValidationError,
)
from loyalty_gateway.services.loyalty.client import RivoClient
from loyalty_gateway.services.loyalty.normalizers import (
    customer_list,
    normalize_customer,
    normalize_redemption,
    normalize_rewards,
)


def looks_like_email(value: str | None) -> bool:
    if not value:
        return False
    return "@" in value.strip(" @")


class LoyaltyGatewayService:
    """Composes loyalty adapter calls into the JSON the POS form consumes."""

    def __init__(self, client: RivoClient | None) -> None:
        self._rivo = client

    @property
    def _client(self) -> RivoClient:
        if self._rivo is None:
            raise NotConfiguredError("rivo_api_key", service="Loyalty provider")
        return self._rivo

    async def list_customers(self) -> Dict[str, Any]:
        customers = customer_list(await self._client.list_customers())
        return {
            "success": True,
            "count": len(customers) if isinstance(customers, list) else 0,
            "data": customers,
        }

    async def list_rewards(self) -> Dict[str, Any]:
        rewards = normalize_rewards(await self._client.list_rewards())
        return {
            "success": True,
            "count": len(rewards),
            "rewards": [reward.to_dict() for reward in rewards],
        }

    async def get_customer_points(self, email: str) -> Dict[str, Any]:
        if not looks_like_email(email):
            raise ValidationError(f"Invalid email address: {email}")

        try:
            payload = await self._client.get_customer(email)
        except (UpstreamRequestError, UpstreamProtocolError) as exc:
            if exc.status_code == 404:
                raise CustomerNotFoundError(email) from exc
            raise

        profile = normalize_customer(payload)
        if profile is None:
            logger.info("Customer lookup returned no profile", email=email)
            raise CustomerNotFoundError(email)
        return {"success": True, "customer": profile.to_dict()}

    async def redeem_points(
        self,
        *,
        email: str | None,
        reward_id: Any,
        reward_name: str | None = None,
        points: Any = None,
        credits: Any = None,
    ) -> Dict[str, Any]:
        if not email or reward_id in (None, ""):
            raise ValidationError("Missing required fields: email and rewardId")

        logger.info("Points redemption requested", email=email, reward_id=reward_id, reward_name=reward_name)
        payload = await self._client.create_redemption(
            customer_identifier=email,
            reward_id=str(reward_id),
            points_amount=points,
            credits_amount=credits,
        )
        try:
            receipt = normalize_redemption(payload)
        except MalformedResponseError:
            logger.warning("Redemption response missing data node", email=email, reward_id=reward_id)
            raise

        response: Dict[str, Any] = {"success": True, "message": "Points redeemed successfully!"}
        response.update(receipt.to_dict())
        response["timestamp"] = datetime.now(timezone.utc).isoformat()
        return response


__all__ = ["LoyaltyGatewayService", "looks_like_email"]
