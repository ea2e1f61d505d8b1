"""HTTP adapter for the Rivo loyalty merchant API."""

from __future__ import annotations

from typing import Any, Dict, Mapping
from urllib.parse import quote

import httpx
from loguru import logger

from loyalty_gateway.core.errors import NotConfiguredError
from loyalty_gateway.core.settings import Settings
from loyalty_gateway.services.upstream import send_request

PROVIDER = "Rivo"


class RivoClient:
    """Thin adapter over the loyalty provider's REST endpoints.

    Every method performs exactly one HTTP call and returns the decoded JSON
    body unchanged. Shape translation is the job of
    :mod:`loyalty_gateway.services.loyalty.normalizers`.
    """

    def __init__(self, http_client: httpx.AsyncClient, *, api_key: str | None, base_url: str) -> None:
        if not api_key:
            raise NotConfiguredError("rivo_api_key", service="Loyalty provider")
        self._http = http_client
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    @classmethod
    def from_settings(cls, http_client: httpx.AsyncClient, settings: Settings) -> "RivoClient":
        return cls(http_client, api_key=settings.rivo_api_key, base_url=settings.rivo_base_url)

    def _url(self, endpoint: str) -> str:
        return f"{self._base_url}/{endpoint.lstrip('/')}"

    async def request_json(
        self,
        endpoint: str,
        method: str = "GET",
        payload: Mapping[str, Any] | None = None,
    ) -> Any:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": self._api_key,
        }
        kwargs: Dict[str, Any] = {"headers": headers}
        if payload is not None:
            kwargs["json"] = dict(payload)
        logger.debug("Calling loyalty provider", endpoint=endpoint, method=method)
        return await send_request(PROVIDER, self._http, method, self._url(endpoint), **kwargs)

    async def request_form(self, endpoint: str, fields: Mapping[str, Any]) -> Any:
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
            "Authorization": self._api_key,
        }
        data = {key: str(value) for key, value in fields.items() if value is not None}
        logger.debug("Calling loyalty provider (form)", endpoint=endpoint)
        return await send_request(PROVIDER, self._http, "POST", self._url(endpoint), headers=headers, data=data)

    async def list_customers(self) -> Any:
        return await self.request_json("customers")

    async def get_customer(self, email: str) -> Any:
        return await self.request_json(f"customers/{quote(email, safe='@')}")

    async def list_rewards(self) -> Any:
        return await self.request_json("rewards")

    async def create_points_event(
        self,
        *,
        customer_identifier: str,
        points_amount: int,
        source: str = "manual",
        custom_action_name: str | None = None,
        internal_note: str | None = None,
    ) -> Any:
        payload: Dict[str, Any] = {
            "customer_identifier": customer_identifier,
            "points_amount": points_amount,
            "source": source,
        }
        if custom_action_name:
            payload["custom_action_name"] = custom_action_name
        if internal_note:
            payload["internal_note"] = internal_note
        return await self.request_json("points_events", "POST", payload)

    async def create_redemption(
        self,
        *,
        customer_identifier: str,
        reward_id: str,
        points_amount: Any = None,
        credits_amount: Any = None,
    ) -> Any:
        """Redeem a reward; the provider only accepts form encoding here."""

        fields: Dict[str, Any] = {
            "customer_identifier": customer_identifier,
            "reward_id": reward_id,
        }
        if points_amount:
            fields["points_amount"] = points_amount
        if credits_amount:
            fields["credits_amount"] = credits_amount
        return await self.request_form("points_redemptions", fields)


__all__ = ["RivoClient"]
