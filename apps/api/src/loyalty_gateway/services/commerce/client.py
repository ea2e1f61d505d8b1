"""Shopify Admin GraphQL adapter."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Sequence

import httpx
from loguru import logger

from loyalty_gateway.core.errors import NotConfiguredError, UpstreamRequestError
from loyalty_gateway.core.settings import Settings
from loyalty_gateway.services.upstream import as_mapping, send_request

PROVIDER = "Shopify"

DRAFT_ORDER_CREATE = """
mutation draftOrderCreate($input: DraftOrderInput!) {
  draftOrderCreate(input: $input) {
    draftOrder { id }
    userErrors { field message }
  }
}
"""


class ShopifyClient:
    """Issues GraphQL operations against a single store."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        store: str | None,
        access_token: str | None,
        api_version: str,
    ) -> None:
        if not store:
            raise NotConfiguredError("shopify_store", service="E-commerce platform")
        if not access_token:
            raise NotConfiguredError("shopify_access_token", service="E-commerce platform")
        self._http = http_client
        self._access_token = access_token.strip()
        self.endpoint = f"https://{store.lower().strip()}/admin/api/{api_version}/graphql.json"

    @classmethod
    def from_settings(cls, http_client: httpx.AsyncClient, settings: Settings) -> "ShopifyClient":
        return cls(
            http_client,
            store=settings.shopify_store,
            access_token=settings.shopify_access_token,
            api_version=settings.shopify_api_version,
        )

    async def graphql(self, query: str, variables: Mapping[str, Any] | None = None) -> Dict[str, Any]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "X-Shopify-Access-Token": self._access_token,
        }
        body = {"query": query, "variables": dict(variables or {})}
        payload = as_mapping(await send_request(PROVIDER, self._http, "POST", self.endpoint, headers=headers, json=body))
        errors = payload.get("errors")
        if errors:
            raise UpstreamRequestError(PROVIDER, body=errors)
        return payload

    async def create_draft_order(
        self,
        *,
        email: str,
        line_items: Sequence[Mapping[str, Any]],
        billing_address: Mapping[str, Any] | None = None,
    ) -> str | None:
        """Create a draft order and return its GraphQL id."""

        order_input: Dict[str, Any] = {
            "email": email,
            "lineItems": [dict(item) for item in line_items],
        }
        if billing_address:
            order_input["billingAddress"] = dict(billing_address)

        payload = await self.graphql(DRAFT_ORDER_CREATE, {"input": order_input})
        result = as_mapping(as_mapping(payload.get("data")).get("draftOrderCreate"))
        user_errors = result.get("userErrors")
        if user_errors:
            raise UpstreamRequestError(PROVIDER, body=user_errors)
        draft_id = as_mapping(result.get("draftOrder")).get("id")
        logger.info("Draft order created", email=email, draft_order_id=draft_id)
        return draft_id


__all__ = ["DRAFT_ORDER_CREATE", "ShopifyClient"]
