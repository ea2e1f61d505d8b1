from __future__ import annotations

import json

import httpx
import pytest

from loyalty_gateway.core.errors import NotConfiguredError, UpstreamRequestError
from loyalty_gateway.services.commerce.client import ShopifyClient

SHOPIFY_HOST = "test-store.myshopify.com"
GRAPHQL_PATH = "/admin/api/2024-10/graphql.json"


@pytest.mark.asyncio
async def test_create_draft_order_posts_fixed_mutation(upstream, http_client, settings) -> None:
    upstream.add(
        "POST",
        SHOPIFY_HOST,
        GRAPHQL_PATH,
        json={"data": {"draftOrderCreate": {"draftOrder": {"id": "gid://shopify/DraftOrder/1"}, "userErrors": []}}},
    )

    client = ShopifyClient.from_settings(http_client, settings)
    draft_id = await client.create_draft_order(
        email="a@b.com",
        line_items=[{"title": "Wings", "quantity": 2, "originalUnitPrice": "10.50"}],
        billing_address={"firstName": "Ada", "lastName": "L"},
    )

    assert draft_id == "gid://shopify/DraftOrder/1"
    request = upstream.calls_to(SHOPIFY_HOST)[0]
    assert request.headers["X-Shopify-Access-Token"] == "shpat_test"
    body = json.loads(request.content)
    assert "draftOrderCreate" in body["query"]
    assert body["variables"]["input"]["email"] == "a@b.com"
    assert body["variables"]["input"]["lineItems"][0]["quantity"] == 2


@pytest.mark.asyncio
async def test_graphql_errors_are_fatal(upstream, http_client, settings) -> None:
    upstream.add("POST", SHOPIFY_HOST, GRAPHQL_PATH, json={"errors": [{"message": "Access denied"}]})

    client = ShopifyClient.from_settings(http_client, settings)
    with pytest.raises(UpstreamRequestError) as excinfo:
        await client.graphql("{ shop { name } }")

    assert "Access denied" in str(excinfo.value)


@pytest.mark.asyncio
async def test_draft_order_user_errors_are_fatal(upstream, http_client, settings) -> None:
    upstream.add(
        "POST",
        SHOPIFY_HOST,
        GRAPHQL_PATH,
        json={"data": {"draftOrderCreate": {"draftOrder": None,
                                             "userErrors": [{"field": ["email"], "message": "Email is invalid"}]}}},
    )

    client = ShopifyClient.from_settings(http_client, settings)
    with pytest.raises(UpstreamRequestError):
        await client.create_draft_order(email="bad", line_items=[])


@pytest.mark.asyncio
async def test_client_requires_store_credentials(http_client, settings) -> None:
    settings.shopify_access_token = None

    with pytest.raises(NotConfiguredError):
        ShopifyClient.from_settings(http_client, settings)
