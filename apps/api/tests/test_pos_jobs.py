from __future__ import annotations

import csv
import json

import pytest

from loyalty_gateway.core.errors import UpstreamRequestError, ValidationError
from loyalty_gateway.jobs import export_customer_points, import_pos_orders
from loyalty_gateway.jobs.pos_import import read_pos_orders
from loyalty_gateway.services.commerce.client import ShopifyClient
from loyalty_gateway.services.loyalty.client import RivoClient

SHOPIFY_HOST = "test-store.myshopify.com"
GRAPHQL_PATH = "/admin/api/2024-10/graphql.json"
DRAFT_RESPONSE = {"data": {"draftOrderCreate": {"draftOrder": {"id": "gid://shopify/DraftOrder/9"}, "userErrors": []}}}

ORDERS_CSV = """order_id,customer_email,customer_name,product,quantity,price,points_earned
1001,ada@example.com,Ada Lovelace,Classic Wings,2,10.50,100
1002,bob@example.com,Bob,Fries,1,3.25,50
"""


@pytest.mark.asyncio
async def test_export_writes_one_row_per_customer(upstream, http_client, settings, tmp_path) -> None:
    upstream.rivo(
        "GET",
        "customers",
        json={
            "customers": [
                {"email": "ada@example.com", "first_name": "Ada", "last_name": "Lovelace", "points_balance": 900},
                {"email": "bob@example.com", "first_name": "Bob"},
            ]
        },
    )
    output = tmp_path / "export" / "pos_export.csv"

    count = await export_customer_points(RivoClient.from_settings(http_client, settings), output)

    assert count == 2
    with output.open(newline="", encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))
    assert rows[0]["customer_email"] == "ada@example.com"
    assert rows[0]["customer_name"] == "Ada Lovelace"
    assert rows[0]["points_balance"] == "900"
    assert rows[1]["customer_name"] == "Bob"
    assert rows[1]["points_balance"] == "0"
    assert rows[0]["last_updated"]


@pytest.mark.asyncio
async def test_import_creates_draft_orders_and_points_events(upstream, http_client, settings, tmp_path) -> None:
    upstream.add("POST", SHOPIFY_HOST, GRAPHQL_PATH, json=DRAFT_RESPONSE)
    upstream.rivo("POST", "points_events", json={"data": {"attributes": {}}})
    source = tmp_path / "pos_orders.csv"
    source.write_text(ORDERS_CSV, encoding="utf-8")
    results_path = tmp_path / "import_results.json"

    results = await import_pos_orders(
        RivoClient.from_settings(http_client, settings),
        ShopifyClient.from_settings(http_client, settings),
        source,
        results_path,
    )

    assert [result.order_id for result in results] == ["1001", "1002"]
    saved = json.loads(results_path.read_text(encoding="utf-8"))
    assert saved[0] == {
        "order_id": "1001",
        "status": "success",
        "points_added": 100,
        "draft_order_id": "gid://shopify/DraftOrder/9",
    }

    draft = json.loads(upstream.calls_to(SHOPIFY_HOST)[0].content)
    assert draft["variables"]["input"]["billingAddress"] == {"firstName": "Ada", "lastName": "Lovelace"}
    events = [json.loads(request.content) for request in upstream.rivo_calls("points_events")]
    assert [event["points_amount"] for event in events] == [100, 50]
    assert events[1]["internal_note"] == "POS Order 1002"


@pytest.mark.asyncio
async def test_import_stops_at_first_failure(upstream, http_client, settings, tmp_path) -> None:
    upstream.add("POST", SHOPIFY_HOST, GRAPHQL_PATH, json=DRAFT_RESPONSE)
    upstream.rivo("POST", "points_events", status_code=500, json={"error": "boom"})
    source = tmp_path / "pos_orders.csv"
    source.write_text(ORDERS_CSV, encoding="utf-8")
    results_path = tmp_path / "import_results.json"

    with pytest.raises(UpstreamRequestError):
        await import_pos_orders(
            RivoClient.from_settings(http_client, settings),
            ShopifyClient.from_settings(http_client, settings),
            source,
            results_path,
        )

    assert len(upstream.calls_to(SHOPIFY_HOST)) == 1
    assert not results_path.exists()


def test_read_pos_orders_rejects_bad_quantity(tmp_path) -> None:
    source = tmp_path / "pos_orders.csv"
    source.write_text(
        "order_id,customer_email,customer_name,product,quantity,price,points_earned\n"
        "1,a@b.com,Ada,Wings,two,1.00,50\n",
        encoding="utf-8",
    )

    with pytest.raises(ValidationError):
        read_pos_orders(source)
