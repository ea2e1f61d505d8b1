from __future__ import annotations

from decimal import Decimal

import httpx
import pytest

from loyalty_gateway.core.errors import EmailDeliveryError, NotConfiguredError
from loyalty_gateway.services.notifications.backend import OutboundEmail, ResendEmailBackend
from loyalty_gateway.services.notifications.templates import (
    PurchaseLine,
    render_purchase_confirmation,
    render_reward_confirmation,
)

MESSAGE = OutboundEmail(
    sender="Wingstop <rewards@example.com>",
    recipient="a@b.com",
    subject="Hello",
    html="<p>Hello</p>",
    text="Hello",
)


@pytest.mark.asyncio
async def test_resend_backend_returns_message_id() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"id": "re_123"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        backend = ResendEmailBackend(http_client, api_key="re_key", api_url="https://api.resend.com/emails")
        message_id = await backend.send_email(MESSAGE)

    assert message_id == "re_123"
    assert captured[0].headers["Authorization"] == "Bearer re_key"


@pytest.mark.asyncio
async def test_resend_backend_raises_on_rejection() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="upstream exploded")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        backend = ResendEmailBackend(http_client, api_key="re_key", api_url="https://api.resend.com/emails")
        with pytest.raises(EmailDeliveryError) as excinfo:
            await backend.send_email(MESSAGE)

    assert excinfo.value.status_code == 500
    assert "upstream exploded" in str(excinfo.value)


def test_resend_backend_requires_api_key() -> None:
    with pytest.raises(NotConfiguredError):
        ResendEmailBackend(httpx.AsyncClient(), api_key=None, api_url="https://api.resend.com/emails")


def test_purchase_confirmation_lists_items_and_balance() -> None:
    template = render_purchase_confirmation(
        brand_name="Wingstop",
        lines=[PurchaseLine("Wings <spicy>", 2, Decimal("10.50"))],
        total_price=Decimal("21.00"),
        points_earned=100,
        points_per_item=50,
        new_points_balance=900,
    )

    assert template.subject == "Thank You for Your Wingstop Order!"
    assert "Wings &lt;spicy&gt;" in template.html_body
    assert "$21.00" in template.html_body
    assert "Wings <spicy> (Qty: 2) - $21.00" in template.text_body
    assert "Your New Points Balance: 900 points" in template.text_body


def test_purchase_confirmation_omits_unknown_balance() -> None:
    template = render_purchase_confirmation(
        brand_name="Wingstop",
        lines=[PurchaseLine("Fries", 1, Decimal("3"))],
        total_price=Decimal("3"),
        points_earned=50,
        points_per_item=50,
    )

    assert "Balance" not in template.text_body


def test_reward_confirmation_without_code_reports_active_status() -> None:
    template = render_reward_confirmation(
        brand_name="Wingstop",
        customer_name="Valued Customer",
        reward_name="Reward",
        reward_code=None,
        points_redeemed=100,
        points_remaining=0,
    )

    assert "Status: Active" in template.text_body
    assert "Your reward has been applied to your account." in template.text_body
    assert "DISCOUNT CODE" not in template.html_body
