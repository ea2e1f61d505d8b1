"""Checkout orchestration with best-effort loyalty accrual and email."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Awaitable, Dict, Generic, Sequence, TypeVar

from loguru import logger

from loyalty_gateway.core.errors import GatewayError, ValidationError
from loyalty_gateway.core.settings import Settings
from loyalty_gateway.services.loyalty.client import RivoClient
from loyalty_gateway.services.loyalty.normalizers import extract_path
from loyalty_gateway.services.notifications.backend import EmailBackend, OutboundEmail
from loyalty_gateway.services.notifications.templates import PurchaseLine, render_purchase_confirmation

T = TypeVar("T")

ACCRUAL_ACTION_NAME = "POS Purchase"
TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class CartLine:
    product_id: Any
    name: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.product_id,
            "name": self.name,
            "quantity": self.quantity,
            "price": float(self.unit_price),
        }


@dataclass(frozen=True)
class OrderSummary:
    lines: Sequence[CartLine]
    customer_email: str
    total_items: int
    total_price: Decimal
    points_earned: int


@dataclass
class SideEffectResult(Generic[T]):
    """Outcome of a secondary call whose failure must not fail the order."""

    ok: bool
    value: T | None = None
    error: str | None = None


@dataclass
class CheckoutResult:
    order: OrderSummary
    points_added: bool = False
    new_points_balance: Any = None
    email_sent: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "message": "Order placed successfully!",
            "order": {
                "items": [line.to_dict() for line in self.order.lines],
                "totalItems": self.order.total_items,
                "totalPrice": f"{self.order.total_price.quantize(TWO_PLACES)}",
                "customerEmail": self.order.customer_email,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "pointsEarned": self.order.points_earned,
                "pointsAdded": self.points_added,
                "newPointsBalance": self.new_points_balance,
                "emailSent": self.email_sent,
            },
        }


def build_order(lines: Sequence[CartLine], customer_email: str | None, *, points_per_item: int) -> OrderSummary:
    """Validate the cart and compute totals; accrual is a flat rate per item."""

    if not lines:
        raise ValidationError("Cart is empty")
    if not customer_email:
        raise ValidationError("Customer email is required to earn points")

    total_items = sum(line.quantity for line in lines)
    total_price = sum((line.line_total for line in lines), Decimal("0"))
    return OrderSummary(
        lines=tuple(lines),
        customer_email=customer_email,
        total_items=total_items,
        total_price=total_price,
        points_earned=total_items * points_per_item,
    )


async def _attempt(label: str, call: Awaitable[T], **context: Any) -> SideEffectResult[T]:
    try:
        value = await call
    except GatewayError as exc:
        logger.warning(f"{label} failed", error=str(exc), **context)
        return SideEffectResult(ok=False, error=str(exc))
    except Exception as exc:  # secondary side effects never fail the order
        logger.opt(exception=exc).error(f"{label} failed unexpectedly", **context)
        return SideEffectResult(ok=False, error=str(exc))
    return SideEffectResult(ok=True, value=value)


class CheckoutOrchestrator:
    """Order accounting, then loyalty accrual, then confirmation email.

    Only the first step can fail the request. Accrual and email failures are
    folded into ``pointsAdded`` / ``emailSent``.
    """

    def __init__(
        self,
        settings: Settings,
        loyalty_client: RivoClient | None,
        email_backend: EmailBackend | None,
    ) -> None:
        self._settings = settings
        self._loyalty = loyalty_client
        self._email = email_backend

    async def checkout(
        self,
        lines: Sequence[CartLine],
        customer_email: str | None,
        *,
        client_points: int | None = None,
    ) -> CheckoutResult:
        order = build_order(lines, customer_email, points_per_item=self._settings.points_per_item)
        logger.info(
            "Order processed",
            email=order.customer_email,
            total_items=order.total_items,
            total_price=str(order.total_price.quantize(TWO_PLACES)),
            points_earned=order.points_earned,
        )
        if client_points is not None and client_points != order.points_earned:
            logger.warning(
                "Client-supplied points ignored",
                client_points=client_points,
                points_earned=order.points_earned,
            )

        result = CheckoutResult(order=order)
        if order.points_earned <= 0:
            return result

        accrual = await self._accrue_points(order)
        if not accrual.ok:
            return result

        result.points_added = True
        result.new_points_balance = extract_path(accrual.value or {}, "data.attributes.customer.points_tally")

        email = await self._send_confirmation(order, result.new_points_balance)
        result.email_sent = email.ok
        return result

    async def _accrue_points(self, order: OrderSummary) -> SideEffectResult[Any]:
        if self._loyalty is None:
            logger.warning("Loyalty provider not configured; skipping accrual", email=order.customer_email)
            return SideEffectResult(ok=False, error="Loyalty provider not configured")

        call = self._loyalty.create_points_event(
            customer_identifier=order.customer_email,
            points_amount=order.points_earned,
            source="manual",
            custom_action_name=ACCRUAL_ACTION_NAME,
            internal_note=f"Order placed via {self._settings.brand_name} POS - {order.total_items} item(s)",
        )
        outcome = await _attempt("Points accrual", call, email=order.customer_email)
        if outcome.ok:
            logger.info("Points added", email=order.customer_email, points=order.points_earned)
        return outcome

    async def _send_confirmation(self, order: OrderSummary, new_balance: Any) -> SideEffectResult[str]:
        if self._email is None:
            return SideEffectResult(ok=False)

        template = render_purchase_confirmation(
            brand_name=self._settings.brand_name,
            lines=[PurchaseLine(line.name, line.quantity, line.unit_price) for line in order.lines],
            total_price=order.total_price,
            points_earned=order.points_earned,
            points_per_item=self._settings.points_per_item,
            new_points_balance=new_balance,
        )
        message = OutboundEmail(
            sender=self._settings.sender(),
            recipient=order.customer_email,
            subject=template.subject,
            html=template.html_body,
            text=template.text_body,
        )
        outcome = await _attempt("Confirmation email", self._email.send_email(message), email=order.customer_email)
        if outcome.ok:
            logger.info("Confirmation email sent", email=order.customer_email, message_id=outcome.value)
        return outcome


__all__ = [
    "CartLine",
    "CheckoutOrchestrator",
    "CheckoutResult",
    "OrderSummary",
    "SideEffectResult",
    "build_order",
]
