"""Import POS orders into the e-commerce platform and the loyalty provider.

Each CSV row becomes a draft order plus a points event. The run is one-shot:
there is no retry, no de-duplication, and the first failing order aborts
the import without writing a results file.
"""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Mapping

from loguru import logger

from loyalty_gateway.core.errors import ValidationError
from loyalty_gateway.services.commerce.client import ShopifyClient
from loyalty_gateway.services.loyalty.client import RivoClient

REQUIRED_COLUMNS = (
    "order_id",
    "customer_email",
    "customer_name",
    "product",
    "quantity",
    "price",
    "points_earned",
)


@dataclass(frozen=True)
class PosOrder:
    order_id: str
    customer_email: str
    first_name: str
    last_name: str
    product: str
    quantity: int
    price: Decimal
    points_earned: int

    @classmethod
    def from_row(cls, row: Mapping[str, str | None]) -> "PosOrder":
        missing = [column for column in REQUIRED_COLUMNS if not (row.get(column) or "").strip()]
        if missing:
            raise ValidationError(f"POS order row missing columns: {', '.join(missing)}")

        name_parts = (row["customer_name"] or "").split()
        try:
            quantity = int((row["quantity"] or "").strip())
            price = Decimal((row["price"] or "").strip())
            points = int((row["points_earned"] or "").strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"POS order {row.get('order_id')} has invalid numbers: {exc}") from exc
        if quantity < 0 or price < 0 or points < 0:
            raise ValidationError(f"POS order {row.get('order_id')} has negative amounts")

        return cls(
            order_id=(row["order_id"] or "").strip(),
            customer_email=(row["customer_email"] or "").strip(),
            first_name=name_parts[0] if name_parts else "",
            last_name=name_parts[1] if len(name_parts) > 1 else "",
            product=(row["product"] or "").strip(),
            quantity=quantity,
            price=price,
            points_earned=points,
        )


@dataclass(frozen=True)
class ImportResult:
    order_id: str
    status: str
    points_added: int
    draft_order_id: str | None = None


def read_pos_orders(input_path: Path) -> List[PosOrder]:
    with input_path.open(newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle, skipinitialspace=True)
        return [PosOrder.from_row(row) for row in reader]


async def import_pos_orders(
    rivo: RivoClient,
    shopify: ShopifyClient,
    input_path: Path,
    results_path: Path,
) -> List[ImportResult]:
    orders = read_pos_orders(input_path)
    results: List[ImportResult] = []

    for order in orders:
        logger.info("Processing POS order", order_id=order.order_id, email=order.customer_email)
        draft_id = await shopify.create_draft_order(
            email=order.customer_email,
            line_items=[
                {
                    "title": order.product,
                    "quantity": order.quantity,
                    "originalUnitPrice": str(order.price),
                }
            ],
            billing_address={"firstName": order.first_name, "lastName": order.last_name},
        )
        await rivo.create_points_event(
            customer_identifier=order.customer_email,
            points_amount=order.points_earned,
            source="manual",
            custom_action_name="POS Import",
            internal_note=f"POS Order {order.order_id}",
        )
        results.append(
            ImportResult(
                order_id=order.order_id,
                status="success",
                points_added=order.points_earned,
                draft_order_id=draft_id,
            )
        )
        logger.info("POS order imported", order_id=order.order_id, points=order.points_earned)

    results_path.parent.mkdir(parents=True, exist_ok=True)
    with results_path.open("w", encoding="utf-8") as handle:
        json.dump([asdict(result) for result in results], handle, indent=2)

    logger.info("POS import complete", orders=len(results), output=str(results_path))
    return results


__all__ = ["ImportResult", "PosOrder", "import_pos_orders", "read_pos_orders"]
