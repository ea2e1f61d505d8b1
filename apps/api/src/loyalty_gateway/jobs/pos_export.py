"""Export loyalty customers and their point balances to a POS CSV file."""

from __future__ import annotations

import csv
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping

from loguru import logger

from loyalty_gateway.services.loyalty.client import RivoClient
from loyalty_gateway.services.loyalty.normalizers import customer_list

EXPORT_FIELDS = ["customer_email", "customer_name", "points_balance", "last_updated"]


def _customer_row(customer: Mapping[str, Any], exported_at: str) -> Dict[str, Any]:
    # List responses are either flat records or JSON:API resources.
    attributes = customer.get("attributes")
    record = attributes if isinstance(attributes, Mapping) else customer
    first_name = record.get("first_name") or ""
    last_name = record.get("last_name") or ""
    points = record.get("points_balance")
    if points is None:
        points = record.get("points_tally")
    return {
        "customer_email": record.get("email") or "",
        "customer_name": f"{first_name} {last_name}".strip(),
        "points_balance": points or 0,
        "last_updated": exported_at,
    }


async def export_customer_points(client: RivoClient, output_path: Path) -> int:
    """Write one CSV row per customer; returns the number of rows written."""

    customers = customer_list(await client.list_customers())
    if not isinstance(customers, list):
        customers = []

    exported_at = datetime.now(timezone.utc).isoformat()
    rows: List[Dict[str, Any]] = [
        _customer_row(customer, exported_at) for customer in customers if isinstance(customer, Mapping)
    ]

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=EXPORT_FIELDS)
        writer.writeheader()
        writer.writerows(rows)

    logger.info("Exported customer points", output=str(output_path), customers=len(rows))
    return len(rows)


__all__ = ["EXPORT_FIELDS", "export_customer_points"]
