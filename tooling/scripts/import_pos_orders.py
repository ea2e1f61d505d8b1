"""Import POS orders as draft orders and award their loyalty points.

Example::
    python tooling/scripts/import_pos_orders.py --input pos_orders.csv --results import_results.json
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import httpx
from loguru import logger


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import POS orders into Shopify and Rivo")
    parser.add_argument(
        "--input",
        type=Path,
        default=Path("pos_orders.csv"),
        help="POS orders CSV (defaults to pos_orders.csv).",
    )
    parser.add_argument(
        "--results",
        type=Path,
        default=Path("import_results.json"),
        help="Where to write the per-order results JSON.",
    )
    return parser.parse_args()


def _configure_path() -> None:
    repo_root = Path(__file__).resolve().parents[2]
    api_src = repo_root / "apps" / "api" / "src"
    if str(api_src) not in sys.path:
        sys.path.insert(0, str(api_src))


async def _run() -> int:
    args = parse_args()
    _configure_path()

    from loyalty_gateway.core.errors import GatewayError  # type: ignore import-position
    from loyalty_gateway.core.settings import get_settings  # type: ignore import-position
    from loyalty_gateway.jobs import import_pos_orders  # type: ignore import-position
    from loyalty_gateway.services.commerce import ShopifyClient  # type: ignore import-position
    from loyalty_gateway.services.loyalty import RivoClient  # type: ignore import-position

    if not args.input.exists():
        logger.error("POS orders file not found", input=str(args.input))
        return 1

    settings = get_settings()
    async with httpx.AsyncClient() as http_client:
        try:
            rivo = RivoClient.from_settings(http_client, settings)
            shopify = ShopifyClient.from_settings(http_client, settings)
            results = await import_pos_orders(rivo, shopify, args.input, args.results)
        except GatewayError as exc:
            logger.error("POS import aborted", error=str(exc))
            return 1

    logger.success("Imported POS orders", orders=len(results), results=str(args.results))
    return 0


def main() -> int:
    return asyncio.run(_run())


if __name__ == "__main__":
    sys.exit(main())
