"""Export loyalty customers and point balances to a CSV file for the POS.

Example::
    python tooling/scripts/export_customer_points.py --output pos_export.csv
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import httpx
from loguru import logger


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export loyalty customer points to CSV")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("pos_export.csv"),
        help="Output CSV path (defaults to pos_export.csv in the current directory).",
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
    from loyalty_gateway.jobs import export_customer_points  # type: ignore import-position
    from loyalty_gateway.services.loyalty import RivoClient  # type: ignore import-position

    settings = get_settings()
    async with httpx.AsyncClient() as http_client:
        try:
            client = RivoClient.from_settings(http_client, settings)
            count = await export_customer_points(client, args.output)
        except GatewayError as exc:
            logger.error("Customer export failed", error=str(exc))
            return 1

    logger.success("Exported customers", output=str(args.output), customers=count)
    return 0


def main() -> int:
    return asyncio.run(_run())


if __name__ == "__main__":
    sys.exit(main())
