from __future__ import annotations

import json

import pytest
from loguru import logger

from loyalty_gateway.core.logging import configure_logging


def test_log_lines_group_request_and_upstream_context(capsys) -> None:
    configure_logging(service_name="loyalty-gateway", environment="development", version="1.0.0")

    logger.bind(provider="Rivo", upstream_status=502, order_id="A-1").warning("Upstream call failed")

    entry = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert entry["message"] == "Upstream call failed"
    assert entry["level"] == "warning"
    assert entry["service"] == "loyalty-gateway"
    assert entry["context"] == {"provider": "Rivo", "upstream_status": 502}
    assert entry["order_id"] == "A-1"
    assert "trace_id" not in entry


def test_log_lines_include_exception_summary(capsys) -> None:
    configure_logging(service_name="loyalty-gateway", environment="test", version="1.0.0")

    try:
        raise RuntimeError("boom")
    except RuntimeError as exc:
        logger.opt(exception=exc).error("Unhandled error")

    entry = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert entry["exception"] == "RuntimeError: boom"
    assert "context" not in entry


@pytest.mark.asyncio
async def test_upstream_calls_are_logged_with_request_path(api_client, upstream) -> None:
    upstream.rivo("GET", "customers/ada@example.com", json={"data": {"attributes": {"email": "ada@example.com"}}})
    records = []
    sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    try:
        response = await api_client.get("/points/ada@example.com")
    finally:
        logger.remove(sink_id)

    assert response.status_code == 200
    upstream_record = next(record for record in records if record["message"] == "Upstream call completed")
    assert upstream_record["extra"]["provider"] == "Rivo"
    assert upstream_record["extra"]["upstream_status"] == 200
    assert upstream_record["extra"]["path"] == "/points/ada@example.com"
    completed = next(record for record in records if record["message"] == "Request completed")
    assert completed["extra"]["status_code"] == 200
    assert completed["extra"]["method"] == "GET"
