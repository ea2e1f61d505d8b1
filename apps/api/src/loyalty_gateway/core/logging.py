"""Structured JSON logging for the gateway.

Every record carries the service identity, the active OpenTelemetry span and
whatever request or upstream context is bound at the call site: ``method`` and
``path`` for the inbound request, ``provider`` and ``upstream_status`` for
outbound calls.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from typing import Any, Awaitable, Callable, Dict

from fastapi import FastAPI, Request, Response
from loguru import logger
from opentelemetry import trace

CONTEXT_KEYS = ("method", "path", "status_code", "duration_ms", "provider", "upstream_status")


class InterceptHandler(logging.Handler):
    """Forward uvicorn and httpx records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - bridging glue
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def _trace_fields() -> Dict[str, str]:
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return {}
    return {"trace_id": f"{span_context.trace_id:032x}", "span_id": f"{span_context.span_id:016x}"}


def build_log_entry(record: Dict[str, Any], metadata: Dict[str, str]) -> Dict[str, Any]:
    extra = dict(record["extra"])
    entry: Dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name.lower(),
        "message": record["message"],
        "logger": record["name"],
        **metadata,
        **_trace_fields(),
    }
    context = {key: extra.pop(key) for key in CONTEXT_KEYS if key in extra}
    if context:
        entry["context"] = context
    entry.update(extra)

    if record["exception"] is not None:
        exc_type, exc_value, _ = record["exception"]
        entry["exception"] = f"{exc_type.__name__ if exc_type else 'Exception'}: {exc_value}"
    return entry


def configure_logging(*, service_name: str, environment: str, version: str) -> None:
    """Send loguru and stdlib logging to stdout as one JSON object per line."""

    metadata = {"service": service_name, "environment": environment, "version": version}

    def _sink(message: Any) -> None:
        sys.stdout.write(json.dumps(build_log_entry(message.record, metadata), default=str) + "\n")

    logger.remove()
    logger.add(_sink, backtrace=False, diagnose=False)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def install_request_logging(app: FastAPI) -> None:
    """Bind method and path to every record emitted while a request is handled."""

    @app.middleware("http")
    async def _log_request(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        started = time.perf_counter()
        with logger.contextualize(method=request.method, path=request.url.path):
            response = await call_next(request)
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
        return response


__all__ = ["InterceptHandler", "build_log_entry", "configure_logging", "install_request_logging"]
