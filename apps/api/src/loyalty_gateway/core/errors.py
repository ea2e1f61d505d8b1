"""Error taxonomy shared by adapters, orchestrators and the HTTP layer."""

from __future__ import annotations

import json
from typing import Any, Iterable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

SNIPPET_LIMIT = 200


class GatewayError(RuntimeError):
    """Base class for errors rendered as ``{"success": false, "error": ...}``."""

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR


class ValidationError(GatewayError):
    """Raised when a request is missing required fields."""

    http_status = status.HTTP_400_BAD_REQUEST


class CustomerNotFoundError(GatewayError):
    """Raised when the loyalty provider has no customer for an email."""

    http_status = status.HTTP_404_NOT_FOUND

    def __init__(self, email: str) -> None:
        super().__init__(f"Customer not found: {email}")
        self.email = email


class NotConfiguredError(GatewayError):
    """Raised at the point of use when a credential or endpoint is missing."""

    def __init__(self, setting: str, *, service: str | None = None) -> None:
        label = service or setting
        super().__init__(f"{label} not configured ({setting.upper()} is not set)")
        self.setting = setting


class UpstreamError(GatewayError):
    """Base class for failures talking to an upstream provider."""

    def __init__(self, message: str, *, provider: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class UpstreamRequestError(UpstreamError):
    """Upstream answered with a non-2xx status, or the request never completed."""

    def __init__(
        self,
        provider: str,
        *,
        status_code: int | None = None,
        body: Any = None,
        detail: str | None = None,
    ) -> None:
        reason = detail or _describe_body(body)
        if status_code is None:
            message = f"{provider} API error: {reason}"
        else:
            message = f"{provider} API error (HTTP {status_code}): {reason}"
        super().__init__(message, provider=provider, status_code=status_code)
        self.body = body


class UpstreamProtocolError(UpstreamError):
    """Upstream answered with something other than JSON."""

    def __init__(self, provider: str, *, status_code: int, body_text: str) -> None:
        snippet = truncate(body_text)
        super().__init__(
            f"{provider} API returned non-JSON response (HTTP {status_code}): {snippet}",
            provider=provider,
            status_code=status_code,
        )
        self.snippet = snippet


class MalformedResponseError(UpstreamError):
    """Upstream JSON lacks the structural node a normalizer depends on."""


class EmailDeliveryError(GatewayError):
    """The transactional email provider refused or never received a message."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def truncate(text: str, limit: int = SNIPPET_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def _describe_body(body: Any) -> str:
    if isinstance(body, dict):
        for key in ("error", "message"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    if body is None:
        return "no response body"
    if isinstance(body, str):
        return truncate(body)
    return json.dumps(body, default=str)


def error_response(message: str, status_code: int, **extra: Any) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "error": message}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def install_error_handlers(app: FastAPI, *, available_endpoints: Iterable[str]) -> None:
    """Render every failure with the ``{"success": false}`` envelope."""

    endpoints = list(available_endpoints)

    @app.exception_handler(GatewayError)
    async def _gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
        if exc.http_status >= 500:
            logger.error("Request failed", path=request.url.path, error=str(exc))
        return error_response(str(exc), exc.http_status)

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = []
        for item in exc.errors():
            location = ".".join(str(part) for part in item.get("loc", ()) if part != "body")
            problems.append(f"{location}: {item.get('msg')}" if location else str(item.get("msg")))
        return error_response("Invalid request: " + "; ".join(problems), status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return error_response("Endpoint not found", exc.status_code, availableEndpoints=endpoints)
        return error_response(str(exc.detail), exc.status_code)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.opt(exception=exc).error("Unhandled error", path=request.url.path)
        return error_response(
            "Something went wrong",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=str(exc),
        )


__all__ = [
    "CustomerNotFoundError",
    "EmailDeliveryError",
    "GatewayError",
    "MalformedResponseError",
    "NotConfiguredError",
    "UpstreamError",
    "UpstreamProtocolError",
    "UpstreamRequestError",
    "ValidationError",
    "error_response",
    "install_error_handlers",
    "truncate",
]
