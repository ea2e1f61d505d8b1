"""Shared response handling for upstream provider adapters."""

from __future__ import annotations

from typing import Any, Dict

import httpx
from loguru import logger

from loyalty_gateway.core.errors import UpstreamProtocolError, UpstreamRequestError


def is_json_response(response: httpx.Response) -> bool:
    content_type = response.headers.get("content-type", "")
    return "application/json" in content_type.lower()


def parse_json_response(provider: str, response: httpx.Response) -> Any:
    """Return the decoded body of a 2xx JSON response or raise a normalized error."""

    if not is_json_response(response):
        raise UpstreamProtocolError(provider, status_code=response.status_code, body_text=response.text)

    try:
        payload = response.json()
    except ValueError as exc:
        raise UpstreamProtocolError(
            provider,
            status_code=response.status_code,
            body_text=response.text,
        ) from exc

    if not response.is_success:
        raise UpstreamRequestError(provider, status_code=response.status_code, body=payload)

    return payload


async def send_request(
    provider: str,
    client: httpx.AsyncClient,
    method: str,
    url: str,
    **kwargs: Any,
) -> Any:
    """Issue a single request; no retries are attempted."""

    with logger.contextualize(provider=provider):
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Upstream call failed", error=str(exc) or exc.__class__.__name__)
            raise UpstreamRequestError(provider, detail=str(exc) or exc.__class__.__name__) from exc

        log = logger.bind(upstream_status=response.status_code)
        if response.is_success:
            log.debug("Upstream call completed", url=str(response.request.url))
        else:
            log.warning("Upstream call returned an error status", url=str(response.request.url))
        return parse_json_response(provider, response)


def as_mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


__all__ = ["as_mapping", "is_json_response", "parse_json_response", "send_request"]
