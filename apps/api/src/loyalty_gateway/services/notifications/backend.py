"""Email backend implementations for confirmation messages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol

import httpx

from loyalty_gateway.core.errors import EmailDeliveryError, NotConfiguredError, truncate
from loyalty_gateway.core.settings import Settings


@dataclass(frozen=True, slots=True)
class OutboundEmail:
    """A fully rendered transactional email."""

    sender: str
    recipient: str
    subject: str
    html: str
    text: str

    def as_payload(self) -> Dict[str, Any]:
        return {
            "from": self.sender,
            "to": self.recipient,
            "subject": self.subject,
            "html": self.html,
            "text": self.text,
        }


class EmailBackend(Protocol):
    """Minimal protocol for sending transactional emails."""

    provider: str

    async def send_email(self, message: OutboundEmail) -> str | None:
        """Deliver ``message`` and return the provider message id."""
        ...


class ResendEmailBackend:
    """Sends email through the Resend HTTP API."""

    provider = "resend"

    def __init__(self, http_client: httpx.AsyncClient, *, api_key: str | None, api_url: str) -> None:
        if not api_key:
            raise NotConfiguredError("resend_api_key", service="Email service")
        self._http = http_client
        self._api_key = api_key
        self._api_url = api_url

    @classmethod
    def from_settings(cls, http_client: httpx.AsyncClient, settings: Settings) -> "ResendEmailBackend":
        return cls(http_client, api_key=settings.resend_api_key, api_url=settings.resend_api_url)

    async def send_email(self, message: OutboundEmail) -> str | None:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = await self._http.post(self._api_url, headers=headers, json=message.as_payload())
        except httpx.HTTPError as exc:
            raise EmailDeliveryError(f"Resend API error: {exc}") from exc

        if not response.is_success:
            raise EmailDeliveryError(
                f"Resend API error {response.status_code}: {truncate(response.text)}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError:
            return None
        message_id = body.get("id") if isinstance(body, dict) else None
        return str(message_id) if message_id else None


@dataclass
class InMemoryEmailBackend:
    """Test backend storing outbound messages in memory."""

    provider: str = "memory"
    sent_messages: List[OutboundEmail] = field(default_factory=list)
    fail_with: Exception | None = None

    async def send_email(self, message: OutboundEmail) -> str | None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent_messages.append(message)
        return f"msg-{len(self.sent_messages)}"


__all__ = ["EmailBackend", "InMemoryEmailBackend", "OutboundEmail", "ResendEmailBackend"]
