"""Notification service package."""

from .backend import EmailBackend, InMemoryEmailBackend, OutboundEmail, ResendEmailBackend
from .webhooks import RedemptionEvent, RedemptionWebhookHandler

__all__ = [
    "EmailBackend",
    "InMemoryEmailBackend",
    "OutboundEmail",
    "RedemptionEvent",
    "RedemptionWebhookHandler",
    "ResendEmailBackend",
]
