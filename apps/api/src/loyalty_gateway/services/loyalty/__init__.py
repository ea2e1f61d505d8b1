"""Loyalty service exports."""

from .client import RivoClient
from .service import LoyaltyGatewayService

__all__ = ["LoyaltyGatewayService", "RivoClient"]
