from .client import ShopifyClient

__all__ = ["ShopifyClient"]
