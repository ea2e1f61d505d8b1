"""One-shot batch jobs bridging POS files and the upstream providers."""

from .pos_export import export_customer_points
from .pos_import import import_pos_orders

__all__ = ["export_customer_points", "import_pos_orders"]
