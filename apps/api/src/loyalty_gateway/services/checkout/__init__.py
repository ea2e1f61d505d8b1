from .orchestrator import CartLine, CheckoutOrchestrator, CheckoutResult

__all__ = ["CartLine", "CheckoutOrchestrator", "CheckoutResult"]
