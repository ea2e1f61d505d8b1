"""POS checkout endpoint."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import AliasChoices, BaseModel, Field

from loyalty_gateway.api.dependencies.clients import get_checkout_orchestrator
from loyalty_gateway.services.checkout.orchestrator import CartLine, CheckoutOrchestrator

router = APIRouter(tags=["Checkout"])


class CheckoutItem(BaseModel):
    id: Optional[str | int] = Field(None, validation_alias=AliasChoices("id", "productId"))
    name: str = Field("Item", description="Display name used in the confirmation email")
    price: Decimal = Field(..., ge=0, description="Unit price")
    quantity: int = Field(..., gt=0)


class CheckoutRequest(BaseModel):
    items: List[CheckoutItem] = Field(default_factory=list)
    customerEmail: Optional[str] = None
    pointsEarned: Optional[int] = Field(None, description="Client estimate; recomputed server-side")


@router.post("/checkout", summary="Place a POS order and accrue loyalty points")
async def checkout(
    payload: CheckoutRequest,
    orchestrator: CheckoutOrchestrator = Depends(get_checkout_orchestrator),
) -> Dict[str, Any]:
    lines = [
        CartLine(product_id=item.id, name=item.name, quantity=item.quantity, unit_price=item.price)
        for item in payload.items
    ]
    result = await orchestrator.checkout(lines, payload.customerEmail, client_points=payload.pointsEarned)
    return result.to_dict()
