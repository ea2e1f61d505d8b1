"""Loyalty lookup and redemption endpoints used by the POS form."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from loyalty_gateway.api.dependencies.clients import get_loyalty_service
from loyalty_gateway.services.loyalty.service import LoyaltyGatewayService


router = APIRouter(tags=["Loyalty"])


class RedeemPointsRequest(BaseModel):
    email: Optional[str] = Field(None, description="Customer email used as the provider identifier")
    rewardId: Optional[str | int] = Field(None, description="Provider reward id")
    rewardName: Optional[str] = Field(None, description="Display name, for logging only")
    points: Optional[int | float | str] = Field(None, description="Points amount forwarded verbatim")
    credits: Optional[int | float | str] = Field(None, description="Credits amount forwarded verbatim")


@router.get("/customers", summary="List loyalty customers")
async def list_customers(service: LoyaltyGatewayService = Depends(get_loyalty_service)) -> Dict[str, Any]:
    return await service.list_customers()


@router.get("/rewards", summary="List redeemable point rewards")
async def list_rewards(service: LoyaltyGatewayService = Depends(get_loyalty_service)) -> Dict[str, Any]:
    return await service.list_rewards()


@router.get("/points/{email}", summary="Customer points balance")
async def get_customer_points(
    email: str,
    service: LoyaltyGatewayService = Depends(get_loyalty_service),
) -> Dict[str, Any]:
    return await service.get_customer_points(email)


@router.post("/redeem-points", summary="Redeem points for a reward")
async def redeem_points(
    payload: RedeemPointsRequest,
    service: LoyaltyGatewayService = Depends(get_loyalty_service),
) -> Dict[str, Any]:
    return await service.redeem_points(
        email=payload.email,
        reward_id=payload.rewardId,
        reward_name=payload.rewardName,
        points=payload.points,
        credits=payload.credits,
    )
