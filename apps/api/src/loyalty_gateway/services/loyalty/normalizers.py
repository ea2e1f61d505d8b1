"""Pure mappings from loyalty-provider JSON into the flat shapes the POS form uses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence

from loyalty_gateway.core.errors import MalformedResponseError
from loyalty_gateway.services.upstream import as_mapping

REWARD_SOURCE_POINTS = "points"


def extract_path(payload: Mapping[str, Any], path: str) -> Any:
    target: Any = payload
    for segment in path.split("."):
        if not isinstance(target, Mapping):
            return None
        target = target.get(segment)
        if target is None:
            return None
    return target


def first_present(payload: Mapping[str, Any], paths: Sequence[str]) -> Any:
    """Return the first truthy value found along ``paths``, in order."""

    for path in paths:
        value = extract_path(payload, path)
        if value:
            return value
    return None


def _as_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value.strip()))
        except ValueError:
            return default
    return default


def _as_str(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


@dataclass(frozen=True)
class Reward:
    id: Any
    name: str | None
    points: Any
    value: Any
    description: str | None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "points": self.points,
            "value": self.value,
            "description": self.description,
        }


@dataclass(frozen=True)
class CustomerProfile:
    email: str
    first_name: str
    last_name: str
    points: int
    credits: int
    vip_tier: str | None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "points": self.points,
            "credits": self.credits,
            "vipTier": self.vip_tier,
        }


@dataclass(frozen=True)
class RedemptionDetails:
    id: Any = None
    points_redeemed: Any = None
    credits_redeemed: Any = None
    applied_at: Any = None
    discount_code: Any = None
    expires_at: Any = None
    used_at: Any = None


@dataclass(frozen=True)
class RedeemedReward:
    id: Any = None
    name: Any = None
    type: Any = None
    value: Any = None
    display_text: Any = None


@dataclass(frozen=True)
class RedemptionCustomer:
    email: Any = None
    first_name: Any = None
    last_name: Any = None
    points_remaining: Any = None
    credits_remaining: Any = None
    vip_tier: Any = None
    loyalty_status: Any = None


@dataclass(frozen=True)
class RedemptionReceipt:
    redemption: RedemptionDetails
    reward: RedeemedReward
    customer: RedemptionCustomer

    def to_dict(self) -> Dict[str, Any]:
        return {
            "redemption": {
                "id": self.redemption.id,
                "pointsRedeemed": self.redemption.points_redeemed,
                "creditsRedeemed": self.redemption.credits_redeemed,
                "appliedAt": self.redemption.applied_at,
                "discountCode": self.redemption.discount_code,
                "expiresAt": self.redemption.expires_at,
                "usedAt": self.redemption.used_at,
            },
            "reward": {
                "id": self.reward.id,
                "name": self.reward.name,
                "type": self.reward.type,
                "value": self.reward.value,
                "displayText": self.reward.display_text,
            },
            "customer": {
                "email": self.customer.email,
                "firstName": self.customer.first_name,
                "lastName": self.customer.last_name,
                "pointsRemaining": self.customer.points_remaining,
                "creditsRemaining": self.customer.credits_remaining,
                "vipTier": self.customer.vip_tier,
                "loyaltyStatus": self.customer.loyalty_status,
            },
        }


def _reward_records(payload: Any) -> List[Any]:
    if isinstance(payload, list):
        return payload
    body = as_mapping(payload)
    for key in ("data", "rewards"):
        records = body.get(key)
        if isinstance(records, list):
            return records
        # Some responses nest the list one level deeper: {"rewards": {"data": [...]}}
        nested = as_mapping(records).get("data")
        if isinstance(nested, list):
            return nested
    return []


def normalize_rewards(payload: Any) -> List[Reward]:
    """Keep enabled, points-sourced rewards; anything else is dropped silently."""

    rewards: List[Reward] = []
    for record in _reward_records(payload):
        if not isinstance(record, Mapping):
            continue
        attributes = as_mapping(record.get("attributes"))
        if attributes.get("source") != REWARD_SOURCE_POINTS or attributes.get("enabled") is not True:
            continue
        rewards.append(
            Reward(
                id=record.get("id"),
                name=attributes.get("name"),
                points=attributes.get("points_amount"),
                value=attributes.get("reward_value"),
                description=attributes.get("pretty_display_rewards"),
            )
        )
    return rewards


def normalize_customer(payload: Any) -> CustomerProfile | None:
    """Flatten a customer lookup; ``None`` means the customer was not found."""

    data = as_mapping(as_mapping(payload).get("data"))
    attributes = data.get("attributes")
    if not isinstance(attributes, Mapping):
        return None
    email = _as_str(attributes.get("email"))
    if not email:
        return None
    vip_tier = as_mapping(attributes.get("vip_tier")).get("name")
    return CustomerProfile(
        email=email,
        first_name=_as_str(attributes.get("first_name")),
        last_name=_as_str(attributes.get("last_name")),
        points=max(_as_int(attributes.get("points_tally")), 0),
        credits=max(_as_int(attributes.get("credits_tally")), 0),
        vip_tier=vip_tier if isinstance(vip_tier, str) and vip_tier else None,
    )


def normalize_redemption(payload: Any) -> RedemptionReceipt:
    body = as_mapping(payload)
    if "data" not in body or body.get("data") is None:
        raise MalformedResponseError(
            "Loyalty provider redemption response has no data node",
            provider="Rivo",
        )
    data = as_mapping(body.get("data"))
    attributes = as_mapping(data.get("attributes"))
    reward = as_mapping(attributes.get("reward"))
    customer = as_mapping(attributes.get("customer"))

    return RedemptionReceipt(
        redemption=RedemptionDetails(
            id=attributes.get("id", data.get("id")),
            points_redeemed=attributes.get("points_amount"),
            credits_redeemed=attributes.get("credits_amount"),
            applied_at=attributes.get("applied_at"),
            discount_code=attributes.get("code"),
            expires_at=attributes.get("expires_at"),
            used_at=attributes.get("used_at"),
        ),
        reward=RedeemedReward(
            id=reward.get("id"),
            name=attributes.get("name") or reward.get("name"),
            type=reward.get("reward_type"),
            value=reward.get("reward_value"),
            display_text=reward.get("pretty_display_rewards"),
        ),
        customer=RedemptionCustomer(
            email=customer.get("email"),
            first_name=customer.get("first_name"),
            last_name=customer.get("last_name"),
            points_remaining=customer.get("points_tally"),
            credits_remaining=customer.get("credits_tally"),
            vip_tier=as_mapping(customer.get("vip_tier")).get("name"),
            loyalty_status=customer.get("loyalty_status"),
        ),
    )


def customer_list(payload: Any) -> Any:
    """Unwrap the customer list the provider returns under varying keys."""

    body = as_mapping(payload)
    return body.get("customers") or body.get("data") or payload


__all__ = [
    "CustomerProfile",
    "Reward",
    "RedemptionReceipt",
    "customer_list",
    "extract_path",
    "first_present",
    "normalize_customer",
    "normalize_redemption",
    "normalize_rewards",
]
