"""Membership protocols - read models handed to callers.

Plain frozen values so callers never hold live ORM rows.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class BenefitInfo:
    description: str
    value: str | None = None


@dataclass(frozen=True)
class RewardInfo:
    """Reward as seen at read time (or as captured in a redemption snapshot)."""

    id: int
    name: str
    description: str
    points_cost: int
    is_available: bool

    @classmethod
    def from_snapshot(cls, data: dict) -> "RewardInfo":
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            points_cost=data["points_cost"],
            is_available=data.get("is_available", True),
        )


@dataclass(frozen=True)
class TierInfo:
    """Tier with its benefits and rewards."""

    id: int
    name: str
    tier_type: str
    description: str
    points_required: int
    is_active: bool
    benefits: list[BenefitInfo] = field(default_factory=list)
    rewards: list[RewardInfo] = field(default_factory=list)


@dataclass(frozen=True)
class MembershipInfo:
    """Membership snapshot for one account."""

    code: str
    tier: TierInfo | None
    status: str
    points: int
    eligible_tiers: list[TierInfo]
    start_date: datetime
    end_date: datetime


@dataclass(frozen=True)
class AvailableReward:
    """Redeemable reward and the tier that offers it."""

    reward: RewardInfo
    tier_id: int
    tier_name: str


@dataclass(frozen=True)
class RedemptionInfo:
    """
    History entry.

    ``source`` tells where ``reward`` came from: "snapshot" (captured at
    redemption), "catalog" (legacy record, looked up live) or "missing"
    (legacy record whose reward no longer exists; ``reward`` is None).
    """

    id: int
    reward: RewardInfo | None
    reward_ref: int
    tier_id: int | None
    tier_name: str
    redeemed_at: datetime
    points_spent: int
    status: str
    source: str = "snapshot"


@dataclass(frozen=True)
class RedemptionOutcome:
    """Result of a successful redemption."""

    redemption: RedemptionInfo
    points: int
    tier: TierInfo | None
    previous_tier_id: int | None
    tier_changed: bool


@dataclass(frozen=True)
class AdjustmentOutcome:
    """Result of an administrative points adjustment."""

    membership: MembershipInfo
    previous_points: int
    tier_changed: bool
