"""Tierman protocols."""

from tierman.protocols.membership import (
    BenefitInfo,
    RewardInfo,
    TierInfo,
    MembershipInfo,
    AvailableReward,
    RedemptionInfo,
    RedemptionOutcome,
    AdjustmentOutcome,
)

__all__ = [
    # Catalog
    "BenefitInfo",
    "RewardInfo",
    "TierInfo",
    # Membership
    "MembershipInfo",
    "AvailableReward",
    "AdjustmentOutcome",
    # Redemptions
    "RedemptionInfo",
    "RedemptionOutcome",
]
