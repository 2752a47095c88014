"""Tierman models.

Catalog:
- Tier, TierType, TierBenefit, Reward

Members:
- MemberAccount, MembershipStatus
- Redemption, RedemptionStatus (append-only history)
"""

from tierman.models.tier import Tier, TierType, TierBenefit, Reward
from tierman.models.account import MemberAccount, MembershipStatus
from tierman.models.redemption import Redemption, RedemptionStatus

__all__ = [
    # Catalog
    "Tier",
    "TierType",
    "TierBenefit",
    "Reward",
    # Members
    "MemberAccount",
    "MembershipStatus",
    # History
    "Redemption",
    "RedemptionStatus",
]
