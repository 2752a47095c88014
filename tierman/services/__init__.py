"""Tierman services.

Function modules composed by tierman.service.MembershipService:
- catalog: tiers, benefits and rewards (TierCatalog)
- eligibility: qualifying tiers and self-selection
- ledger: balance mutations with tier re-resolution (PointsLedger)
- redemption: reward redemption and history (RedemptionEngine)
- account: account lookup, enrollment and versioned writes
"""

from tierman.services import catalog
from tierman.services import eligibility
from tierman.services import ledger
from tierman.services import redemption
from tierman.services import account

__all__ = ["catalog", "eligibility", "ledger", "redemption", "account"]
