"""Eligibility - which tiers a balance qualifies for, and self-selection."""

from tierman import resolver
from tierman.exceptions import TierError
from tierman.models import MemberAccount, MembershipStatus, Reward, Tier
from tierman.services import catalog


def eligible_tiers(account: MemberAccount, tiers: list[Tier]) -> list[Tier]:
    return resolver.eligible(account.points_balance, tiers)


def choose_tier(account: MemberAccount, tier_id: int, tiers: list[Tier]) -> Tier:
    """
    Put ``account`` on a tier it qualifies for, possibly below the best one.

    Activates the membership.

    Raises:
        TierError: TIER_NOT_FOUND (missing or inactive), INSUFFICIENT_POINTS
    """
    tier = catalog.find(tiers, tier_id)
    if tier is None:
        raise TierError("TIER_NOT_FOUND", tier_id=tier_id)

    if tier.points_required > account.points_balance:
        raise TierError(
            "INSUFFICIENT_POINTS",
            message="Not enough points for this tier",
            available=account.points_balance,
            required=tier.points_required,
        )

    account.membership_status = MembershipStatus.ACTIVE
    account.current_tier = tier
    return tier


def available_rewards(points: int, tiers: list[Tier]) -> list[tuple[Tier, Reward]]:
    """Available rewards of every tier ``points`` qualifies for, best tier first."""
    return [
        (tier, reward)
        for tier in resolver.eligible(points, tiers)
        for reward in tier.rewards.all()
        if reward.is_available
    ]
