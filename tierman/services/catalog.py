"""Tier catalog service - the authoritative set of tiers, benefits and rewards.

Readers take a snapshot() per operation: active tiers ordered by id with
benefits and rewards prefetched. Resolution ties are broken by that order.

Deleting a tier reassigns the accounts that pointed at it: active accounts
are re-resolved against what is left of the catalog, the others move to the
new floor tier.
"""

import logging

from django.db import transaction

from tierman import resolver
from tierman.exceptions import TierError
from tierman.gates import Gates
from tierman.models import MemberAccount, Reward, Tier, TierBenefit
from tierman.protocols import BenefitInfo, RewardInfo, TierInfo

logger = logging.getLogger(__name__)

TIER_FIELDS = frozenset({"name", "tier_type", "description", "points_required", "is_active", "benefits"})
REWARD_FIELDS = frozenset({"name", "description", "points_cost", "is_available"})


def _catalog_qs():
    return Tier.objects.prefetch_related("benefits", "rewards").order_by("id")


def snapshot() -> list[Tier]:
    """Active tiers, in insertion order, with benefits and rewards loaded."""
    return list(_catalog_qs().filter(is_active=True))


def all_tiers() -> list[Tier]:
    """Every tier including inactive ones (administrative listing)."""
    return list(_catalog_qs())


def get(tier_id: int, active_only: bool = False) -> Tier:
    """
    Get a tier by id.

    Raises:
        TierError: TIER_NOT_FOUND
    """
    qs = _catalog_qs()
    if active_only:
        qs = qs.filter(is_active=True)
    try:
        return qs.get(pk=tier_id)
    except Tier.DoesNotExist:
        raise TierError("TIER_NOT_FOUND", tier_id=tier_id)


def floor_tier() -> Tier | None:
    return resolver.floor(snapshot())


def find(tiers: list[Tier], tier_id: int) -> Tier | None:
    """Tier with ``tier_id`` inside an already-loaded snapshot."""
    for tier in tiers:
        if tier.pk == tier_id:
            return tier
    return None


def find_reward(tier: Tier, reward_id: int) -> Reward | None:
    """Reward owned by ``tier`` (uses the prefetched rewards)."""
    for reward in tier.rewards.all():
        if reward.pk == reward_id:
            return reward
    return None


def _set_benefits(tier: Tier, benefits) -> None:
    tier.benefits.all().delete()
    rows = []
    for position, benefit in enumerate(benefits or []):
        if isinstance(benefit, str):
            benefit = {"description": benefit}
        rows.append(
            TierBenefit(
                tier=tier,
                description=benefit["description"],
                value=benefit.get("value") or "",
                position=position,
            )
        )
    TierBenefit.objects.bulk_create(rows)


# ======================================================================
# Tiers
# ======================================================================


def create_tier(
    name: str,
    points_required: int,
    tier_type: str = "basic",
    description: str = "",
    benefits: list | None = None,
    rewards: list[dict] | None = None,
    is_active: bool = True,
) -> Tier:
    """
    Create a tier with its benefits and rewards.

    Args:
        name: Unique tier name
        points_required: Threshold (integer >= 0)
        tier_type: TierType value
        description: Free text
        benefits: List of strings or {"description", "value"} dicts
        rewards: List of {"name", "points_cost", "description", "is_available"}
        is_active: Whether the tier takes part in resolution

    Raises:
        TierError: INVALID_THRESHOLD, TIER_NAME_TAKEN, INVALID_AMOUNT
    """
    Gates.tier_threshold(points_required)
    Gates.tier_name_uniqueness(name)
    for reward in rewards or []:
        Gates.points_amount(reward.get("points_cost", 0))

    with transaction.atomic():
        tier = Tier.objects.create(
            name=name,
            tier_type=tier_type,
            description=description,
            points_required=points_required,
            is_active=is_active,
        )
        _set_benefits(tier, benefits)
        for reward in rewards or []:
            Reward.objects.create(
                tier=tier,
                name=reward["name"],
                description=reward.get("description", ""),
                points_cost=reward.get("points_cost", 0),
                is_available=reward.get("is_available", True),
            )

    logger.info("Tier created: %s (%d pts)", name, points_required)
    return get(tier.pk)


def update_tier(tier_id: int, **patch) -> Tier:
    """
    Update tier fields. ``benefits`` replaces the whole benefit list.

    Raises:
        TierError: TIER_NOT_FOUND, INVALID_TIER_FIELD, INVALID_THRESHOLD,
            TIER_NAME_TAKEN
    """
    unknown = set(patch) - TIER_FIELDS
    if unknown:
        raise TierError("INVALID_TIER_FIELD", fields=sorted(unknown))
    if "points_required" in patch:
        Gates.tier_threshold(patch["points_required"])
    if "name" in patch:
        Gates.tier_name_uniqueness(patch["name"], exclude_tier_id=tier_id)

    with transaction.atomic():
        tier = get(tier_id)
        benefits = patch.pop("benefits", None)
        for key, value in patch.items():
            setattr(tier, key, value)
        tier.save()
        if benefits is not None:
            _set_benefits(tier, benefits)

    logger.info("Tier %s updated: %s", tier_id, sorted(patch))
    return get(tier_id)


def delete_tier(tier_id: int) -> int:
    """
    Delete a tier and reassign its accounts.

    Rewards and benefits go with the tier. Redemptions keep their snapshot
    and tier_name; their tier reference is nulled.

    Returns:
        Number of accounts reassigned

    Raises:
        TierError: TIER_NOT_FOUND
    """
    from tierman.services import account as account_service

    def reassign(account, tiers):
        if account.is_active:
            account.current_tier = resolver.resolve(account.points_balance, tiers)
        else:
            account.current_tier = resolver.floor(tiers)

    with transaction.atomic():
        tier = get(tier_id)
        codes = list(
            MemberAccount.objects.filter(current_tier=tier).values_list("code", flat=True)
        )
        tier.delete()
        for code in codes:
            account_service.mutate(code, reassign)

    logger.info("Tier %s deleted, %d accounts reassigned", tier_id, len(codes))
    return len(codes)


# ======================================================================
# Rewards
# ======================================================================


def get_reward(tier_id: int, reward_id: int) -> Reward:
    """
    Raises:
        TierError: REWARD_NOT_FOUND
    """
    try:
        return Reward.objects.get(pk=reward_id, tier_id=tier_id)
    except Reward.DoesNotExist:
        raise TierError("REWARD_NOT_FOUND", tier_id=tier_id, reward_id=reward_id)


def add_reward(
    tier_id: int,
    name: str,
    points_cost: int,
    description: str = "",
    is_available: bool = True,
) -> Reward:
    """
    Raises:
        TierError: TIER_NOT_FOUND, INVALID_AMOUNT
    """
    Gates.points_amount(points_cost)
    tier = get(tier_id)
    reward = Reward.objects.create(
        tier=tier,
        name=name,
        description=description,
        points_cost=points_cost,
        is_available=is_available,
    )
    logger.info("Reward %s added to tier %s (%d pts)", name, tier_id, points_cost)
    return reward


def update_reward(tier_id: int, reward_id: int, **patch) -> Reward:
    """
    Raises:
        TierError: REWARD_NOT_FOUND, INVALID_TIER_FIELD, INVALID_AMOUNT
    """
    unknown = set(patch) - REWARD_FIELDS
    if unknown:
        raise TierError("INVALID_TIER_FIELD", fields=sorted(unknown))
    if "points_cost" in patch:
        Gates.points_amount(patch["points_cost"])

    reward = get_reward(tier_id, reward_id)
    for key, value in patch.items():
        setattr(reward, key, value)
    reward.save()
    return reward


def remove_reward(tier_id: int, reward_id: int) -> None:
    """
    Raises:
        TierError: REWARD_NOT_FOUND
    """
    get_reward(tier_id, reward_id).delete()
    logger.info("Reward %s removed from tier %s", reward_id, tier_id)


# ======================================================================
# Read models
# ======================================================================


def reward_info(reward: Reward) -> RewardInfo:
    return RewardInfo.from_snapshot(reward.snapshot())


def tier_info(tier: Tier | None) -> TierInfo | None:
    if tier is None:
        return None
    return TierInfo(
        id=tier.pk,
        name=tier.name,
        tier_type=tier.tier_type,
        description=tier.description,
        points_required=tier.points_required,
        is_active=tier.is_active,
        benefits=[BenefitInfo(b.description, b.value or None) for b in tier.benefits.all()],
        rewards=[reward_info(r) for r in tier.rewards.all()],
    )
