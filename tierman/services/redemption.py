"""Redemption engine and history.

redeem() runs inside services.account.mutate(): the history row is inserted
in the same transaction as the balance write, so a lost version race or any
error rolls both back together.
"""

import logging

from tierman import resolver
from tierman.exceptions import TierError
from tierman.models import MemberAccount, Redemption, RedemptionStatus, Reward, Tier
from tierman.protocols import RedemptionInfo, RewardInfo
from tierman.services import catalog, ledger

logger = logging.getLogger(__name__)


def redeem(account: MemberAccount, tier_id: int, reward_id: int, tiers: list[Tier]) -> Redemption:
    """
    Exchange points for a reward of any tier the account qualifies for.

    Checks, first failure wins: account not cancelled; tier in the active
    catalog; reward under that tier; reward available; balance covers the
    cost; balance meets the tier threshold.

    Effects: balance debited, tier re-resolved (may downgrade), redemption
    recorded with a value copy of the reward.

    Raises:
        TierError: ACCOUNT_CANCELLED, TIER_NOT_FOUND, REWARD_NOT_FOUND,
            REWARD_UNAVAILABLE, INSUFFICIENT_POINTS, TIER_NOT_ELIGIBLE,
            INVARIANT_VIOLATION
    """
    if account.is_cancelled:
        raise TierError("ACCOUNT_CANCELLED", account_code=account.code)

    tier = catalog.find(tiers, tier_id)
    if tier is None:
        raise TierError("TIER_NOT_FOUND", tier_id=tier_id)

    reward = catalog.find_reward(tier, reward_id)
    if reward is None:
        raise TierError("REWARD_NOT_FOUND", tier_id=tier_id, reward_id=reward_id)

    if not reward.is_available:
        raise TierError("REWARD_UNAVAILABLE", reward_id=reward_id)

    if account.points_balance < reward.points_cost:
        raise TierError(
            "INSUFFICIENT_POINTS",
            message="Not enough points to redeem this reward",
            available=account.points_balance,
            requested=reward.points_cost,
        )

    if account.points_balance < tier.points_required:
        raise TierError(
            "TIER_NOT_ELIGIBLE",
            tier_id=tier_id,
            available=account.points_balance,
            required=tier.points_required,
        )

    snapshot = reward.snapshot()
    cost = snapshot["points_cost"]
    balance_before = account.points_balance

    ledger.subtract(account, cost, tiers)
    # Redemption always re-resolves, whatever the membership status
    account.current_tier = resolver.resolve(account.points_balance, tiers)

    redemption = Redemption.objects.create(
        account=account,
        reward_ref=reward.pk,
        reward_snapshot=snapshot,
        tier=tier,
        tier_name=tier.name,
        points_spent=cost,
    )

    debited = balance_before - account.points_balance
    if debited != redemption.points_spent:
        raise TierError(
            "INVARIANT_VIOLATION",
            message="Points debited differ from the reward cost",
            points_spent=redemption.points_spent,
            points_debited=debited,
        )

    logger.info(
        "%s redeemed %s (%d pts) from %s, balance now %d",
        account.code,
        reward.name,
        redemption.points_spent,
        tier.name,
        account.points_balance,
    )
    return redemption


def to_info(redemption: Redemption) -> RedemptionInfo:
    """
    History entry for a redemption.

    Records written before snapshots existed have an empty reward_snapshot;
    for those the live reward is looked up by reward_ref (best effort).
    """
    reward = None
    source = "snapshot"

    if redemption.reward_snapshot:
        reward = RewardInfo.from_snapshot(redemption.reward_snapshot)
    else:
        live = Reward.objects.filter(
            pk=redemption.reward_ref,
            tier_id=redemption.tier_id,
        ).first()
        if live is not None:
            reward = catalog.reward_info(live)
            source = "catalog"
        else:
            source = "missing"

    return RedemptionInfo(
        id=redemption.pk,
        reward=reward,
        reward_ref=redemption.reward_ref,
        tier_id=redemption.tier_id,
        tier_name=redemption.tier_name,
        redeemed_at=redemption.redeemed_at,
        points_spent=redemption.points_spent,
        status=redemption.status,
        source=source,
    )


def history(account: MemberAccount, limit: int | None = None) -> list[RedemptionInfo]:
    """Redemptions of ``account``, oldest first (last ``limit`` if given)."""
    qs = Redemption.objects.filter(account=account).order_by("redeemed_at", "id")
    if limit is not None:
        total = qs.count()
        qs = qs[max(0, total - limit):]
    return [to_info(r) for r in qs]


def mark_used(account: MemberAccount, redemption_id: int) -> Redemption:
    """
    Flag a redeemed reward as used. Only the status column is written.

    Raises:
        TierError: REDEMPTION_NOT_FOUND, INVALID_STATUS
    """
    try:
        redemption = Redemption.objects.get(pk=redemption_id, account=account)
    except Redemption.DoesNotExist:
        raise TierError("REDEMPTION_NOT_FOUND", redemption_id=redemption_id)

    if redemption.status != RedemptionStatus.REDEEMED:
        raise TierError(
            "INVALID_STATUS",
            message=f"Redemption is already {redemption.status}",
            redemption_id=redemption_id,
        )

    redemption.status = RedemptionStatus.USED
    redemption.save(update_fields=["status"])
    return redemption
