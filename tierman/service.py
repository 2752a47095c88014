"""
Tierman public API.

CATALOG:
    MembershipService.list_active_tiers()       - Active tiers with benefits/rewards
    MembershipService.list_tiers()              - Admin: every tier incl. inactive
    MembershipService.get_tier(tier_id)         - Single tier
    MembershipService.create_tier(...)          - Admin: create tier
    MembershipService.update_tier(tier_id, ...) - Admin: patch tier
    MembershipService.delete_tier(tier_id)      - Admin: delete tier, reassign accounts

MEMBERSHIP:
    MembershipService.enroll(code)              - Create account (idempotent)
    MembershipService.get_membership(code)      - Tier, status, points, eligible tiers
    MembershipService.choose_tier(code, tier_id)
    MembershipService.adjust_points(code, amount, op)
    MembershipService.set_status(code, status)

REWARDS:
    MembershipService.list_available_rewards(code)
    MembershipService.redeem_reward(code, tier_id, reward_id)
    MembershipService.list_redemption_history(code)

Every method returns an OperationResult. Expected failures (not found,
validation, business rules) come back as ``ok=False`` with an error code;
only fatal errors raise.
"""

import functools
import logging
from dataclasses import dataclass, field
from typing import Any

from django.db import transaction

from tierman.conf import tierman_settings
from tierman.exceptions import TierError
from tierman.gates import Gates
from tierman.models import MemberAccount, MembershipStatus, Tier
from tierman.protocols import (
    AdjustmentOutcome,
    AvailableReward,
    MembershipInfo,
    RedemptionOutcome,
)
from tierman.services import account as accounts
from tierman.services import catalog, eligibility, ledger, redemption
from tierman.signals import (
    catalog_changed,
    membership_cancelled,
    reward_redeemed,
    tier_changed,
)

logger = logging.getLogger(__name__)


@dataclass
class OperationResult:
    """Outcome of a MembershipService call."""

    ok: bool
    value: Any = None
    error_code: str | None = None
    message: str | None = None
    kind: str | None = None
    data: dict = field(default_factory=dict)

    @classmethod
    def success(cls, value: Any = None) -> "OperationResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: TierError) -> "OperationResult":
        return cls(
            ok=False,
            error_code=error.code,
            message=error.message,
            kind=error.kind,
            data=error.data,
        )

    def unwrap(self) -> Any:
        """Value of a successful result; re-raises the error otherwise."""
        if not self.ok:
            raise TierError(self.error_code, message=self.message, **self.data)
        return self.value


def _as_result(method):
    """Wrap the return value in OperationResult; non-fatal TierErrors become failures."""

    @functools.wraps(method)
    def wrapper(cls, *args, **kwargs):
        try:
            return OperationResult.success(method(cls, *args, **kwargs))
        except TierError as e:
            if e.is_fatal:
                raise
            return OperationResult.failure(e)

    return wrapper


class MembershipService:
    """
    Tierman public API.

    Uses @classmethod for extensibility. All account writes go through
    services.account.mutate() (optimistic version check with retry).
    Signals are sent once the transaction commits.
    """

    # ======================================================================
    # CATALOG
    # ======================================================================

    @classmethod
    @_as_result
    def list_active_tiers(cls):
        """Active tiers, in catalog order, with benefits and rewards."""
        return [catalog.tier_info(t) for t in catalog.snapshot()]

    @classmethod
    @_as_result
    def list_tiers(cls):
        """Every tier including inactive ones (administrative listing)."""
        return [catalog.tier_info(t) for t in catalog.all_tiers()]

    @classmethod
    @_as_result
    def get_tier(cls, tier_id: int):
        return catalog.tier_info(catalog.get(tier_id))

    @classmethod
    @_as_result
    def create_tier(cls, name: str, points_required: int, **fields):
        """
        Create a tier.

        Args:
            name: Unique tier name
            points_required: Threshold (integer >= 0)
            **fields: tier_type, description, benefits, rewards, is_active
        """
        tier = catalog.create_tier(name, points_required, **fields)
        cls._emit_catalog_changed(tier.pk, "created")
        return catalog.tier_info(tier)

    @classmethod
    @_as_result
    def update_tier(cls, tier_id: int, **patch):
        """
        Patch a tier.

        Accounts are not re-resolved here; run reconcile_all() (or the
        tierman_reconcile command) after threshold changes.
        """
        tier = catalog.update_tier(tier_id, **patch)
        cls._emit_catalog_changed(tier_id, "updated")
        return catalog.tier_info(tier)

    @classmethod
    @_as_result
    def delete_tier(cls, tier_id: int):
        """Delete a tier. Returns the number of accounts reassigned."""
        reassigned = catalog.delete_tier(tier_id)
        cls._emit_catalog_changed(tier_id, "deleted")
        return reassigned

    @classmethod
    @_as_result
    def add_reward(cls, tier_id: int, name: str, points_cost: int, **fields):
        reward = catalog.add_reward(tier_id, name, points_cost, **fields)
        cls._emit_catalog_changed(tier_id, "reward_added")
        return catalog.reward_info(reward)

    @classmethod
    @_as_result
    def update_reward(cls, tier_id: int, reward_id: int, **patch):
        reward = catalog.update_reward(tier_id, reward_id, **patch)
        cls._emit_catalog_changed(tier_id, "reward_updated")
        return catalog.reward_info(reward)

    @classmethod
    @_as_result
    def remove_reward(cls, tier_id: int, reward_id: int):
        catalog.remove_reward(tier_id, reward_id)
        cls._emit_catalog_changed(tier_id, "reward_removed")

    # ======================================================================
    # MEMBERSHIP
    # ======================================================================

    @classmethod
    @_as_result
    def enroll(cls, code: str, activate: bool | None = None):
        """
        Create the member account with zero points and the floor tier.

        Idempotent: returns the existing membership if already enrolled.
        """
        account, _ = accounts.enroll(code, activate=activate)
        return cls._membership(account)

    @classmethod
    @_as_result
    def get_membership(cls, code: str):
        """Tier, status, points, eligible tiers and term of an account."""
        return cls._membership(accounts.get_or_raise(code))

    @classmethod
    @_as_result
    def list_memberships(cls):
        """Every account's membership (admin listing)."""
        tiers = catalog.snapshot()
        qs = MemberAccount.objects.select_related("current_tier").order_by("code")
        return [cls._membership(a, tiers) for a in qs]

    @classmethod
    @_as_result
    def choose_tier(cls, code: str, tier_id: int):
        """Select any eligible tier (self-downgrade allowed). Activates the membership."""
        mutation = accounts.mutate(
            code,
            lambda account, tiers: eligibility.choose_tier(account, tier_id, tiers),
        )
        cls._emit_tier_changed(mutation, "chosen")
        return cls._membership(mutation.account)

    @classmethod
    @_as_result
    def adjust_points(cls, code: str, amount: int, op: str):
        """
        Administrative points adjustment.

        Args:
            code: Account code
            amount: Positive integer
            op: "add" or "subtract" (subtract clamps at zero)
        """
        Gates.points_amount(amount, allow_zero=False)
        Gates.adjust_operation(op)

        def change(account, tiers):
            previous = account.points_balance
            if op == "add":
                ledger.add(account, amount, tiers)
            else:
                ledger.subtract(account, amount, tiers)
            return previous

        mutation = accounts.mutate(code, change)
        if mutation.tier_changed:
            logger.info(
                "Account %s moved from tier %s to %s after %s %d",
                code,
                mutation.previous_tier_id,
                mutation.account.current_tier_id,
                op,
                amount,
            )
        cls._emit_tier_changed(mutation, f"adjust_{op}")
        return AdjustmentOutcome(
            membership=cls._membership(mutation.account),
            previous_points=mutation.result,
            tier_changed=mutation.tier_changed,
        )

    @classmethod
    @_as_result
    def set_status(cls, code: str, status: str):
        """
        Change membership status.

        Cancelling discards the whole balance and resets the tier to the
        floor tier. There is no archive of the discarded points.
        """
        Gates.status_value(status)

        mutation = accounts.mutate(
            code,
            lambda account, tiers: accounts.apply_status(account, status, tiers),
        )
        discarded = mutation.result
        account = mutation.account

        if status == MembershipStatus.CANCELLED:
            if discarded:
                logger.warning("Membership %s cancelled, %d points discarded", code, discarded)
            transaction.on_commit(
                lambda: membership_cancelled.send(
                    sender=MemberAccount,
                    account=account,
                    discarded_points=discarded,
                )
            )
        cls._emit_tier_changed(mutation, f"status_{status}")
        return cls._membership(account)

    @classmethod
    def activate(cls, code: str) -> "OperationResult":
        return cls.set_status(code, MembershipStatus.ACTIVE)

    @classmethod
    def cancel(cls, code: str) -> "OperationResult":
        return cls.set_status(code, MembershipStatus.CANCELLED)

    @classmethod
    @_as_result
    def reconcile(cls, code: str):
        """
        Re-resolve an active account against the current catalog.

        Returns True when the tier changed.
        """
        mutation = accounts.mutate(code, ledger.reresolve)
        cls._emit_tier_changed(mutation, "reconcile")
        return mutation.tier_changed

    @classmethod
    def reconcile_all(cls) -> int:
        """Reconcile every active account. Returns how many changed tier."""
        codes = MemberAccount.objects.filter(
            membership_status=MembershipStatus.ACTIVE
        ).values_list("code", flat=True)

        changed = 0
        for code in list(codes):
            result = cls.reconcile(code)
            if result.ok and result.value:
                changed += 1
        logger.info("Reconciled active accounts, %d changed tier", changed)
        return changed

    # ======================================================================
    # REWARDS
    # ======================================================================

    @classmethod
    @_as_result
    def list_available_rewards(cls, code: str):
        """Available rewards from every tier the account currently qualifies for."""
        account = accounts.get_or_raise(code)
        return [
            AvailableReward(
                reward=catalog.reward_info(reward),
                tier_id=tier.pk,
                tier_name=tier.name,
            )
            for tier, reward in eligibility.available_rewards(
                account.points_balance, catalog.snapshot()
            )
        ]

    @classmethod
    @_as_result
    def redeem_reward(cls, code: str, tier_id: int, reward_id: int):
        """
        Redeem a reward for points.

        Balance debit, tier re-resolution and the history row commit together.
        """
        mutation = accounts.mutate(
            code,
            lambda account, tiers: redemption.redeem(account, tier_id, reward_id, tiers),
        )
        account = mutation.account
        record = mutation.result

        transaction.on_commit(
            lambda: reward_redeemed.send(sender=type(record), account=account, redemption=record)
        )
        cls._emit_tier_changed(mutation, "redemption")

        return RedemptionOutcome(
            redemption=redemption.to_info(record),
            points=account.points_balance,
            tier=catalog.tier_info(account.current_tier),
            previous_tier_id=mutation.previous_tier_id,
            tier_changed=mutation.tier_changed,
        )

    @classmethod
    @_as_result
    def list_redemption_history(cls, code: str, limit: int | None = None):
        """
        Redemptions oldest first.

        The whole history by default; ``limit`` (or the HISTORY_LIMIT
        setting) keeps only the most recent entries.
        """
        account = accounts.get_or_raise(code)
        if limit is None:
            limit = tierman_settings.HISTORY_LIMIT
        return redemption.history(account, limit=limit)

    @classmethod
    @_as_result
    def mark_redemption_used(cls, code: str, redemption_id: int):
        account = accounts.get_or_raise(code)
        return redemption.to_info(redemption.mark_used(account, redemption_id))

    # ======================================================================
    # Internal
    # ======================================================================

    @classmethod
    def _membership(cls, account: MemberAccount, tiers: list[Tier] | None = None) -> MembershipInfo:
        if tiers is None:
            tiers = catalog.snapshot()

        current = None
        if account.current_tier_id is not None:
            # Prefer the prefetched snapshot row; inactive tiers are not in it
            current = catalog.find(tiers, account.current_tier_id) or account.current_tier

        return MembershipInfo(
            code=account.code,
            tier=catalog.tier_info(current),
            status=account.membership_status,
            points=account.points_balance,
            eligible_tiers=[
                catalog.tier_info(t) for t in eligibility.eligible_tiers(account, tiers)
            ],
            start_date=account.membership_start_date,
            end_date=account.membership_end_date,
        )

    @classmethod
    def _emit_tier_changed(cls, mutation: accounts.Mutation, reason: str) -> None:
        if not mutation.tier_changed:
            return
        account = mutation.account
        previous_tier_id = mutation.previous_tier_id
        transaction.on_commit(
            lambda: tier_changed.send(
                sender=MemberAccount,
                account=account,
                previous_tier_id=previous_tier_id,
                new_tier_id=account.current_tier_id,
                reason=reason,
            )
        )

    @classmethod
    def _emit_catalog_changed(cls, tier_id: int, action: str) -> None:
        transaction.on_commit(
            lambda: catalog_changed.send(sender=Tier, tier_id=tier_id, action=action)
        )
