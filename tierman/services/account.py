"""Member account service - lookup, enrollment and versioned writes.

Every account mutation goes through mutate(): read the account and the
catalog, apply a change in memory, then write back only if the row's
``version`` is still the one that was read. A concurrent writer makes the
conditional UPDATE match zero rows; the transaction (including any rows the
change inserted) is rolled back and the cycle starts over from a fresh read.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from tierman import resolver
from tierman.conf import tierman_settings
from tierman.exceptions import TierError
from tierman.models import MemberAccount, MembershipStatus, Tier
from tierman.services import catalog, ledger

logger = logging.getLogger(__name__)

# Columns owned by the versioned write
_WRITE_FIELDS = (
    "points_balance",
    "current_tier",
    "membership_status",
    "membership_start_date",
    "membership_end_date",
)


class StaleWrite(Exception):
    """The account row changed between read and write."""


@dataclass
class Mutation:
    """Outcome of a committed account mutation."""

    account: MemberAccount
    result: Any
    previous_tier_id: int | None
    previous_status: str
    attempts: int

    @property
    def tier_changed(self) -> bool:
        return self.previous_tier_id != self.account.current_tier_id


def get(code: str) -> MemberAccount | None:
    """Get account by code."""
    try:
        return MemberAccount.objects.select_related("current_tier").get(code=code)
    except MemberAccount.DoesNotExist:
        return None


def get_or_raise(code: str) -> MemberAccount:
    account = get(code)
    if account is None:
        raise TierError("ACCOUNT_NOT_FOUND", account_code=code)
    return account


def enroll(code: str, activate: bool | None = None) -> tuple[MemberAccount, bool]:
    """
    Create the account for ``code`` with zero points and the floor tier.

    Idempotent: an existing account is returned untouched.

    Returns:
        (account, created)
    """
    if activate is None:
        activate = tierman_settings.ENROLL_ACTIVE

    status = MembershipStatus.ACTIVE if activate else MembershipStatus.INACTIVE
    account, created = MemberAccount.objects.get_or_create(
        code=code,
        defaults={
            "points_balance": 0,
            "current_tier": catalog.floor_tier(),
            "membership_status": status,
        },
    )
    if created:
        logger.info("Enrolled %s as %s (tier=%s)", code, status, account.current_tier_id)
    return account, created


def write(account: MemberAccount) -> None:
    """
    Persist the account if nobody else wrote it since it was read.

    Raises:
        StaleWrite: version mismatch
    """
    values = {name: getattr(account, name) for name in _WRITE_FIELDS}
    updated = MemberAccount.objects.filter(pk=account.pk, version=account.version).update(
        version=F("version") + 1,
        updated_at=timezone.now(),
        **values,
    )
    if updated != 1:
        raise StaleWrite(account.code)
    account.version += 1


def mutate(
    code: str,
    change: Callable[[MemberAccount, list[Tier]], Any],
) -> Mutation:
    """
    Apply ``change(account, active_tiers)`` and persist it atomically.

    ``change`` mutates the account in memory and may create related rows;
    its return value is carried on the Mutation. TierErrors it raises roll
    the transaction back and propagate unchanged.

    Raises:
        TierError: ACCOUNT_NOT_FOUND, anything raised by ``change``, or
            CONCURRENT_UPDATE when every attempt lost the version race
    """
    retries = max(1, tierman_settings.MAX_WRITE_RETRIES)

    for attempt in range(1, retries + 1):
        try:
            with transaction.atomic():
                account = get_or_raise(code)
                previous_tier_id = account.current_tier_id
                previous_status = account.membership_status

                result = change(account, catalog.snapshot())
                write(account)
        except StaleWrite:
            logger.warning(
                "Concurrent update on account %s (attempt %d/%d), retrying",
                code,
                attempt,
                retries,
            )
            continue

        return Mutation(
            account=account,
            result=result,
            previous_tier_id=previous_tier_id,
            previous_status=previous_status,
            attempts=attempt,
        )

    raise TierError("CONCURRENT_UPDATE", account_code=code, attempts=retries)


def apply_status(account: MemberAccount, status: str, tiers: list[Tier]) -> int:
    """
    Move ``account`` to ``status`` in memory.

    cancelled: balance is discarded and the tier reset to the floor tier.
    active: tier re-resolved from the current balance.
    inactive: status only. A cancelled account can only be reactivated.

    Returns:
        Points discarded (non-zero only on cancellation)

    Raises:
        TierError: INVALID_STATUS (cancelled -> inactive)
    """
    if account.is_cancelled and status == MembershipStatus.INACTIVE:
        raise TierError(
            "INVALID_STATUS",
            message="A cancelled membership can only be reactivated",
            account_code=account.code,
            status=status,
        )

    discarded = 0
    if status == MembershipStatus.CANCELLED:
        discarded = account.points_balance
        ledger.set_zero(account, tiers)
        account.current_tier = resolver.floor(tiers)
    elif status == MembershipStatus.ACTIVE:
        account.current_tier = resolver.resolve(account.points_balance, tiers)

    account.membership_status = status
    return discarded
