"""Points ledger - balance mutations on an in-memory account.

Each mutation re-resolves the tier right away when the membership is active,
so ``current_tier`` never lags the balance. Persisting is left to
services.account.mutate().
"""

from tierman import resolver
from tierman.exceptions import TierError
from tierman.gates import Gates
from tierman.models import MemberAccount, Tier


def _guard(account: MemberAccount) -> None:
    if account.is_cancelled:
        raise TierError("ACCOUNT_CANCELLED", account_code=account.code)


def reresolve(account: MemberAccount, tiers: list[Tier]) -> Tier | None:
    """Re-resolve the tier of an active account. Other statuses keep theirs."""
    if account.is_active:
        account.current_tier = resolver.resolve(account.points_balance, tiers)
    return account.current_tier


def add(account: MemberAccount, amount: int, tiers: list[Tier]) -> int:
    """
    Credit ``amount`` points.

    Returns:
        New balance

    Raises:
        TierError: INVALID_AMOUNT, ACCOUNT_CANCELLED
    """
    Gates.points_amount(amount)
    _guard(account)
    account.points_balance += amount
    reresolve(account, tiers)
    return account.points_balance


def subtract(account: MemberAccount, amount: int, tiers: list[Tier]) -> int:
    """
    Debit ``amount`` points, clamping the balance at zero.

    Returns:
        New balance

    Raises:
        TierError: INVALID_AMOUNT, ACCOUNT_CANCELLED
    """
    Gates.points_amount(amount)
    _guard(account)
    account.points_balance = max(0, account.points_balance - amount)
    reresolve(account, tiers)
    return account.points_balance


def set_zero(account: MemberAccount, tiers: list[Tier]) -> int:
    """Zero the balance. Not guarded: cancellation relies on it."""
    account.points_balance = 0
    reresolve(account, tiers)
    return 0
