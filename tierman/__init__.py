"""
Django Tierman - Membership tiers, points and rewards.

Usage:
    from tierman import MembershipService

    MembershipService.enroll("USR-001", activate=True)
    MembershipService.adjust_points("USR-001", 150, "add")
    membership = MembershipService.get_membership("USR-001").value

    result = MembershipService.redeem_reward("USR-001", tier_id, reward_id)
    if not result.ok:
        print(result.error_code)  # e.g. "INSUFFICIENT_POINTS"
"""


def __getattr__(name):
    if name == "MembershipService":
        from tierman.service import MembershipService

        return MembershipService
    if name == "OperationResult":
        from tierman.service import OperationResult

        return OperationResult
    if name == "TierError":
        from tierman.exceptions import TierError

        return TierError
    if name == "Gates":
        from tierman.gates import Gates

        return Gates
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["MembershipService", "OperationResult", "TierError", "Gates"]
__version__ = "0.1.0"
