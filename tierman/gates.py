"""
Tierman Gates - Validation rules.

G1: PointsAmount - Amount is a non-negative (or positive) integer
G2: AdjustOperation - Administrative operation is "add" or "subtract"
G3: StatusValue - Membership status is a known value
G4: TierThreshold - points_required is a non-negative integer
G5: TierNameUniqueness - Tier name is not used by another tier

Every gate raises TierError (validation kind) and has a check_* variant
that returns a bool instead.
"""

from dataclasses import dataclass

from tierman.exceptions import TierError


@dataclass
class GateResult:
    """Result of a gate check."""

    passed: bool
    gate_name: str
    message: str = ""


def _is_int(value) -> bool:
    # bool is an int subclass; True must not count as 1 point
    return isinstance(value, int) and not isinstance(value, bool)


# =============================================================================
# Gates
# =============================================================================


class Gates:
    """Tierman validation gates."""

    # =========================================================================
    # G1: Points Amount
    # =========================================================================

    @classmethod
    def points_amount(cls, amount, allow_zero: bool = True) -> GateResult:
        """
        G1: Amount must be an integer, >= 0 (or > 0 when allow_zero=False).

        Raises:
            TierError: INVALID_AMOUNT
        """
        minimum = 0 if allow_zero else 1
        if not _is_int(amount) or amount < minimum:
            raise TierError(
                "INVALID_AMOUNT",
                message=(
                    "Points amount must be a non-negative integer"
                    if allow_zero
                    else "Points amount must be a positive integer"
                ),
                amount=repr(amount),
            )
        return GateResult(True, "G1_PointsAmount")

    @classmethod
    def check_points_amount(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.points_amount(*args, **kwargs)
            return True
        except TierError:
            return False

    # =========================================================================
    # G2: Adjust Operation
    # =========================================================================

    ALLOWED_OPERATIONS = ("add", "subtract")

    @classmethod
    def adjust_operation(cls, op) -> GateResult:
        """
        G2: Administrative adjustment must be "add" or "subtract".

        Raises:
            TierError: INVALID_OPERATION
        """
        if op not in cls.ALLOWED_OPERATIONS:
            raise TierError(
                "INVALID_OPERATION",
                operation=repr(op),
                allowed=list(cls.ALLOWED_OPERATIONS),
            )
        return GateResult(True, "G2_AdjustOperation")

    @classmethod
    def check_adjust_operation(cls, op) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.adjust_operation(op)
            return True
        except TierError:
            return False

    # =========================================================================
    # G3: Status Value
    # =========================================================================

    @classmethod
    def status_value(cls, status) -> GateResult:
        """
        G3: Status must be one of MembershipStatus.

        Raises:
            TierError: INVALID_STATUS
        """
        from tierman.models import MembershipStatus

        if status not in MembershipStatus.values:
            raise TierError(
                "INVALID_STATUS",
                status=repr(status),
                allowed=list(MembershipStatus.values),
            )
        return GateResult(True, "G3_StatusValue")

    @classmethod
    def check_status_value(cls, status) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.status_value(status)
            return True
        except TierError:
            return False

    # =========================================================================
    # G4: Tier Threshold
    # =========================================================================

    @classmethod
    def tier_threshold(cls, points_required) -> GateResult:
        """
        G4: points_required must be a non-negative integer.

        Raises:
            TierError: INVALID_THRESHOLD
        """
        if not _is_int(points_required) or points_required < 0:
            raise TierError("INVALID_THRESHOLD", points_required=repr(points_required))
        return GateResult(True, "G4_TierThreshold")

    @classmethod
    def check_tier_threshold(cls, points_required) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.tier_threshold(points_required)
            return True
        except TierError:
            return False

    # =========================================================================
    # G5: Tier Name Uniqueness
    # =========================================================================

    @classmethod
    def tier_name_uniqueness(cls, name: str, exclude_tier_id: int | None = None) -> GateResult:
        """
        G5: Tier names are unique across the catalog (active or not).

        Args:
            name: Proposed tier name
            exclude_tier_id: Tier being renamed (for updates)

        Raises:
            TierError: TIER_NAME_TAKEN
        """
        from tierman.models import Tier

        query = Tier.objects.filter(name=name)
        if exclude_tier_id is not None:
            query = query.exclude(pk=exclude_tier_id)

        existing = query.first()
        if existing:
            raise TierError("TIER_NAME_TAKEN", name=name, existing_tier_id=existing.pk)

        return GateResult(True, "G5_TierNameUniqueness")

    @classmethod
    def check_tier_name_uniqueness(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.tier_name_uniqueness(*args, **kwargs)
            return True
        except TierError:
            return False
