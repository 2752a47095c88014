"""Tierman exceptions."""

from typing import Any


class ErrorKind:
    """Error taxonomy. Only FATAL errors escape the public service API."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    BUSINESS = "business"
    FATAL = "fatal"


class BaseError(Exception):
    """
    Structured exception with a machine-readable code.

    Subclasses declare ``_default_messages`` so callers can raise with just
    a code and still get a readable message.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}


class TierError(BaseError):
    """
    Structured exception for membership operations.

    Usage:
        try:
            RedemptionEngine.redeem(account, tier_id, reward_id)
        except TierError as e:
            if e.code == "INSUFFICIENT_POINTS":
                handle_insufficient()
    """

    _default_messages = {
        # not_found
        "ACCOUNT_NOT_FOUND": "Member account not found",
        "TIER_NOT_FOUND": "Tier not found",
        "REWARD_NOT_FOUND": "Reward not found in this tier",
        "REDEMPTION_NOT_FOUND": "Redemption not found",
        # validation
        "INVALID_AMOUNT": "Points amount must be a non-negative integer",
        "INVALID_OPERATION": "Operation must be 'add' or 'subtract'",
        "INVALID_STATUS": "Unknown membership status",
        "INVALID_THRESHOLD": "Points required must be a non-negative integer",
        "INVALID_TIER_FIELD": "Field cannot be updated on a tier",
        "TIER_NAME_TAKEN": "A tier with this name already exists",
        # business
        "INSUFFICIENT_POINTS": "Not enough points",
        "REWARD_UNAVAILABLE": "This reward is not currently available",
        "ACCOUNT_CANCELLED": "Cannot update points for a cancelled membership",
        "TIER_NOT_ELIGIBLE": "Points balance does not meet this tier's threshold",
        # fatal
        "CONCURRENT_UPDATE": "Account was modified concurrently, retries exhausted",
        "INVARIANT_VIOLATION": "Membership invariant violated",
        "REDEMPTION_IMMUTABLE": "Redemption records cannot be modified",
    }

    _kinds = {
        "ACCOUNT_NOT_FOUND": ErrorKind.NOT_FOUND,
        "TIER_NOT_FOUND": ErrorKind.NOT_FOUND,
        "REWARD_NOT_FOUND": ErrorKind.NOT_FOUND,
        "REDEMPTION_NOT_FOUND": ErrorKind.NOT_FOUND,
        "INVALID_AMOUNT": ErrorKind.VALIDATION,
        "INVALID_OPERATION": ErrorKind.VALIDATION,
        "INVALID_STATUS": ErrorKind.VALIDATION,
        "INVALID_THRESHOLD": ErrorKind.VALIDATION,
        "INVALID_TIER_FIELD": ErrorKind.VALIDATION,
        "TIER_NAME_TAKEN": ErrorKind.VALIDATION,
        "INSUFFICIENT_POINTS": ErrorKind.BUSINESS,
        "REWARD_UNAVAILABLE": ErrorKind.BUSINESS,
        "ACCOUNT_CANCELLED": ErrorKind.BUSINESS,
        "TIER_NOT_ELIGIBLE": ErrorKind.BUSINESS,
    }

    @property
    def kind(self) -> str:
        """Unknown codes are treated as fatal."""
        return self._kinds.get(self.code, ErrorKind.FATAL)

    @property
    def is_fatal(self) -> bool:
        return self.kind == ErrorKind.FATAL

    def as_dict(self) -> dict:
        d = super().as_dict()
        d["kind"] = self.kind
        return d
