"""
Validation gates and error structure tests.
"""

import pytest

from tierman.exceptions import BaseError, ErrorKind, TierError
from tierman.gates import Gates


class TestG1PointsAmount:
    def test_zero_allowed_by_default(self):
        assert Gates.points_amount(0).passed

    def test_positive_required(self):
        with pytest.raises(TierError, match="INVALID_AMOUNT"):
            Gates.points_amount(0, allow_zero=False)

    @pytest.mark.parametrize("amount", [-1, 1.5, "10", None, True])
    def test_rejects_non_integers_and_negatives(self, amount):
        with pytest.raises(TierError) as exc:
            Gates.points_amount(amount)
        assert exc.value.code == "INVALID_AMOUNT"
        assert exc.value.kind == ErrorKind.VALIDATION

    def test_check_variant_returns_bool(self):
        assert Gates.check_points_amount(10)
        assert not Gates.check_points_amount(-10)


class TestG2AdjustOperation:
    def test_allowed(self):
        assert Gates.adjust_operation("add").passed
        assert Gates.adjust_operation("subtract").passed

    def test_unknown_operation(self):
        with pytest.raises(TierError, match="INVALID_OPERATION"):
            Gates.adjust_operation("multiply")

    def test_check_variant(self):
        assert not Gates.check_adjust_operation("ADD")


class TestG3StatusValue:
    def test_known_statuses(self):
        for status in ("inactive", "active", "cancelled"):
            assert Gates.check_status_value(status)

    def test_unknown_status(self):
        with pytest.raises(TierError, match="INVALID_STATUS"):
            Gates.status_value("paused")


class TestG4TierThreshold:
    def test_valid(self):
        assert Gates.tier_threshold(0).passed

    def test_negative(self):
        with pytest.raises(TierError, match="INVALID_THRESHOLD"):
            Gates.tier_threshold(-5)

    def test_float(self):
        assert not Gates.check_tier_threshold(10.0)


@pytest.mark.django_db
class TestG5TierNameUniqueness:
    def test_taken(self, catalog):
        with pytest.raises(TierError, match="TIER_NAME_TAKEN"):
            Gates.tier_name_uniqueness("Gold")

    def test_own_name_excluded(self, catalog):
        assert Gates.tier_name_uniqueness("Gold", exclude_tier_id=catalog["gold"].pk).passed

    def test_free_name(self, catalog):
        assert Gates.check_tier_name_uniqueness("Silver")


class TestTierError:
    def test_inherits_from_base_error(self):
        assert isinstance(TierError("TIER_NOT_FOUND"), BaseError)

    def test_default_message(self):
        err = TierError("REWARD_UNAVAILABLE")
        assert err.message == "This reward is not currently available"
        assert err.code == "REWARD_UNAVAILABLE"

    def test_custom_message(self):
        assert TierError("TIER_NOT_FOUND", message="Custom").message == "Custom"

    def test_kinds(self):
        assert TierError("ACCOUNT_NOT_FOUND").kind == ErrorKind.NOT_FOUND
        assert TierError("INVALID_AMOUNT").kind == ErrorKind.VALIDATION
        assert TierError("INSUFFICIENT_POINTS").kind == ErrorKind.BUSINESS
        assert TierError("CONCURRENT_UPDATE").kind == ErrorKind.FATAL

    def test_unknown_code_is_fatal(self):
        assert TierError("SOMETHING_ODD").is_fatal

    def test_as_dict(self):
        d = TierError("INSUFFICIENT_POINTS", available=10, requested=20).as_dict()
        assert d["code"] == "INSUFFICIENT_POINTS"
        assert d["kind"] == "business"
        assert d["data"] == {"available": 10, "requested": 20}
