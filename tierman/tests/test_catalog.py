"""
Tier catalog tests: CRUD, validation, deletion with account reassignment.
"""

import pytest

from tierman.exceptions import TierError
from tierman.models import MemberAccount, MembershipStatus, Reward, Tier, TierBenefit
from tierman.services import catalog as catalog_service

pytestmark = pytest.mark.django_db


class TestSnapshot:
    def test_active_tiers_in_insertion_order(self, catalog):
        names = [t.name for t in catalog_service.snapshot()]
        assert names == ["Basic", "Gold", "Platinum", "Diamond"]

    def test_inactive_tiers_excluded(self, catalog):
        catalog_service.update_tier(catalog["platinum"].pk, is_active=False)

        names = [t.name for t in catalog_service.snapshot()]
        assert "Platinum" not in names
        assert len(catalog_service.all_tiers()) == 4

    def test_benefits_keep_position_order(self, catalog):
        gold = catalog_service.get(catalog["gold"].pk)
        benefits = list(gold.benefits.all())
        assert [b.description for b in benefits] == ["Priority customer support", "Discount"]
        assert benefits[1].value == "10%"

    def test_get_missing_tier(self, catalog):
        with pytest.raises(TierError) as exc:
            catalog_service.get(999_999)
        assert exc.value.code == "TIER_NOT_FOUND"

    def test_get_active_only(self, catalog):
        catalog_service.update_tier(catalog["gold"].pk, is_active=False)
        with pytest.raises(TierError, match="TIER_NOT_FOUND"):
            catalog_service.get(catalog["gold"].pk, active_only=True)

    def test_floor_tier(self, catalog):
        assert catalog_service.floor_tier().name == "Basic"


class TestCreateTier:
    def test_create_with_benefits_and_rewards(self, db):
        tier = catalog_service.create_tier(
            "Silver",
            50,
            tier_type="basic",
            description="Entry tier",
            benefits=["Newsletter", {"description": "Cashback", "value": "2%"}],
            rewards=[{"name": "Sticker", "points_cost": 5}],
        )

        assert tier.pk is not None
        assert tier.points_required == 50
        assert tier.benefits.count() == 2
        assert tier.rewards.get().name == "Sticker"

    def test_duplicate_name(self, catalog):
        with pytest.raises(TierError) as exc:
            catalog_service.create_tier("Gold", 120)
        assert exc.value.code == "TIER_NAME_TAKEN"
        assert Tier.objects.filter(name="Gold").count() == 1

    def test_duplicate_name_includes_inactive_tiers(self, catalog):
        catalog_service.update_tier(catalog["gold"].pk, is_active=False)
        with pytest.raises(TierError, match="TIER_NAME_TAKEN"):
            catalog_service.create_tier("Gold", 100)

    @pytest.mark.parametrize("threshold", [-1, 1.5, "100", None])
    def test_invalid_threshold(self, db, threshold):
        with pytest.raises(TierError) as exc:
            catalog_service.create_tier("Broken", threshold)
        assert exc.value.code == "INVALID_THRESHOLD"
        assert not Tier.objects.exists()

    def test_invalid_reward_cost_creates_nothing(self, db):
        with pytest.raises(TierError, match="INVALID_AMOUNT"):
            catalog_service.create_tier("Silver", 50, rewards=[{"name": "Bad", "points_cost": -3}])
        assert not Tier.objects.exists()


class TestUpdateTier:
    def test_patch_fields(self, catalog):
        tier = catalog_service.update_tier(
            catalog["gold"].pk, description="Shiny", points_required=120
        )
        assert tier.description == "Shiny"
        assert tier.points_required == 120

    def test_replace_benefits(self, catalog):
        tier = catalog_service.update_tier(catalog["gold"].pk, benefits=["Only one"])
        assert [b.description for b in tier.benefits.all()] == ["Only one"]
        assert TierBenefit.objects.filter(tier_id=catalog["gold"].pk).count() == 1

    def test_rename_to_own_name(self, catalog):
        tier = catalog_service.update_tier(catalog["gold"].pk, name="Gold")
        assert tier.name == "Gold"

    def test_rename_to_taken_name(self, catalog):
        with pytest.raises(TierError, match="TIER_NAME_TAKEN"):
            catalog_service.update_tier(catalog["gold"].pk, name="Basic")

    def test_unknown_field(self, catalog):
        with pytest.raises(TierError) as exc:
            catalog_service.update_tier(catalog["gold"].pk, id=5)
        assert exc.value.code == "INVALID_TIER_FIELD"

    def test_invalid_threshold(self, catalog):
        with pytest.raises(TierError, match="INVALID_THRESHOLD"):
            catalog_service.update_tier(catalog["gold"].pk, points_required=-10)

    def test_missing_tier(self, catalog):
        with pytest.raises(TierError, match="TIER_NOT_FOUND"):
            catalog_service.update_tier(999_999, description="x")


class TestDeleteTier:
    def test_active_account_re_resolved(self, catalog, member):
        reassigned = catalog_service.delete_tier(catalog["gold"].pk)

        assert reassigned == 1
        member.refresh_from_db()
        assert member.current_tier_id == catalog["basic"].pk
        assert member.points_balance == 150

    def test_inactive_account_moves_to_new_floor(self, catalog, make_member):
        account = make_member("USR-002", points=0, status=MembershipStatus.INACTIVE)
        assert account.current_tier_id == catalog["basic"].pk

        catalog_service.delete_tier(catalog["basic"].pk)

        account.refresh_from_db()
        assert account.current_tier_id == catalog["gold"].pk
        assert account.membership_status == MembershipStatus.INACTIVE

    def test_rewards_and_benefits_deleted(self, catalog):
        gold_id = catalog["gold"].pk
        catalog_service.delete_tier(gold_id)

        assert not Tier.objects.filter(pk=gold_id).exists()
        assert not Reward.objects.filter(tier_id=gold_id).exists()
        assert not TierBenefit.objects.filter(tier_id=gold_id).exists()

    def test_other_accounts_untouched(self, catalog, member, make_member):
        diamond = make_member("USR-003", points=400)
        version = diamond.version

        catalog_service.delete_tier(catalog["gold"].pk)

        diamond.refresh_from_db()
        assert diamond.version == version

    def test_last_tier_leaves_accounts_without_tier(self, db):
        tier = catalog_service.create_tier("Only", 0)
        MemberAccount.objects.create(
            code="USR-009", membership_status=MembershipStatus.ACTIVE, current_tier=tier
        )

        catalog_service.delete_tier(tier.pk)

        assert MemberAccount.objects.get(code="USR-009").current_tier is None

    def test_missing_tier(self, catalog):
        with pytest.raises(TierError, match="TIER_NOT_FOUND"):
            catalog_service.delete_tier(999_999)


class TestRewards:
    def test_add_reward(self, catalog):
        reward = catalog_service.add_reward(catalog["basic"].pk, "Tea", 10, description="Green")
        assert reward.tier_id == catalog["basic"].pk
        assert reward.is_available

    def test_add_reward_invalid_cost(self, catalog):
        with pytest.raises(TierError, match="INVALID_AMOUNT"):
            catalog_service.add_reward(catalog["basic"].pk, "Tea", -1)

    def test_add_reward_missing_tier(self, catalog):
        with pytest.raises(TierError, match="TIER_NOT_FOUND"):
            catalog_service.add_reward(999_999, "Tea", 10)

    def test_update_reward(self, catalog, reward):
        lounge = reward("gold", "Lounge Pass")
        updated = catalog_service.update_reward(
            catalog["gold"].pk, lounge.pk, points_cost=130, is_available=False
        )
        assert updated.points_cost == 130
        assert not updated.is_available

    def test_update_reward_under_wrong_tier(self, catalog, reward):
        lounge = reward("gold", "Lounge Pass")
        with pytest.raises(TierError, match="REWARD_NOT_FOUND"):
            catalog_service.update_reward(catalog["basic"].pk, lounge.pk, name="x")

    def test_update_reward_unknown_field(self, catalog, reward):
        lounge = reward("gold", "Lounge Pass")
        with pytest.raises(TierError, match="INVALID_TIER_FIELD"):
            catalog_service.update_reward(catalog["gold"].pk, lounge.pk, tier=1)

    def test_remove_reward(self, catalog, reward):
        lounge = reward("gold", "Lounge Pass")
        catalog_service.remove_reward(catalog["gold"].pk, lounge.pk)
        assert not Reward.objects.filter(pk=lounge.pk).exists()


class TestReadModels:
    def test_tier_info(self, catalog):
        info = catalog_service.tier_info(catalog_service.get(catalog["gold"].pk))

        assert info.name == "Gold"
        assert info.points_required == 100
        assert info.benefits[0].value is None
        assert info.benefits[1].value == "10%"
        assert {r.name for r in info.rewards} == {"Lounge Pass", "Retired Perk"}

    def test_tier_info_none(self):
        assert catalog_service.tier_info(None) is None
