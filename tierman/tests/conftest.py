"""Pytest fixtures for Tierman tests."""

import pytest

from tierman.models import MemberAccount, MembershipStatus, Tier
from tierman.services import catalog as catalog_service


@pytest.fixture
def catalog(db):
    """
    Basic(0) / Gold(100) / Platinum(200) / Diamond(300), all active.

    Returns a dict keyed by short name ("basic", "gold", ...).
    """
    basic = catalog_service.create_tier(
        "Basic",
        0,
        tier_type="basic",
        benefits=["Access to member-only sections"],
        rewards=[{"name": "Free Coffee", "points_cost": 20}],
    )
    gold = catalog_service.create_tier(
        "Gold",
        100,
        tier_type="gold",
        benefits=["Priority customer support", {"description": "Discount", "value": "10%"}],
        rewards=[
            {"name": "Lounge Pass", "points_cost": 120, "description": "One day lounge access"},
            {"name": "Retired Perk", "points_cost": 50, "is_available": False},
        ],
    )
    platinum = catalog_service.create_tier(
        "Platinum",
        200,
        tier_type="platinum",
        rewards=[{"name": "Meeting Room Hour", "points_cost": 150}],
    )
    diamond = catalog_service.create_tier(
        "Diamond",
        300,
        tier_type="diamond",
        rewards=[{"name": "Private Office Day", "points_cost": 250}],
    )
    return {"basic": basic, "gold": gold, "platinum": platinum, "diamond": diamond}


@pytest.fixture
def reward(catalog):
    """Look up a catalog reward by name: reward("gold", "Lounge Pass")."""

    def _reward(tier_key: str, name: str):
        return Tier.objects.get(pk=catalog[tier_key].pk).rewards.get(name=name)

    return _reward


@pytest.fixture
def make_member(catalog):
    """
    Create an account directly with a balance consistent with its tier.

    make_member("USR-001", points=150) -> active account on Gold.
    """
    from tierman import resolver

    def _make(code="USR-001", points=0, status=MembershipStatus.ACTIVE):
        tiers = catalog_service.snapshot()
        if status == MembershipStatus.ACTIVE:
            tier = resolver.resolve(points, tiers)
        else:
            tier = resolver.floor(tiers)
        return MemberAccount.objects.create(
            code=code,
            points_balance=points,
            membership_status=status,
            current_tier=tier,
        )

    return _make


@pytest.fixture
def member(make_member):
    """Active member with 150 points (Gold)."""
    return make_member("USR-001", points=150)
