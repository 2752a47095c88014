"""
Tier resolution tests (pure functions, no database).
"""

from dataclasses import dataclass

from tierman import resolver


@dataclass
class FakeTier:
    name: str
    points_required: int
    is_active: bool = True


def standard_catalog():
    return [
        FakeTier("Basic", 0),
        FakeTier("Gold", 100),
        FakeTier("Platinum", 200),
        FakeTier("Diamond", 300),
    ]


class TestResolve:
    def test_balance_between_thresholds(self):
        tier = resolver.resolve(150, standard_catalog())
        assert tier.name == "Gold"

    def test_exact_threshold_qualifies(self):
        assert resolver.resolve(200, standard_catalog()).name == "Platinum"
        assert resolver.resolve(199, standard_catalog()).name == "Gold"

    def test_above_top_tier(self):
        assert resolver.resolve(10_000, standard_catalog()).name == "Diamond"

    def test_zero_points_gets_floor(self):
        assert resolver.resolve(0, standard_catalog()).name == "Basic"

    def test_below_every_threshold_returns_floor_tier(self):
        """Nothing qualifies -> floor tier, never None for a non-empty catalog."""
        tiers = [FakeTier("Silver", 50), FakeTier("Gold", 100)]
        assert resolver.resolve(10, tiers).name == "Silver"

    def test_empty_catalog_returns_none(self):
        assert resolver.resolve(500, []) is None

    def test_only_inactive_tiers_returns_none(self):
        tiers = [FakeTier("Basic", 0, is_active=False)]
        assert resolver.resolve(500, tiers) is None

    def test_inactive_tiers_are_ignored(self):
        tiers = standard_catalog()
        tiers[1].is_active = False  # Gold
        assert resolver.resolve(150, tiers).name == "Basic"

    def test_tie_broken_by_insertion_order(self):
        """Equal thresholds: the first tier in catalog order wins."""
        tiers = [FakeTier("Basic", 0), FakeTier("Gold", 100), FakeTier("Gold Plus", 100)]
        assert resolver.resolve(150, tiers).name == "Gold"

        reordered = [tiers[0], tiers[2], tiers[1]]
        assert resolver.resolve(150, reordered).name == "Gold Plus"

    def test_floor_tie_broken_by_insertion_order(self):
        tiers = [FakeTier("Starter", 10), FakeTier("Welcome", 10)]
        assert resolver.resolve(0, tiers).name == "Starter"

    def test_largest_threshold_not_above_points(self):
        """Resolve returns the max threshold <= points for every balance."""
        tiers = standard_catalog()
        for points in range(0, 400, 7):
            expected = max(t.points_required for t in tiers if t.points_required <= points)
            assert resolver.resolve(points, tiers).points_required == expected


class TestEligible:
    def test_scenario_150(self):
        eligible = resolver.eligible(150, standard_catalog())
        assert [t.name for t in eligible] == ["Gold", "Basic"]

    def test_descending_by_threshold(self):
        eligible = resolver.eligible(1000, standard_catalog())
        assert [t.points_required for t in eligible] == [300, 200, 100, 0]

    def test_nothing_qualifies(self):
        assert resolver.eligible(5, [FakeTier("Silver", 50)]) == []

    def test_exactly_the_qualifying_subset(self):
        tiers = standard_catalog() + [FakeTier("Hidden", 50, is_active=False)]
        for points in (0, 49, 50, 100, 250, 300):
            eligible = resolver.eligible(points, tiers)
            expected = {t.name for t in tiers if t.is_active and t.points_required <= points}
            assert {t.name for t in eligible} == expected

    def test_head_matches_resolve(self):
        tiers = standard_catalog()
        for points in (0, 99, 100, 150, 299, 300, 301):
            eligible = resolver.eligible(points, tiers)
            assert eligible[0] is resolver.resolve(points, tiers)


class TestFloor:
    def test_lowest_threshold(self):
        assert resolver.floor(standard_catalog()).name == "Basic"

    def test_skips_inactive(self):
        tiers = standard_catalog()
        tiers[0].is_active = False
        assert resolver.floor(tiers).name == "Gold"

    def test_empty(self):
        assert resolver.floor([]) is None
