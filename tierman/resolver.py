"""
Tier resolution - pure functions over a catalog snapshot.

Works on anything exposing ``points_required`` and ``is_active`` (Tier rows
or plain test doubles). Nothing here touches the database.

Ties on ``points_required`` are broken by input order: the sort is stable, and
the catalog is always read ordered by primary key, so the first inserted tier
wins.
"""

from collections.abc import Iterable
from typing import TypeVar

T = TypeVar("T")


def active(tiers: Iterable[T]) -> list[T]:
    """Active tiers ordered by threshold, highest first."""
    return sorted(
        (t for t in tiers if t.is_active),
        key=lambda t: t.points_required,
        reverse=True,
    )


def floor(tiers: Iterable[T]) -> T | None:
    """Active tier with the lowest threshold, or None for an empty catalog."""
    candidates = [t for t in tiers if t.is_active]
    if not candidates:
        return None
    return min(candidates, key=lambda t: t.points_required)


def eligible(points: int, tiers: Iterable[T]) -> list[T]:
    """Every active tier whose threshold ``points`` meets, highest first."""
    return [t for t in active(tiers) if t.points_required <= points]


def resolve(points: int, tiers: Iterable[T]) -> T | None:
    """
    Tier a balance belongs to.

    Highest active tier whose threshold is met. When nothing qualifies the
    floor tier is returned instead, so a non-empty catalog always yields a
    tier. Returns None only when there are no active tiers.
    """
    tiers = list(tiers)
    matches = eligible(points, tiers)
    if matches:
        return matches[0]
    return floor(tiers)
