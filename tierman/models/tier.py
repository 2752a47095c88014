"""Tier catalog models - tiers, their benefits and their rewards."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class TierType(models.TextChoices):
    """Ordinal tag for a tier. Display only; ordering comes from points_required."""

    NONE = "none", _("None")
    BASIC = "basic", _("Basic")
    GOLD = "gold", _("Gold")
    PLATINUM = "platinum", _("Platinum")
    DIAMOND = "diamond", _("Diamond")


class Tier(models.Model):
    """
    Membership tier.

    A named level with a minimum points threshold. Owns its benefits and
    rewards. Tiers are plain rows; resolution is done by the pure functions
    in tierman.resolver.

    Thresholds are not unique. Resolution breaks ties by primary key, which
    is why the catalog is always read ordered by ``id``.
    """

    name = models.CharField(_("name"), max_length=100, unique=True)
    tier_type = models.CharField(
        _("type"),
        max_length=20,
        choices=TierType.choices,
        default=TierType.BASIC,
    )
    description = models.TextField(_("description"), blank=True)
    points_required = models.PositiveIntegerField(
        _("points required"),
        default=0,
        help_text=_("Minimum points balance for this tier"),
    )
    is_active = models.BooleanField(_("active"), default=True, db_index=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("tier")
        verbose_name_plural = _("tiers")
        ordering = ["id"]

    def __str__(self):
        return f"{self.name} ({self.points_required}pts)"


class TierBenefit(models.Model):
    """Benefit line shown for a tier (e.g. "Priority support")."""

    tier = models.ForeignKey(
        Tier,
        on_delete=models.CASCADE,
        related_name="benefits",
        verbose_name=_("tier"),
    )
    description = models.CharField(_("description"), max_length=255)
    value = models.CharField(_("value"), max_length=255, blank=True)
    position = models.PositiveIntegerField(_("position"), default=0)

    class Meta:
        verbose_name = _("tier benefit")
        verbose_name_plural = _("tier benefits")
        ordering = ["position", "id"]

    def __str__(self):
        return self.description


class Reward(models.Model):
    """
    Reward redeemable for points, owned by a tier.

    Redemptions keep a value copy of this row (see Redemption.reward_snapshot),
    so editing or deleting a reward never rewrites history.
    """

    tier = models.ForeignKey(
        Tier,
        on_delete=models.CASCADE,
        related_name="rewards",
        verbose_name=_("tier"),
    )
    name = models.CharField(_("name"), max_length=100)
    description = models.TextField(_("description"), blank=True)
    points_cost = models.PositiveIntegerField(_("points cost"), default=0)
    is_available = models.BooleanField(_("available"), default=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("reward")
        verbose_name_plural = _("rewards")
        ordering = ["id"]

    def __str__(self):
        return f"{self.name} ({self.points_cost}pts)"

    def snapshot(self) -> dict:
        """Point-in-time value copy, as stored on a Redemption."""
        return {
            "id": self.pk,
            "name": self.name,
            "description": self.description,
            "points_cost": self.points_cost,
            "is_available": self.is_available,
        }
