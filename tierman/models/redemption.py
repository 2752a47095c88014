"""Redemption model - append-only reward redemption history."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class RedemptionStatus(models.TextChoices):
    REDEEMED = "redeemed", _("Redeemed")
    USED = "used", _("Used")
    CANCELLED = "cancelled", _("Cancelled")


class Redemption(models.Model):
    """
    Immutable record of a reward redemption.

    ``reward_snapshot`` is a value copy of the reward taken at redemption
    time; ``reward_ref`` only keeps the id for traceability. ``tier`` is
    nulled when the tier is deleted, ``tier_name`` survives.

    Only ``status`` may change after creation.
    """

    MUTABLE_FIELDS = frozenset({"status"})

    account = models.ForeignKey(
        "tierman.MemberAccount",
        on_delete=models.CASCADE,
        related_name="redemptions",
        verbose_name=_("account"),
    )
    reward_ref = models.PositiveIntegerField(
        _("reward id"),
        help_text=_("Id of the live reward (may no longer exist)"),
    )
    reward_snapshot = models.JSONField(
        _("reward snapshot"),
        default=dict,
        blank=True,
        help_text=_("Reward as it was when redeemed"),
    )
    tier = models.ForeignKey(
        "tierman.Tier",
        on_delete=models.SET_NULL,
        related_name="redemptions",
        null=True,
        blank=True,
        verbose_name=_("tier"),
    )
    tier_name = models.CharField(_("tier name"), max_length=100, blank=True)
    points_spent = models.PositiveIntegerField(_("points spent"))
    status = models.CharField(
        _("status"),
        max_length=20,
        choices=RedemptionStatus.choices,
        default=RedemptionStatus.REDEEMED,
    )
    redeemed_at = models.DateTimeField(_("redeemed at"), auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = _("redemption")
        verbose_name_plural = _("redemptions")
        ordering = ["redeemed_at", "id"]
        indexes = [
            models.Index(fields=["account", "redeemed_at"], name="tierman_redemption_acct_idx"),
        ]

    def __str__(self):
        name = self.reward_snapshot.get("name") or f"reward:{self.reward_ref}"
        return f"-{self.points_spent}pts - {name}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            update_fields = kwargs.get("update_fields")
            if update_fields is None or not set(update_fields) <= self.MUTABLE_FIELDS:
                from tierman.exceptions import TierError

                raise TierError("REDEMPTION_IMMUTABLE", redemption_id=self.pk)
        super().save(*args, **kwargs)
