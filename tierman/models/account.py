"""Member account model - balance, status and current tier."""

from datetime import timedelta

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class MembershipStatus(models.TextChoices):
    INACTIVE = "inactive", _("Inactive")
    ACTIVE = "active", _("Active")
    CANCELLED = "cancelled", _("Cancelled")


def default_end_date():
    from tierman.conf import tierman_settings

    return timezone.now() + timedelta(days=tierman_settings.MEMBERSHIP_TERM_DAYS)


class MemberAccount(models.Model):
    """
    Membership slice of a user.

    One account per external user reference (``code``). Authentication and
    the rest of the user record live outside this app.

    While ``membership_status`` is active, ``current_tier`` always equals
    resolve(points_balance, active tiers) after a balance mutation. All
    writes go through tierman.services.account, which compares ``version``
    before saving to avoid lost updates.
    """

    code = models.CharField(
        _("code"),
        max_length=100,
        unique=True,
        help_text=_("External user reference"),
    )
    current_tier = models.ForeignKey(
        "tierman.Tier",
        on_delete=models.SET_NULL,
        related_name="accounts",
        null=True,
        blank=True,
        verbose_name=_("current tier"),
    )
    membership_status = models.CharField(
        _("status"),
        max_length=20,
        choices=MembershipStatus.choices,
        default=MembershipStatus.INACTIVE,
        db_index=True,
    )
    points_balance = models.PositiveIntegerField(_("points balance"), default=0)

    membership_start_date = models.DateTimeField(_("start date"), default=timezone.now)
    membership_end_date = models.DateTimeField(_("end date"), default=default_end_date)

    # Optimistic concurrency counter
    version = models.PositiveIntegerField(_("version"), default=0)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("member account")
        verbose_name_plural = _("member accounts")
        ordering = ["code"]

    def __str__(self):
        tier = self.current_tier.name if self.current_tier_id else "-"
        return f"{self.code}: {self.points_balance}pts | {tier} | {self.membership_status}"

    @property
    def is_active(self) -> bool:
        return self.membership_status == MembershipStatus.ACTIVE

    @property
    def is_cancelled(self) -> bool:
        return self.membership_status == MembershipStatus.CANCELLED
