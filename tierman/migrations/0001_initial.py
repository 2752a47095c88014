# Initial migration for the tier catalog, member accounts and redemptions

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import tierman.models.account


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Tier",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=100, unique=True, verbose_name="name")),
                (
                    "tier_type",
                    models.CharField(
                        choices=[
                            ("none", "None"),
                            ("basic", "Basic"),
                            ("gold", "Gold"),
                            ("platinum", "Platinum"),
                            ("diamond", "Diamond"),
                        ],
                        default="basic",
                        max_length=20,
                        verbose_name="type",
                    ),
                ),
                ("description", models.TextField(blank=True, verbose_name="description")),
                (
                    "points_required",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Minimum points balance for this tier",
                        verbose_name="points required",
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(db_index=True, default=True, verbose_name="active"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "tier",
                "verbose_name_plural": "tiers",
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="TierBenefit",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("description", models.CharField(max_length=255, verbose_name="description")),
                ("value", models.CharField(blank=True, max_length=255, verbose_name="value")),
                ("position", models.PositiveIntegerField(default=0, verbose_name="position")),
                (
                    "tier",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="benefits",
                        to="tierman.tier",
                        verbose_name="tier",
                    ),
                ),
            ],
            options={
                "verbose_name": "tier benefit",
                "verbose_name_plural": "tier benefits",
                "ordering": ["position", "id"],
            },
        ),
        migrations.CreateModel(
            name="Reward",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("name", models.CharField(max_length=100, verbose_name="name")),
                ("description", models.TextField(blank=True, verbose_name="description")),
                ("points_cost", models.PositiveIntegerField(default=0, verbose_name="points cost")),
                ("is_available", models.BooleanField(default=True, verbose_name="available")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "tier",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rewards",
                        to="tierman.tier",
                        verbose_name="tier",
                    ),
                ),
            ],
            options={
                "verbose_name": "reward",
                "verbose_name_plural": "rewards",
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="MemberAccount",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "code",
                    models.CharField(
                        help_text="External user reference",
                        max_length=100,
                        unique=True,
                        verbose_name="code",
                    ),
                ),
                (
                    "membership_status",
                    models.CharField(
                        choices=[
                            ("inactive", "Inactive"),
                            ("active", "Active"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="inactive",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                (
                    "points_balance",
                    models.PositiveIntegerField(default=0, verbose_name="points balance"),
                ),
                (
                    "membership_start_date",
                    models.DateTimeField(
                        default=django.utils.timezone.now,
                        verbose_name="start date",
                    ),
                ),
                (
                    "membership_end_date",
                    models.DateTimeField(
                        default=tierman.models.account.default_end_date,
                        verbose_name="end date",
                    ),
                ),
                ("version", models.PositiveIntegerField(default=0, verbose_name="version")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "current_tier",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="accounts",
                        to="tierman.tier",
                        verbose_name="current tier",
                    ),
                ),
            ],
            options={
                "verbose_name": "member account",
                "verbose_name_plural": "member accounts",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="Redemption",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "reward_ref",
                    models.PositiveIntegerField(
                        help_text="Id of the live reward (may no longer exist)",
                        verbose_name="reward id",
                    ),
                ),
                (
                    "reward_snapshot",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="Reward as it was when redeemed",
                        verbose_name="reward snapshot",
                    ),
                ),
                ("tier_name", models.CharField(blank=True, max_length=100, verbose_name="tier name")),
                ("points_spent", models.PositiveIntegerField(verbose_name="points spent")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("redeemed", "Redeemed"),
                            ("used", "Used"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="redeemed",
                        max_length=20,
                        verbose_name="status",
                    ),
                ),
                (
                    "redeemed_at",
                    models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="redeemed at"),
                ),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="redemptions",
                        to="tierman.memberaccount",
                        verbose_name="account",
                    ),
                ),
                (
                    "tier",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="redemptions",
                        to="tierman.tier",
                        verbose_name="tier",
                    ),
                ),
            ],
            options={
                "verbose_name": "redemption",
                "verbose_name_plural": "redemptions",
                "ordering": ["redeemed_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["account", "redeemed_at"],
                        name="tierman_redemption_acct_idx",
                    )
                ],
            },
        ),
    ]
