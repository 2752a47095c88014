"""Tierman admin.

Balances, tiers and statuses of accounts are read-only here: they only
change through MembershipService so the tier stays in step with the
balance. Redemptions cannot be added, edited or deleted.
"""

from django.contrib import admin, messages
from django.utils.html import format_html

from tierman.models import MemberAccount, Redemption, Reward, Tier, TierBenefit


# ===========================================
# Tier Admin
# ===========================================


class TierBenefitInline(admin.TabularInline):
    model = TierBenefit
    extra = 0
    fields = ["position", "description", "value"]


class RewardInline(admin.TabularInline):
    model = Reward
    extra = 0
    fields = ["name", "description", "points_cost", "is_available"]


@admin.register(Tier)
class TierAdmin(admin.ModelAdmin):
    list_display = [
        "name",
        "tier_badge",
        "points_required",
        "is_active",
        "reward_count",
        "account_count",
    ]
    list_filter = ["tier_type", "is_active"]
    search_fields = ["name", "description"]
    readonly_fields = ["created_at", "updated_at"]
    inlines = [TierBenefitInline, RewardInline]
    actions = ["reconcile_accounts"]

    def tier_badge(self, obj):
        colors = {
            "basic": "#6c757d",
            "gold": "#ffd700",
            "platinum": "#e5e4e2",
            "diamond": "#b9f2ff",
        }
        color = colors.get(obj.tier_type, "#343a40")
        text_color = "#fff" if obj.tier_type in ("basic", "none") else "#000"
        return format_html(
            '<span style="background:{}; color:{}; padding:2px 8px; '
            'border-radius:3px; font-size:11px;">{}</span>',
            color,
            text_color,
            obj.get_tier_type_display(),
        )

    tier_badge.short_description = "Type"

    def reward_count(self, obj):
        return obj.rewards.count()

    reward_count.short_description = "Rewards"

    def account_count(self, obj):
        return obj.accounts.count()

    account_count.short_description = "Accounts"

    @admin.action(description="Re-resolve tiers of all active accounts")
    def reconcile_accounts(self, request, queryset):
        from tierman.service import MembershipService

        changed = MembershipService.reconcile_all()
        self.message_user(request, f"{changed} accounts changed tier.", messages.SUCCESS)


# ===========================================
# MemberAccount Admin
# ===========================================


class RedemptionInline(admin.TabularInline):
    model = Redemption
    extra = 0
    fields = ["redeemed_at", "reward_name", "tier_name", "points_spent", "status"]
    readonly_fields = fields
    ordering = ["-redeemed_at"]

    def reward_name(self, obj):
        return obj.reward_snapshot.get("name", f"reward:{obj.reward_ref}")

    reward_name.short_description = "Reward"

    def has_add_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(MemberAccount)
class MemberAccountAdmin(admin.ModelAdmin):
    list_display = [
        "code",
        "points_balance",
        "current_tier",
        "status_badge",
        "membership_end_date",
    ]
    list_filter = ["membership_status", "current_tier"]
    search_fields = ["code"]
    readonly_fields = [
        "points_balance",
        "current_tier",
        "membership_status",
        "version",
        "created_at",
        "updated_at",
    ]
    inlines = [RedemptionInline]
    actions = ["reconcile_selected"]

    def status_badge(self, obj):
        colors = {
            "active": "#28a745",
            "inactive": "#6c757d",
            "cancelled": "#dc3545",
        }
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:3px; font-size:11px;">{}</span>',
            colors.get(obj.membership_status, "#6c757d"),
            obj.get_membership_status_display(),
        )

    status_badge.short_description = "Status"

    @admin.action(description="Re-resolve tier of selected accounts")
    def reconcile_selected(self, request, queryset):
        from tierman.service import MembershipService

        changed = 0
        for code in queryset.values_list("code", flat=True):
            result = MembershipService.reconcile(code)
            if result.ok and result.value:
                changed += 1
        self.message_user(request, f"{changed} accounts changed tier.", messages.SUCCESS)


# ===========================================
# Redemption Admin
# ===========================================


@admin.register(Redemption)
class RedemptionAdmin(admin.ModelAdmin):
    list_display = [
        "redeemed_at",
        "account_code",
        "reward_name",
        "tier_name",
        "points_display",
        "status",
    ]
    list_filter = ["status"]
    search_fields = ["account__code", "tier_name"]
    readonly_fields = [
        "account",
        "reward_ref",
        "reward_snapshot",
        "tier",
        "tier_name",
        "points_spent",
        "status",
        "redeemed_at",
    ]
    date_hierarchy = "redeemed_at"

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def account_code(self, obj):
        return obj.account.code

    account_code.short_description = "Account"

    def reward_name(self, obj):
        return obj.reward_snapshot.get("name", f"reward:{obj.reward_ref}")

    reward_name.short_description = "Reward"

    def points_display(self, obj):
        return format_html('<span style="color:red">-{}</span>', obj.points_spent)

    points_display.short_description = "Points"
