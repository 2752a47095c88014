"""
Tierman signals - public event API.

Emitted after the surrounding transaction commits:
- tier_changed: account moved to another tier (sender=MemberAccount,
  account, previous_tier_id, new_tier_id, reason)
- reward_redeemed: redemption recorded (sender=Redemption, account, redemption)
- membership_cancelled: account cancelled (sender=MemberAccount, account,
  discarded_points)
- catalog_changed: tier or reward created/updated/deleted (sender=Tier,
  tier_id, action)
"""

from django.dispatch import Signal

tier_changed = Signal()
reward_redeemed = Signal()
membership_cancelled = Signal()
catalog_changed = Signal()
