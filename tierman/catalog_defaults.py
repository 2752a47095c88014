"""
Canonical tier catalog.

The single source of truth for the default tiers; applied with
``manage.py tierman_sync_catalog``. Bump CATALOG_VERSION when editing.
"""

CATALOG_VERSION = 1

DEFAULT_TIERS = [
    {
        "name": "Basic Membership",
        "tier_type": "basic",
        "description": "Basic membership benefits",
        "points_required": 0,
        "benefits": [
            "Access to member-only sections",
            "Basic customer support",
        ],
    },
    {
        "name": "Gold Membership",
        "tier_type": "gold",
        "description": "Gold level membership with enhanced benefits",
        "points_required": 100,
        "benefits": [
            "Basic benefits plus:",
            "Priority customer support",
            "Exclusive discounts",
        ],
    },
    {
        "name": "Platinum Membership",
        "tier_type": "platinum",
        "description": "Premium membership with great benefits",
        "points_required": 200,
        "benefits": [
            "Gold benefits plus:",
            "Premium content access",
            "Special events access",
        ],
    },
    {
        "name": "Diamond Membership",
        "tier_type": "diamond",
        "description": "Elite level membership with exclusive benefits",
        "points_required": 300,
        "benefits": [
            "Platinum benefits plus:",
            "VIP customer support",
            "Exclusive member events",
            "Personal account manager",
        ],
    },
]
