"""
Tierman configuration.

Usage in settings.py:
    TIERMAN = {
        "MAX_WRITE_RETRIES": 3,
        "MEMBERSHIP_TERM_DAYS": 30,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class TiermanSettings:
    """Tierman configuration settings."""

    # Optimistic-lock retries for a single account write
    MAX_WRITE_RETRIES: int = 3

    # Default membership term for new accounts
    MEMBERSHIP_TERM_DAYS: int = 30

    # Cap on redemption history entries returned (None: whole history)
    HISTORY_LIMIT: int | None = None

    # New accounts start active (True) or inactive (False)
    ENROLL_ACTIVE: bool = False


def get_tierman_settings() -> TiermanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "TIERMAN", {})
    return TiermanSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_tierman_settings(), name)


tierman_settings = _LazySettings()
