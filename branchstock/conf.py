"""
Branchstock configuration.

Usage in settings.py:
    BRANCHSTOCK = {
        "HISTORY_LIMIT": 50,
        "SKU_RETRIES": 1,
        "ENFORCE_PROVIDER_PRODUCTS": True,
        "EAN_PREFIX": "20",
        "EAN_FILLER": "00",
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class BranchstockSettings:
    """Branchstock configuration settings."""

    # Max rows returned by supply_history() when no limit is given
    HISTORY_LIMIT: int = 50

    # Automatic regenerate-and-retry attempts after a SKU/barcode collision
    SKU_RETRIES: int = 1

    # Reject intake lines whose product belongs to another provider
    ENFORCE_PROVIDER_PRODUCTS: bool = True

    # EAN-13 layout: PREFIX(2) + global id(3) + sequence(5) + FILLER(2) + check(1)
    EAN_PREFIX: str = "20"
    EAN_FILLER: str = "00"


def get_branchstock_settings() -> BranchstockSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "BRANCHSTOCK", {})
    return BranchstockSettings(**{
        k: v for k, v in user_settings.items()
        if k in BranchstockSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_branchstock_settings(), name)


branchstock_settings = _LazySettings()
