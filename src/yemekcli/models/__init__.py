from __future__ import annotations

from yemekcli.models.cache import CacheEntry
from yemekcli.models.catalog import (
    Address,
    Deal,
    DiscountInfo,
    MenuCategory,
    MenuItem,
    MenuSearchHit,
    Restaurant,
    VendorDetail,
)
from yemekcli.models.credentials import Credentials

__all__ = [
    # catalog
    "Address",
    "Deal",
    "DiscountInfo",
    "Restaurant",
    "MenuItem",
    "MenuCategory",
    "VendorDetail",
    "MenuSearchHit",
    # cache
    "CacheEntry",
    # credentials
    "Credentials",
]
