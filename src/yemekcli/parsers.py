"""Response parsers for the upstream JSON payloads.

Pure functions turning raw ``dict`` shapes into the frozen records from
``yemekcli.models``. Optional fields fall back to empty values; ``null``
from upstream is treated the same as a missing key. Only a missing
identifier (vendor ``code``, address ``id``) raises InvalidResponseError.
"""

from __future__ import annotations

import functools
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import ValidationError

from yemekcli.errors import InvalidResponseError
from yemekcli.models.catalog import (
    Address,
    Deal,
    DiscountInfo,
    MenuCategory,
    MenuItem,
    Restaurant,
    VendorDetail,
)

if TYPE_CHECKING:
    from collections.abc import Callable

_R = TypeVar("_R")

FREE_DELIVERY_LABEL = "Free"
CURRENCY_SYMBOL = "₺"


def _get(raw: dict[str, Any], key: str, default: Any) -> Any:
    """``raw[key]`` unless it is missing or ``null``. Non-object ``raw`` yields ``default``."""
    if not isinstance(raw, dict):
        return default
    value = raw.get(key)
    return default if value is None else value


def _require(raw: dict[str, Any], key: str, kind: str) -> Any:
    value = _get(raw, key, None)
    if value is None or value == "":
        raise InvalidResponseError(f"{kind} payload is missing required field '{key}'")
    return value


def _validated(kind: str) -> Callable[[Callable[..., _R]], Callable[..., _R]]:
    """Report a payload that does not fit its record as InvalidResponseError."""

    def decorator(func: Callable[..., _R]) -> Callable[..., _R]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> _R:
            try:
                return func(*args, **kwargs)
            except ValidationError as exc:
                raise InvalidResponseError(f"Malformed {kind} payload: {exc}") from exc

        return wrapper

    return decorator


def _items(payload: dict[str, Any]) -> list[dict[str, Any]]:
    """Unwrap the ``{"data": {"items": [...]}}`` envelope used by list endpoints."""
    data = _get(payload, "data", {})
    return _get(data, "items", []) if isinstance(data, dict) else []


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def format_price(amount: float) -> str:
    """Whole-lira price with dot thousands separators: ``1250.4`` → ``'1.250 ₺'``."""
    rounded = int(Decimal(str(amount)).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    return f"{rounded:,}".replace(",", ".") + f" {CURRENCY_SYMBOL}"


def stars(rating: float) -> str:
    """Five-slot star bar with an optional half star."""
    rating = min(max(rating, 0.0), 5.0)
    full = math.floor(rating)
    half = 1 if rating - full >= 0.5 else 0
    return "★" * full + ("½" if half else "") + "☆" * (5 - full - half)


def budget_label(budget: int) -> str:
    if budget <= 1:
        return CURRENCY_SYMBOL
    if budget <= 2:
        return CURRENCY_SYMBOL * 2
    return CURRENCY_SYMBOL * 3


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@_validated("address")
def parse_address(raw: dict[str, Any]) -> Address:
    return Address(
        id=_require(raw, "id", "Address"),
        city=_get(raw, "city", ""),
        title=raw.get("title"),
        label=raw.get("label"),
        formatted_customer_address=_get(raw, "formatted_customer_address", ""),
        latitude=_get(raw, "latitude", 0.0),
        longitude=_get(raw, "longitude", 0.0),
    )


@_validated("deal")
def parse_deal(raw: dict[str, Any]) -> Deal:
    return Deal(
        id=raw.get("id"),
        title=_get(raw, "title", ""),
        description=_get(raw, "description", ""),
        value=_get(raw, "value", 0),
        offer_type=_get(raw, "offer_type", ""),
        type=_get(raw, "type", ""),
        minimum_order_value=_get(raw, "minimum_order_value", 0),
        maximum_discount_amount=_get(raw, "maximum_discount_amount", 0),
    )


def _delivery_fee_label(raw: dict[str, Any]) -> str:
    if raw.get("delivery_fee_type") == "free":
        return FREE_DELIVERY_LABEL
    minimum_fee = raw.get("minimum_delivery_fee")
    if minimum_fee:
        return format_price(minimum_fee)
    return ""


@_validated("restaurant")
def parse_restaurant(raw: dict[str, Any]) -> Restaurant:
    """Parse one item of the vendor listing endpoint."""
    metadata = _get(raw, "metadata", {})
    return Restaurant(
        code=_require(raw, "code", "Restaurant"),
        name=_get(raw, "name", ""),
        rating=_get(raw, "rating", 0),
        review_number=_get(raw, "review_number", 0),
        minimum_delivery_fee=_get(raw, "minimum_delivery_fee", 0),
        minimum_order_amount=_get(raw, "minimum_order_amount", 0),
        delivery_time=str(_get(raw, "delivery_time", "")),
        cuisines=tuple(_get(c, "name", "") for c in _get(raw, "cuisines", [])),
        # Listings omit is_active for open vendors; only an explicit false closes one.
        is_open=raw.get("is_active") is not False,
        budget=_get(raw, "budget", 0),
        deals=tuple(parse_deal(d) for d in _get(raw, "deals", [])),
        delivery_fee_label=_delivery_fee_label(raw),
        has_discount=isinstance(metadata, dict) and metadata.get("has_discount") is True,
        discounts_info=tuple(
            DiscountInfo(id=str(_get(d, "id", "")), value=_get(d, "value", 0))
            for d in _get(raw, "discounts_info", [])
        ),
        is_voucher_enabled=raw.get("is_voucher_enabled") is True,
    )


@_validated("menu item")
def parse_menu_item(raw: dict[str, Any], category_name: str) -> MenuItem:
    """Parse a product. Display price comes from its first variation."""
    variations = _get(raw, "product_variations", [])
    variation = variations[0] if variations and isinstance(variations[0], dict) else {}
    price = _get(variation, "price", 0)
    price_before = _get(variation, "price_before_discount", None)

    return MenuItem(
        id=_get(raw, "id", 0),
        name=_get(raw, "name", ""),
        description=_get(raw, "description", ""),
        price=price,
        discounted_price=price_before if price_before and price_before != price else None,
        category=category_name,
        variation_id=_get(variation, "code", ""),
    )


def parse_menu_categories(vendor: dict[str, Any]) -> tuple[MenuCategory, ...]:
    """Flatten every menu's categories, dropping the ones with no products."""
    categories: list[MenuCategory] = []
    for menu in _get(vendor, "menus", []):
        for category in _get(menu, "menu_categories", []):
            name = _get(category, "name", "")
            items = tuple(parse_menu_item(p, name) for p in _get(category, "products", []))
            if not items:
                continue
            category_id = _get(category, "id", None)
            categories.append(
                MenuCategory(
                    id="" if category_id is None else str(category_id),
                    name=name,
                    items=items,
                )
            )
    return tuple(categories)


@_validated("vendor")
def parse_vendor_detail(payload: dict[str, Any]) -> VendorDetail:
    """Parse the single-vendor endpoint response (``{"data": {...}}``)."""
    vendor = _get(payload, "data", None)
    if not isinstance(vendor, dict):
        raise InvalidResponseError("Vendor payload has no 'data' object")

    rating = _get(vendor, "rating", {})
    dynamic_fee = _get(_get(vendor, "dynamic_pricing", {}), "delivery_fee", {})
    # A per-address dynamic price beats the static minimum fee.
    delivery_fee = _get(dynamic_fee, "total", None)
    if delivery_fee is None:
        delivery_fee = _get(vendor, "minimum_delivery_fee", 0)

    return VendorDetail(
        code=_require(vendor, "code", "Vendor"),
        name=_get(vendor, "name", ""),
        rating=_get(rating, "score", 0),
        review_number=_get(rating, "total_count", 0),
        deals=tuple(parse_deal(d) for d in _get(vendor, "deals", [])),
        menus=parse_menu_categories(vendor),
        delivery_fee=delivery_fee,
        minimum_order_amount=_get(vendor, "minimum_order_amount", 0),
    )


def parse_addresses(payload: dict[str, Any]) -> list[Address]:
    return [parse_address(item) for item in _items(payload)]


def parse_restaurants(payload: dict[str, Any]) -> list[Restaurant]:
    return [parse_restaurant(item) for item in _items(payload)]
