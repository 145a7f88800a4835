from __future__ import annotations

from pydantic import BaseModel, ConfigDict

_FROZEN = ConfigDict(frozen=True)


class Address(BaseModel):
    """A saved delivery address of the logged-in customer."""

    model_config = _FROZEN

    id: int
    city: str = ""
    title: str | None = None
    label: str | None = None
    formatted_customer_address: str = ""
    latitude: float = 0.0
    longitude: float = 0.0


class Deal(BaseModel):
    model_config = _FROZEN

    id: int | str | None = None
    title: str = ""
    description: str = ""
    value: float = 0
    offer_type: str = ""
    type: str = ""
    minimum_order_value: float = 0
    maximum_discount_amount: float = 0


class DiscountInfo(BaseModel):
    """Promotional ("joker") discount attached to a listing."""

    model_config = _FROZEN

    id: str
    value: float = 0


class Restaurant(BaseModel):
    """Single entry of a restaurant listing."""

    model_config = _FROZEN

    code: str
    name: str = ""
    rating: float = 0
    review_number: int = 0
    minimum_delivery_fee: float = 0
    minimum_order_amount: float = 0
    delivery_time: str = ""
    cuisines: tuple[str, ...] = ()
    is_open: bool = True
    budget: int = 0
    deals: tuple[Deal, ...] = ()
    delivery_fee_label: str = ""
    has_discount: bool = False
    discounts_info: tuple[DiscountInfo, ...] = ()
    is_voucher_enabled: bool = False


class MenuItem(BaseModel):
    model_config = _FROZEN

    id: int
    name: str = ""
    description: str = ""
    price: float = 0
    # Price before the current discount; only set when it differs from ``price``.
    discounted_price: float | None = None
    category: str = ""
    variation_id: str = ""


class MenuCategory(BaseModel):
    model_config = _FROZEN

    id: str
    name: str = ""
    items: tuple[MenuItem, ...] = ()


class VendorDetail(BaseModel):
    """A single vendor with its menu and deals."""

    model_config = _FROZEN

    code: str
    name: str = ""
    rating: float = 0
    review_number: int = 0
    deals: tuple[Deal, ...] = ()
    menus: tuple[MenuCategory, ...] = ()
    delivery_fee: float = 0
    minimum_order_amount: float = 0


class MenuSearchHit(BaseModel):
    """Menu item matched by a cross-vendor search, with the vendor it came from."""

    model_config = _FROZEN

    restaurant: Restaurant
    item: MenuItem
