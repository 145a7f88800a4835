"""In-memory cart for building a single-vendor order."""

from __future__ import annotations

from dataclasses import dataclass, field

from yemekcli.models.catalog import MenuItem


@dataclass
class CartLine:
    item: MenuItem
    quantity: int
    vendor_code: str
    vendor_name: str

    @property
    def subtotal(self) -> float:
        return self.item.price * self.quantity


@dataclass
class Cart:
    """Order lines from exactly one vendor, one line per menu item id.

    Adding an item from another vendor empties the cart first. Every
    operation is total: removing an unknown id does nothing.
    """

    lines: list[CartLine] = field(default_factory=list)
    vendor_code: str = ""
    vendor_name: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def total_price(self) -> float:
        return sum(line.subtotal for line in self.lines)

    def _find(self, item_id: int) -> CartLine | None:
        return next((line for line in self.lines if line.item.id == item_id), None)

    def add(self, item: MenuItem, vendor_code: str, vendor_name: str) -> None:
        if self.vendor_code and self.vendor_code != vendor_code:
            self.lines.clear()
        self.vendor_code = vendor_code
        self.vendor_name = vendor_name

        line = self._find(item.id)
        if line is not None:
            line.quantity += 1
        else:
            self.lines.append(
                CartLine(item=item, quantity=1, vendor_code=vendor_code, vendor_name=vendor_name)
            )

    def remove(self, item_id: int) -> None:
        line = self._find(item_id)
        if line is None:
            return
        line.quantity -= 1
        if line.quantity <= 0:
            self.lines.remove(line)
        if not self.lines:
            self._reset_vendor()

    def clear(self) -> None:
        self.lines.clear()
        self._reset_vendor()

    def _reset_vendor(self) -> None:
        self.vendor_code = ""
        self.vendor_name = ""
