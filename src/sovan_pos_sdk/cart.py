from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Sequence

from .models_transactions import AvailableUnit, CartItem

ZERO = Decimal("0")


class DuplicateUnitError(ValueError):
    def __init__(self, unit_code: str) -> None:
        super().__init__(f'Unit dengan kode "{unit_code}" sudah ada di keranjang.')
        self.unit_code = unit_code


@dataclass(frozen=True)
class CartTotals:
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    entered_total: Decimal | None


def parse_entered_total(raw: Any) -> Decimal | None:
    """Parse the cashier's "new price" input; blank or garbage yields None."""
    if raw is None:
        return None
    if isinstance(raw, Decimal):
        return raw if raw.is_finite() else None
    text = str(raw).strip().replace(",", ".")
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def compute_subtotal(items: Sequence[CartItem]) -> Decimal:
    return sum((item.line_total for item in items), ZERO)


def compute_cart_totals(items: Sequence[CartItem], entered_total: Any = None) -> CartTotals:
    subtotal = compute_subtotal(items)
    entered = parse_entered_total(entered_total)
    # A blank or zero entry leaves the subtotal as the price, but the
    # discount is always measured against the entered value.
    total = max(ZERO, entered if entered else subtotal)
    discount = max(ZERO, subtotal - (entered or ZERO))
    return CartTotals(subtotal=subtotal, discount=discount, total=total, entered_total=entered)


@dataclass
class Cart:
    items: list[CartItem] = field(default_factory=list)

    @property
    def unit_codes(self) -> list[str]:
        return [item.unit_code for item in self.items]

    def add(self, unit: AvailableUnit | CartItem) -> CartItem:
        item = unit if isinstance(unit, CartItem) else CartItem.from_unit(unit)
        if item.unit_code in self.unit_codes:
            raise DuplicateUnitError(item.unit_code)
        self.items.append(item)
        return item

    def remove(self, index: int) -> CartItem:
        if index < 0 or index >= len(self.items):
            raise IndexError("cart index is out of range")
        return self.items.pop(index)

    def clear(self) -> None:
        self.items.clear()

    def totals(self, entered_total: Any = None) -> CartTotals:
        return compute_cart_totals(self.items, entered_total)

    def __len__(self) -> int:
        return len(self.items)
