from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sovan_pos_sdk import CartItem, compute_subtotal, format_rupiah


@dataclass
class CartTable:
    items: list[CartItem]

    def render(self) -> dict[str, Any]:
        rows = [
            {
                "index": index,
                "name": item.name or "-",
                "color": item.color or "-",
                "size": item.size or "-",
                "unit_code": item.unit_code,
                "quantity": item.quantity,
                "price": format_rupiah(item.price),
                "line_total": format_rupiah(item.line_total),
                "discounted": item.discount_price is not None,
            }
            for index, item in enumerate(self.items)
        ]
        return {
            "count": len(self.items),
            "line_total": compute_subtotal(self.items),
            "rows": rows,
        }
