from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from .models import to_amount

_STRIP_CHARS = str.maketrans("", "", "'\"\n")


def sanitize(value: Any) -> str:
    """Remove quotes and newlines the backend tends to leak into text fields."""
    if value is None:
        return ""
    return str(value).translate(_STRIP_CHARS)


def format_rupiah(amount: Any) -> str:
    """Format an amount the id-ID way: ``Rp 1.250.000`` or ``Rp 1.250,5``."""
    value = to_amount(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    whole, _, fraction = f"{value:f}".partition(".")
    grouped = f"{int(whole):,}".replace(",", ".")
    fraction = fraction.rstrip("0")
    return f"Rp {grouped},{fraction}" if fraction else f"Rp {grouped}"
