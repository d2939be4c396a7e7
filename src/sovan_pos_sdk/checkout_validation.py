from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Sequence

from .cart import compute_subtotal, parse_entered_total
from .models_transactions import CARD_TYPES, PAYMENT_METHODS, CartItem


@dataclass(frozen=True)
class CheckoutIssue:
    field: str
    title: str
    reason: str


@dataclass(frozen=True)
class CheckoutValidationResult:
    ok: bool
    issues: list[CheckoutIssue]
    subtotal: Decimal
    entered_total: Decimal | None

    @property
    def first_issue(self) -> CheckoutIssue | None:
        return self.issues[0] if self.issues else None


def validate_checkout(
    *,
    items: Sequence[CartItem],
    payment_method: str | None,
    card_type: str | None,
    entered_total: Any,
) -> CheckoutValidationResult:
    """Check a checkout form in the order the cashier sees the fields.

    All issues are collected; callers showing a single dialog use
    ``first_issue``.
    """
    issues: list[CheckoutIssue] = []
    subtotal = compute_subtotal(items)
    method = (payment_method or "").strip()

    if not items:
        issues.append(
            CheckoutIssue(
                field="cart",
                title="Keranjang Kosong",
                reason="Tambahkan unit produk terlebih dahulu.",
            )
        )
    if not method:
        issues.append(
            CheckoutIssue(
                field="payment_method",
                title="Metode Pembayaran Kosong",
                reason="Silakan pilih metode pembayaran!",
            )
        )
    elif method not in PAYMENT_METHODS:
        issues.append(
            CheckoutIssue(
                field="payment_method",
                title="Metode Pembayaran Tidak Valid",
                reason=f"Metode pembayaran {method!r} tidak dikenal.",
            )
        )
    if method == "debit" and not card_type:
        issues.append(
            CheckoutIssue(
                field="card_type",
                title="Tipe Kartu Kosong",
                reason="Silakan pilih tipe kartu untuk metode pembayaran Debit!",
            )
        )
    elif method == "debit" and card_type not in CARD_TYPES:
        issues.append(
            CheckoutIssue(
                field="card_type",
                title="Tipe Kartu Tidak Valid",
                reason=f"Tipe kartu {card_type!r} tidak dikenal.",
            )
        )

    entered = parse_entered_total(entered_total)
    if entered is None or entered < 0:
        issues.append(
            CheckoutIssue(
                field="entered_total",
                title="Harga Baru Tidak Valid",
                reason="Harga baru harus diisi dan tidak boleh kurang dari 0.",
            )
        )
    elif entered > subtotal:
        issues.append(
            CheckoutIssue(
                field="entered_total",
                title="Harga Baru Tidak Valid",
                reason="Harga baru tidak boleh melebihi subtotal.",
            )
        )

    return CheckoutValidationResult(ok=not issues, issues=issues, subtotal=subtotal, entered_total=entered)
