from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo

JAKARTA = ZoneInfo("Asia/Jakarta")

PAYMENT_METHOD_LABELS = {
    "cash": "Tunai",
    "qris": "QRIS",
    "credit_card": "QRIS",
    "debit": "Debit",
    "debit_bri": "Debit (BRI)",
    "debit_bca": "Debit (BCA)",
    "debit_mandiri": "Debit (Mandiri)",
    "transfer": "Transfer",
}

STATUS_LABELS = {
    "paid": "Lunas",
    "pending": "Pending",
    "cancelled": "Dibatalkan",
}


def payment_method_label(method: str | None, card_type: str | None = None) -> str:
    if not method:
        return "-"
    if method == "debit" and card_type:
        return f"Debit ({card_type})"
    return PAYMENT_METHOD_LABELS.get(method, method)


def status_label(status: str | None) -> str:
    if not status:
        return "-"
    return STATUS_LABELS.get(status, status)


def today_in_jakarta(now: datetime | None = None) -> date:
    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return current.astimezone(JAKARTA).date()


def format_timestamp(value: Any) -> str:
    """Render an API timestamp as Jakarta local time, ``-`` when unparseable."""
    if not value:
        return "-"
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return str(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(JAKARTA).strftime("%d/%m/%Y %H:%M")

