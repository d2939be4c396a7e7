from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable

from sovan_pos_sdk import Transaction, TransactionQuery, format_rupiah

from sovan_pos_app.app.preferences import Preferences
from sovan_pos_app.services.errors import PosServiceError
from sovan_pos_app.services.transactions_service import TransactionsService
from sovan_pos_app.telemetry import TelemetryLogger, api_call_result
from sovan_pos_app.ui.shared.formatting import (
    PAYMENT_METHOD_LABELS,
    STATUS_LABELS,
    format_timestamp,
    payment_method_label,
    status_label,
    today_in_jakarta,
)
from sovan_pos_app.ui.shared.notification_center import NotificationCenter
from sovan_pos_app.ui.shared.pagination import PaginationState, goto_page, next_page, prev_page, update_total
from sovan_pos_app.ui.shared.view_state import resolve_state

ITEMS_PER_PAGE = 10


@dataclass
class TransactionListView:
    service: TransactionsService
    preferences: Preferences | None = None
    on_session_expired: Callable[[], Any] | None = None
    today: Callable[[], date] = today_in_jakarta
    telemetry: TelemetryLogger = field(default_factory=lambda: TelemetryLogger(app_name="sovan_pos", enabled=False))
    transactions: list[Transaction] = field(default_factory=list)
    date_filter: date | None = None
    payment_method_filter: str = ""
    status_filter: str = ""
    pagination: PaginationState = field(default_factory=lambda: PaginationState(page_size=ITEMS_PER_PAGE))
    is_loading: bool = False
    error_message: str | None = None
    trace_id: str | None = None
    requires_login: bool = False
    notifications: NotificationCenter = field(default_factory=NotificationCenter)

    def __post_init__(self) -> None:
        if self.date_filter is None:
            self.date_filter = self.today()

    def load(self) -> bool:
        self.is_loading = True
        self.error_message = None
        query = TransactionQuery(
            on_date=self.date_filter,
            payment_method=self.payment_method_filter,
            status=self.status_filter,
        )
        try:
            self.transactions = self.service.list_transactions(query)
        except PosServiceError as exc:
            self.transactions = []
            self._fail(exc)
            return False
        finally:
            self.is_loading = False
            update_total(self.pagination, len(self.transactions), reset=True)
        self._emit(success=True)
        return True

    def set_filters(
        self,
        *,
        on_date: date | str | None = None,
        payment_method: str | None = None,
        status: str | None = None,
    ) -> bool:
        if on_date is not None:
            self.date_filter = on_date if isinstance(on_date, date) else datetime.strptime(on_date, "%Y-%m-%d").date()
        if payment_method is not None:
            self.payment_method_filter = payment_method
        if status is not None:
            self.status_filter = status
        return self.load()

    def reset_filters(self) -> bool:
        self.payment_method_filter = ""
        self.status_filter = ""
        self.date_filter = self.today()
        return self.load()

    def save_note(self, transaction_id: int | str, note: str) -> str:
        cleaned = self.service.save_note(transaction_id, note)
        self.transactions = [
            row.model_copy(update={"note": cleaned}) if str(row.id) == str(transaction_id) else row
            for row in self.transactions
        ]
        return cleaned

    def next_page(self) -> int:
        return next_page(self.pagination).page

    def prev_page(self) -> int:
        return prev_page(self.pagination).page

    def goto_page(self, page: int) -> int:
        return goto_page(self.pagination, page).page

    def toggle_dark_mode(self) -> bool:
        if self.preferences is None:
            return False
        return self.preferences.toggle_dark_mode()

    def rows(self) -> list[dict[str, Any]]:
        return [
            {
                "id": row.id,
                "invoice_number": row.invoice_number or "-",
                "customer_name": row.customer_name or "-",
                "products": row.product_names(),
                "payment_method": payment_method_label(row.payment_method, row.card_type),
                "status": status_label(row.status),
                "total_amount": format_rupiah(row.total_amount),
                "discount": format_rupiah(row.discount),
                "final_amount": format_rupiah(row.final_amount),
                "created_at": format_timestamp(row.created_at),
                "note": row.note,
            }
            for row in self.pagination.slice(self.transactions)
        ]

    def render(self) -> dict[str, Any]:
        rows = self.rows()
        state = resolve_state(
            is_loading=self.is_loading,
            error=self.error_message,
            has_data=bool(rows),
            requires_login=self.requires_login,
            empty_message="Tidak ada transaksi",
            trace_id=self.trace_id,
        )
        return {
            "title": "Daftar Transaksi",
            "dark_mode": self.preferences.dark_mode() if self.preferences else False,
            "filters": {
                "date": self.date_filter.isoformat() if self.date_filter else None,
                "payment_method": self.payment_method_filter,
                "status": self.status_filter,
                "payment_method_options": [{"value": "", "label": "Semua"}]
                + [{"value": key, "label": label} for key, label in PAYMENT_METHOD_LABELS.items()],
                "status_options": [{"value": "", "label": "Semua"}]
                + [{"value": key, "label": label} for key, label in STATUS_LABELS.items()],
            },
            "loading": self.is_loading,
            "error": self.error_message,
            "rows": rows,
            "pagination": self.pagination.render(),
            "view_state": state.render(),
            "notifications": self.notifications.render(),
        }

    def _fail(self, exc: PosServiceError) -> None:
        self.error_message = exc.message
        self.trace_id = exc.trace_id
        self._emit(success=False, error_code="session_expired" if exc.requires_login else "read_failed")
        if exc.requires_login:
            self.requires_login = True
            if self.on_session_expired is not None:
                self.on_session_expired()

    def _emit(self, *, success: bool, error_code: str | None = None) -> None:
        self.telemetry.emit(
            api_call_result(
                screen="transactions",
                action="transaction_list.load",
                success=success,
                trace_id=self.trace_id,
                error_code=error_code,
                row_count=len(self.transactions) if success else None,
            )
        )
