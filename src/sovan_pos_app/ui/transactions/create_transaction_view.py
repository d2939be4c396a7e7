from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from sovan_pos_sdk import (
    CARD_TYPES,
    PAYMENT_METHODS,
    AvailableUnit,
    Cart,
    DuplicateUnitError,
    TransactionCreateRequest,
    TransactionLine,
    format_rupiah,
    validate_checkout,
)

from sovan_pos_app.services.errors import PosServiceError
from sovan_pos_app.services.transactions_service import TransactionsService
from sovan_pos_app.telemetry import TelemetryLogger, api_call_result, checkout_result
from sovan_pos_app.ui.shared.formatting import payment_method_label
from sovan_pos_app.ui.shared.error_presenter import ErrorPresenter, PresentedError
from sovan_pos_app.ui.shared.notification_center import NotificationCenter
from sovan_pos_app.ui.shared.view_state import resolve_state
from sovan_pos_app.ui.transactions.components.cart_table import CartTable

MAX_SEARCH_RESULTS = 20
_CHOICE_FIELDS = ("payment_method", "card_type")


def search_units(units: list[AvailableUnit], query: str, limit: int = MAX_SEARCH_RESULTS) -> list[AvailableUnit]:
    needle = query.strip().lower()
    if not needle:
        return []
    matches = [
        unit
        for unit in units
        if any(needle in (value or "").lower() for value in (unit.product_name, unit.color, unit.size, unit.unit_code))
    ]
    return matches[:limit]


@dataclass
class CheckoutForm:
    customer_name: str = ""
    customer_phone: str = ""
    payment_method: str = ""
    card_type: str = ""
    notes: str = ""
    new_total: str = ""


@dataclass
class CreateTransactionView:
    service: TransactionsService
    on_session_expired: Callable[[], Any] | None = None
    on_completed: Callable[[], Any] | None = None
    telemetry: TelemetryLogger = field(default_factory=lambda: TelemetryLogger(app_name="sovan_pos", enabled=False))
    units: list[AvailableUnit] = field(default_factory=list)
    search_query: str = ""
    search_results: list[AvailableUnit] = field(default_factory=list)
    cart: Cart = field(default_factory=Cart)
    form: CheckoutForm = field(default_factory=CheckoutForm)
    is_loading: bool = False
    error_message: str | None = None
    trace_id: str | None = None
    requires_login: bool = False
    last_invoice: str | None = None
    notifications: NotificationCenter = field(default_factory=NotificationCenter)

    def load_units(self) -> bool:
        self.is_loading = True
        self.error_message = None
        try:
            self.units = self.service.list_units()
        except PosServiceError as exc:
            self._fail(exc, action="units.load")
            return False
        finally:
            self.is_loading = False
        self.search_results = []
        return True

    def search(self, query: str) -> list[AvailableUnit]:
        self.search_query = query
        self.search_results = search_units(self.units, query)
        return self.search_results

    def add_to_cart(self, unit: AvailableUnit | str) -> bool:
        if isinstance(unit, str):
            found = next((candidate for candidate in self.units if candidate.unit_code == unit), None)
            if found is None:
                self.notifications.push(level="error", title="Unit Tidak Ditemukan", message=f'Unit "{unit}" tidak ditemukan.')
                return False
            unit = found
        try:
            self.cart.add(unit)
        except DuplicateUnitError as exc:
            self.notifications.push(level="error", title="Unit Sudah Ditambahkan", message=str(exc))
            return False
        self.search_query = ""
        self.search_results = []
        self.notifications.push(
            level="success",
            title="Unit Ditambahkan",
            message=f'Unit "{unit.unit_code}" berhasil ditambahkan ke keranjang!',
        )
        return True

    def remove_item(self, index: int) -> bool:
        try:
            self.cart.remove(index)
        except IndexError:
            return False
        return True

    def update_form(self, **values: str) -> CheckoutForm:
        for name, value in values.items():
            if not hasattr(self.form, name):
                raise AttributeError(f"unknown checkout field: {name}")
            if name in _CHOICE_FIELDS:
                value = (value or "").strip()
            setattr(self.form, name, value)
        if self.form.payment_method != "debit":
            self.form.card_type = ""
        return self.form

    def submit(self) -> dict[str, Any]:
        result = validate_checkout(
            items=self.cart.items,
            payment_method=self.form.payment_method,
            card_type=self.form.card_type or None,
            entered_total=self.form.new_total,
        )
        if not result.ok:
            issue = result.first_issue
            self.notifications.push(level="error", title=issue.title, message=issue.reason)
            return {
                "ok": False,
                "error": issue.reason,
                "issues": [{"field": item.field, "title": item.title, "reason": item.reason} for item in result.issues],
            }
        totals = self.cart.totals(self.form.new_total)
        method = self.form.payment_method.strip()
        request = TransactionCreateRequest(
            customer_name=self.form.customer_name,
            customer_phone=self.form.customer_phone,
            payment_method=method,
            card_type=self.form.card_type.strip() if method == "debit" else None,
            notes=self.form.notes,
            discount_amount=totals.total,
            products=[
                TransactionLine(
                    product_id=item.product_id,
                    unit_code=item.unit_code,
                    discount_price=item.discount_price,
                    quantity=item.quantity,
                )
                for item in self.cart.items
            ],
        )
        self.is_loading = True
        try:
            created = self.service.create_transaction(request)
        except PosServiceError as exc:
            presented = self._fail(exc, action="transactions.create", title="Gagal Membuat Transaksi")
            return {
                "ok": False,
                "error": presented.user_message,
                "trace_id": exc.trace_id,
                "category": presented.category,
                "details": presented.details,
            }
        finally:
            self.is_loading = False
        self.last_invoice = created.get("invoice_number")
        self.notifications.push(level="success", title="Transaksi Berhasil", message="Transaksi telah berhasil dibuat!")
        self.telemetry.emit(
            checkout_result(
                success=True,
                item_count=len(self.cart),
                payment_method=method,
                total=totals.total,
                invoice_number=self.last_invoice,
            )
        )
        self.reset()
        if self.on_completed is not None:
            self.on_completed()
        return {"ok": True, "invoice_number": self.last_invoice, "total": totals.total}

    def reset(self) -> None:
        self.cart.clear()
        self.form = CheckoutForm()
        self.search_query = ""
        self.search_results = []
        self.error_message = None

    def render(self) -> dict[str, Any]:
        totals = self.cart.totals(self.form.new_total)
        state = resolve_state(
            is_loading=self.is_loading,
            error=self.error_message,
            has_data=bool(self.units),
            requires_login=self.requires_login,
            empty_message="Tidak ada unit tersedia",
            trace_id=self.trace_id,
        )
        return {
            "title": "Buat Transaksi",
            "loading": self.is_loading,
            "error": self.error_message,
            "search": {
                "query": self.search_query,
                "results": [
                    {
                        "unit_code": unit.unit_code,
                        "product_name": unit.product_name or "-",
                        "color": unit.color or "-",
                        "size": unit.size or "-",
                        "price": format_rupiah(unit.discount_price if unit.discount_price is not None else unit.selling_price),
                    }
                    for unit in self.search_results
                ],
            },
            "cart": CartTable(self.cart.items).render(),
            "totals": {
                "subtotal": format_rupiah(totals.subtotal),
                "discount": format_rupiah(totals.discount),
                "total": format_rupiah(totals.total),
            },
            "payment_methods": [{"value": method, "label": payment_method_label(method)} for method in PAYMENT_METHODS],
            "card_types": list(CARD_TYPES) if self.form.payment_method == "debit" else [],
            "form": {
                "customer_name": self.form.customer_name,
                "customer_phone": self.form.customer_phone,
                "payment_method": self.form.payment_method,
                "card_type": self.form.card_type,
                "notes": self.form.notes,
                "new_total": self.form.new_total,
            },
            "view_state": state.render(),
            "notifications": self.notifications.render(),
        }

    def _fail(self, exc: PosServiceError, *, action: str, title: str | None = None) -> PresentedError:
        presented = ErrorPresenter().present(exc, action=action)
        self.error_message = presented.user_message
        self.trace_id = exc.trace_id
        self.notifications.push(
            level="error",
            title=title or presented.title,
            message=presented.user_message,
            details=presented.details,
        )
        self._emit_failure(action=action, error_code="session_expired" if exc.requires_login else "request_failed")
        if exc.requires_login:
            self.requires_login = True
            if self.on_session_expired is not None:
                self.on_session_expired()
        return presented

    def _emit_failure(self, *, action: str, error_code: str) -> None:
        if action == "transactions.create":
            event = checkout_result(
                success=False,
                item_count=len(self.cart),
                payment_method=self.form.payment_method,
                trace_id=self.trace_id,
                error_code=error_code,
            )
        else:
            event = api_call_result(
                screen="create_transaction",
                action=action,
                success=False,
                trace_id=self.trace_id,
                error_code=error_code,
            )
        self.telemetry.emit(event)
