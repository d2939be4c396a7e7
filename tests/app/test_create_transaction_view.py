from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

import pytest

from sovan_pos_sdk import AvailableUnit

from sovan_pos_app.services.errors import PosServiceError
from sovan_pos_app.ui.transactions.create_transaction_view import CreateTransactionView, search_units

UNITS = [
    AvailableUnit(product_id=1, product_name="Nike Air Max", color="Hitam", size="42", unit_code="NK-001", selling_price="500000"),
    AvailableUnit(
        product_id=2,
        product_name="Adidas Samba",
        color="Putih",
        size="41",
        unit_code="AD-002",
        selling_price="900000",
        discount_price="750000",
    ),
    AvailableUnit(product_id=3, product_name="Vans Old Skool", color="Hitam", size="40", unit_code="VN-003", selling_price="650000"),
]


@dataclass
class FakeTransactionsService:
    units: list[AvailableUnit] = field(default_factory=lambda: list(UNITS))
    create_error: PosServiceError | None = None
    created: list = field(default_factory=list)

    def list_units(self):
        return self.units

    def create_transaction(self, request):
        self.created.append(request)
        if self.create_error is not None:
            raise self.create_error
        return {"id": 10, "invoice_number": "INV-0010"}


def _view(**kwargs) -> CreateTransactionView:
    view = CreateTransactionView(service=kwargs.pop("service", FakeTransactionsService()), **kwargs)
    view.load_units()
    return view


def test_search_units_matches_any_field_and_caps_results() -> None:
    assert [unit.unit_code for unit in search_units(UNITS, "hitam")] == ["NK-001", "VN-003"]
    assert [unit.unit_code for unit in search_units(UNITS, "ad-0")] == ["AD-002"]
    assert [unit.unit_code for unit in search_units(UNITS, "41")] == ["AD-002"]
    assert search_units(UNITS, "   ") == []
    assert len(search_units(UNITS * 10, "a", limit=20)) == 20


def test_add_to_cart_clears_search_and_rejects_duplicates() -> None:
    view = _view()
    view.search("nike")

    assert view.add_to_cart(view.search_results[0]) is True
    assert view.search_query == ""
    assert view.search_results == []
    assert view.notifications.latest()["title"] == "Unit Ditambahkan"

    assert view.add_to_cart("NK-001") is False
    assert view.notifications.latest()["title"] == "Unit Sudah Ditambahkan"
    assert len(view.cart) == 1


def test_add_unknown_unit_code() -> None:
    view = _view()
    assert view.add_to_cart("ZZ-999") is False
    assert view.notifications.latest()["title"] == "Unit Tidak Ditemukan"


def test_remove_item() -> None:
    view = _view()
    view.add_to_cart("NK-001")

    assert view.remove_item(3) is False
    assert view.remove_item(0) is True
    assert len(view.cart) == 0


def test_update_form_clears_card_type_for_non_debit() -> None:
    view = _view()
    view.update_form(payment_method="debit", card_type="BRI")
    assert view.form.card_type == "BRI"

    view.update_form(payment_method="cash")
    assert view.form.card_type == ""

    with pytest.raises(AttributeError):
        view.update_form(coupon="X")


def test_render_shows_totals_and_debit_card_types() -> None:
    view = _view()
    view.add_to_cart("NK-001")
    view.add_to_cart("AD-002")
    view.update_form(payment_method="debit", new_total="1000000")

    rendered = view.render()

    assert rendered["cart"]["count"] == 2
    assert rendered["cart"]["line_total"] == Decimal("1250000")
    assert rendered["cart"]["rows"][1]["price"] == "Rp 750.000"
    assert rendered["totals"] == {"subtotal": "Rp 1.250.000", "discount": "Rp 250.000", "total": "Rp 1.000.000"}
    assert rendered["card_types"] == ["Mandiri", "BRI", "BCA"]
    assert rendered["payment_methods"][0] == {"value": "cash", "label": "Tunai"}


def test_submit_reports_first_validation_issue() -> None:
    service = FakeTransactionsService()
    view = _view(service=service)

    result = view.submit()

    assert result["ok"] is False
    assert result["error"] == "Tambahkan unit produk terlebih dahulu."
    assert [issue["field"] for issue in result["issues"]] == ["cart", "payment_method", "entered_total"]
    assert service.created == []


def test_submit_rejects_total_above_subtotal() -> None:
    view = _view()
    view.add_to_cart("NK-001")
    view.update_form(payment_method="cash", new_total="500001")

    result = view.submit()

    assert result["ok"] is False
    assert result["error"] == "Harga baru tidak boleh melebihi subtotal."


def test_submit_builds_request_and_resets() -> None:
    service = FakeTransactionsService()
    completed: list[bool] = []
    view = _view(service=service, on_completed=lambda: completed.append(True))
    view.add_to_cart("NK-001")
    view.add_to_cart("AD-002")
    view.update_form(
        customer_name="Budi",
        customer_phone="0812",
        payment_method="debit",
        card_type="BCA",
        notes="bayar di kasir",
        new_total="1200000",
    )

    result = view.submit()

    assert result == {"ok": True, "invoice_number": "INV-0010", "total": Decimal("1200000")}
    request = service.created[0]
    assert request.discount_amount == Decimal("1200000")
    assert request.card_type == "BCA"
    assert [line.unit_code for line in request.products] == ["NK-001", "AD-002"]
    assert request.products[0].discount_price is None
    assert request.products[1].discount_price == Decimal("750000")
    assert completed == [True]
    assert len(view.cart) == 0
    assert view.form.customer_name == ""
    assert view.notifications.latest()["title"] == "Transaksi Berhasil"


def test_submit_trims_padded_payment_choices() -> None:
    service = FakeTransactionsService()
    view = _view(service=service)
    view.add_to_cart("NK-001")
    view.update_form(payment_method=" debit ", card_type=" BRI", new_total="450000")

    assert view.form.payment_method == "debit"
    result = view.submit()

    assert result["ok"] is True
    assert service.created[0].payment_method == "debit"
    assert service.created[0].card_type == "BRI"


def test_submit_trims_payment_method_set_directly() -> None:
    service = FakeTransactionsService()
    view = _view(service=service)
    view.add_to_cart("NK-001")
    view.update_form(new_total="500000")
    view.form.payment_method = " cash"

    assert view.submit()["ok"] is True
    assert service.created[0].payment_method == "cash"
    assert service.created[0].card_type is None


def test_submit_failure_keeps_cart() -> None:
    service = FakeTransactionsService(
        create_error=PosServiceError(message="Unit sudah terjual", details="REQUEST_FAILED (HTTP 200)", trace_id="t-9")
    )
    view = _view(service=service)
    view.add_to_cart("VN-003")
    view.update_form(payment_method="qris", new_total="650000")

    result = view.submit()

    assert result["ok"] is False
    assert result["error"] == "Unit sudah terjual"
    assert result["trace_id"] == "t-9"
    assert result["details"]["action"] == "transactions.create"
    assert len(view.cart) == 1
    assert view.notifications.latest()["title"] == "Gagal Membuat Transaksi"


def test_session_expiry_while_loading_units() -> None:
    expired: list[bool] = []

    class ExpiredService(FakeTransactionsService):
        def list_units(self):
            raise PosServiceError(message="Sesi habis", requires_login=True)

    view = CreateTransactionView(service=ExpiredService(), on_session_expired=lambda: expired.append(True))

    assert view.load_units() is False
    assert expired == [True]
    assert view.render()["view_state"]["status"] == "login_required"
