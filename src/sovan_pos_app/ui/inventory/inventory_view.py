from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping
from urllib.parse import quote

from sovan_pos_sdk import Product, format_rupiah, sanitize

from sovan_pos_app.services.errors import PosServiceError
from sovan_pos_app.services.inventory_service import InventoryService
from sovan_pos_app.telemetry import TelemetryLogger, api_call_result, inventory_synced
from sovan_pos_app.ui.shared.error_presenter import ErrorPresenter
from sovan_pos_app.ui.shared.notification_center import NotificationCenter
from sovan_pos_app.ui.shared.pagination import PaginationState, goto_page, next_page, prev_page, update_total
from sovan_pos_app.ui.shared.view_state import resolve_state

ITEMS_PER_PAGE = 20
LOW_STOCK_THRESHOLD = 5
MIN_SEARCH_LENGTH = 2
SEARCH_TOO_SHORT_MESSAGE = "Kata kunci brand atau model minimal 2 karakter atau masukkan ukuran."
DELETE_CONFIRM_MESSAGE = "Apakah Anda yakin ingin menghapus produk ini?"
QR_SERVICE_URL = "https://api.qrserver.com/v1/create-qr-code/?size=50x50&data="
_IMAGE_URL = re.compile(r"^https?://\S+\.(png|jpg|jpeg)$", re.IGNORECASE)


def product_brand(product: Product) -> str:
    return sanitize(product.brand).strip() or "Unknown"


def product_model(product: Product) -> str:
    return sanitize(product.model).strip() or "-"


def filter_products(products: list[Product], search: str = "", size: str = "") -> list[Product]:
    filtered = products
    if len(search) >= MIN_SEARCH_LENGTH:
        needle = sanitize(search).lower()
        filtered = [
            product
            for product in filtered
            if (product.brand and needle in sanitize(product.brand).lower())
            or (product.model and needle in sanitize(product.model).lower())
        ]
    if len(size) >= 1:
        needle = sanitize(size).lower()
        filtered = [product for product in filtered if product.size and needle in sanitize(product.size).lower()]
    return filtered


def brand_counts(products: list[Product]) -> dict[str, int]:
    """Units in stock per brand."""
    counts: dict[str, int] = {}
    for product in products:
        brand = product_brand(product)
        counts[brand] = counts.get(brand, 0) + product.stock
    return counts


def qr_code_url(product: Product, base_url: str) -> str:
    unit = product.units[0] if product.units else None
    if unit is not None and unit.qr_code and _IMAGE_URL.match(unit.qr_code):
        return unit.qr_code
    target = f"{base_url.rstrip('/')}/inventory/{product.id}"
    return QR_SERVICE_URL + quote(target, safe="")


@dataclass
class InventoryView:
    service: InventoryService
    base_url: str = ""
    on_session_expired: Callable[[], Any] | None = None
    telemetry: TelemetryLogger = field(default_factory=lambda: TelemetryLogger(app_name="sovan_pos", enabled=False))
    products: list[Product] = field(default_factory=list)
    search_term: str = ""
    size_term: str = ""
    selected_brand: str | None = None
    pagination: PaginationState = field(default_factory=lambda: PaginationState(page_size=ITEMS_PER_PAGE))
    is_loading: bool = False
    error_message: str | None = None
    trace_id: str | None = None
    requires_login: bool = False
    notifications: NotificationCenter = field(default_factory=NotificationCenter)

    def load(self) -> bool:
        """Show the cached catalogue when there is one, otherwise sync it."""
        cached = self.service.cached_products()
        if cached is not None:
            self._set_products(cached)
            self._emit_synced(action="inventory.load", source="cache", filtered=False)
            return True
        return self.refresh()

    def refresh(self) -> bool:
        self.is_loading = True
        self.error_message = None
        try:
            products = self.service.sync_products()
        except PosServiceError as exc:
            self._fail(exc, action="inventory.refresh")
            return False
        finally:
            self.is_loading = False
        self._set_products(products)
        self._emit_synced(action="inventory.refresh", source="server", filtered=False)
        return True

    def search(self, search: str = "", size: str = "") -> bool:
        self.search_term = search
        self.size_term = size
        update_total(self.pagination, len(self.filtered()), reset=True)
        if self.products:
            return True
        if len(search) < MIN_SEARCH_LENGTH and len(size) < 1:
            self.error_message = SEARCH_TOO_SHORT_MESSAGE
            return False
        self.error_message = None
        self.is_loading = True
        try:
            products = self.service.sync_products(search=sanitize(search), size=sanitize(size))
        except PosServiceError as exc:
            self._fail(exc, action="inventory.search")
            return False
        finally:
            self.is_loading = False
        self._set_products(products)
        self._emit_synced(action="inventory.search", source="server", filtered=True)
        return True

    def select_brand(self, brand: str | None) -> None:
        self.selected_brand = None if brand in (None, "", "all") else brand

    def filtered(self) -> list[Product]:
        return filter_products(self.products, self.search_term, self.size_term)

    def next_page(self) -> int:
        return next_page(self.pagination).page

    def prev_page(self) -> int:
        return prev_page(self.pagination).page

    def goto_page(self, page: int) -> int:
        return goto_page(self.pagination, page).page

    def summary(self) -> dict[str, Any]:
        filtered = self.filtered()
        counts = brand_counts(filtered)
        selected = None
        if self.selected_brand is not None:
            selected = {
                "brand": sanitize(self.selected_brand).upper(),
                "units": counts.get(self.selected_brand, 0),
            }
        return {
            "total_products": len(filtered),
            "low_stock": sum(1 for product in filtered if product.stock < LOW_STOCK_THRESHOLD),
            "total_units": sum(product.stock for product in filtered),
            "brand_count": len(counts),
            "brands": [
                {"brand": brand, "label": f"{sanitize(brand).upper()} ({units} unit)", "units": units}
                for brand, units in counts.items()
            ],
            "selected_brand": selected,
        }

    def rows(self) -> list[dict[str, Any]]:
        filtered = self.filtered()
        update_total(self.pagination, len(filtered))
        offset = self.pagination.offset()
        rows: list[dict[str, Any]] = []
        previous_brand: str | None = None
        for index, product in enumerate(self.pagination.slice(filtered)):
            brand = product_brand(product)
            unit = product.units[0] if product.units else None
            rows.append(
                {
                    "id": product.id,
                    "row_number": offset + index + 1,
                    "brand_header": brand.upper() if index == 0 or brand != previous_brand else None,
                    "brand": brand.upper(),
                    "model": product_model(product).upper(),
                    "color": (product.color or "-").upper(),
                    "size": product.size or "-",
                    "stock": product.stock,
                    "low_stock": product.stock < LOW_STOCK_THRESHOLD,
                    "unit_code": (unit.unit_code if unit else None) or "-",
                    "qr_url": qr_code_url(product, self.base_url),
                    "selling_price": format_rupiah(product.selling_price),
                    "discount_price": "-" if product.discount_price is None else format_rupiah(product.discount_price),
                }
            )
            previous_brand = brand
        return rows

    def add_product(self, form: Mapping[str, Any]) -> dict[str, Any]:
        try:
            self.service.create_product(form)
        except PosServiceError as exc:
            self._fail(exc, action="inventory.create")
            return {"ok": False, "error": exc.message}
        self.notifications.push(level="success", title="Sukses", message="Produk berhasil ditambahkan")
        self.refresh()
        return {"ok": True}

    def update_product(self, product_id: int | str, form: Mapping[str, Any]) -> dict[str, Any]:
        try:
            self.service.update_product(product_id, form)
        except PosServiceError as exc:
            self._fail(exc, action="inventory.update")
            return {"ok": False, "error": exc.message}
        self.notifications.push(level="success", title="Sukses", message="Produk berhasil diperbarui")
        self.refresh()
        return {"ok": True}

    def delete_product(self, product_id: int | str, *, confirmed: bool = False) -> dict[str, Any]:
        if not confirmed:
            return {"ok": False, "confirm_required": True, "title": "Konfirmasi", "message": DELETE_CONFIRM_MESSAGE}
        try:
            self.service.delete_product(product_id)
        except PosServiceError as exc:
            self._fail(exc, action="inventory.delete")
            return {"ok": False, "error": exc.message}
        self.notifications.push(level="success", title="Sukses", message="Produk berhasil dihapus")
        self.refresh()
        return {"ok": True}

    def render(self) -> dict[str, Any]:
        rows = self.rows()
        state = resolve_state(
            is_loading=self.is_loading,
            error=self.error_message,
            has_data=bool(rows),
            requires_login=self.requires_login,
            empty_message="Tidak ada produk",
            trace_id=self.trace_id,
        )
        return {
            "title": "MANAJEMEN INVENTARIS",
            "loading": self.is_loading,
            "error": self.error_message,
            "filters": {"search": self.search_term, "size": self.size_term},
            "summary": self.summary(),
            "rows": rows,
            "pagination": self.pagination.render(),
            "view_state": state.render(),
            "notifications": self.notifications.render(),
        }

    def _set_products(self, products: list[Product]) -> None:
        self.products = list(products)
        self.requires_login = False
        update_total(self.pagination, len(self.filtered()), reset=True)

    def _fail(self, exc: PosServiceError, *, action: str) -> None:
        presented = ErrorPresenter().present(exc, action=action, allow_retry=action == "inventory.refresh")
        self.error_message = presented.user_message
        self.trace_id = exc.trace_id
        self.notifications.push(level="error", title=presented.title, message=presented.user_message, details=presented.details)
        self._emit(action=action, success=False, error_code="session_expired" if exc.requires_login else "request_failed")
        if exc.requires_login:
            self.requires_login = True
            if self.on_session_expired is not None:
                self.on_session_expired()

    def _emit(self, *, action: str, success: bool, error_code: str | None = None) -> None:
        self.telemetry.emit(
            api_call_result(screen="inventory", action=action, success=success, trace_id=self.trace_id, error_code=error_code)
        )

    def _emit_synced(self, *, action: str, source: str, filtered: bool) -> None:
        self.telemetry.emit(
            inventory_synced(product_count=len(self.products), filtered=filtered, source=source, action=action)
        )
