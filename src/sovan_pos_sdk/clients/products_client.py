from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from ..exceptions import ApiError, EnvelopeError, ForbiddenError, UnauthorizedError
from ..http_client import unwrap_envelope
from ..models import Pagination
from ..models_products import Product, ProductDraft, ProductPage, is_valid_product_record
from ..product_validation import validate_product_draft
from .base import BaseClient

logger = logging.getLogger(__name__)

PRODUCTS_PATH = "/api/products/"
NO_CACHE_HEADERS = {"Cache-Control": "no-cache"}


@dataclass
class ProductsClient(BaseClient):
    sleep: Callable[[float], None] = time.sleep

    def list_page(
        self,
        page: int = 1,
        per_page: int | None = None,
        *,
        search: str = "",
        size: str = "",
    ) -> ProductPage:
        params: dict[str, Any] = {}
        if search:
            params["search"] = search
        if size:
            params["size"] = size
        params.update(
            {
                "page": page,
                "per_page": per_page or self.http.config.page_size,
                "no_cache": "true",
                "order_by": "created_at",
                "sort": "desc",
            }
        )
        payload = self._request(
            "GET",
            PRODUCTS_PATH,
            params=params,
            headers=NO_CACHE_HEADERS,
            module="products",
            operation="list_page",
            use_get_cache=False,
            retry=False,
        )
        data = unwrap_envelope(payload, failure_message=f"Gagal mengambil data (halaman {page})")
        records = data.get("products") if isinstance(data, dict) else None
        if not isinstance(records, list):
            raise EnvelopeError(
                code="INVALID_PRODUCTS",
                message="Data produk dari API tidak valid",
                details={"page": page},
                trace_id=None,
                status_code=200,
                raw_payload=payload,
            )
        valid = [record for record in records if is_valid_product_record(record)]
        dropped = len(records) - len(valid)
        if dropped:
            logger.warning("products_dropped_invalid", extra={"page": page, "dropped": dropped})
        pagination = Pagination.model_validate(data.get("pagination") or {})
        if not pagination.last_page:
            pagination = pagination.model_copy(update={"last_page": 1})
        return ProductPage(
            products=[Product.model_validate(record) for record in valid],
            pagination=pagination,
            dropped=dropped,
        )

    def fetch_all(self, *, search: str = "", size: str = "") -> list[Product]:
        """Walk every catalogue page, retrying each page a fixed number of times.

        All page requests of one walk share a single ``catalogue-sync`` trace id.
        """
        with self._operation("catalogue-sync"):
            return self._fetch_pages(search=search, size=size)

    def _fetch_pages(self, *, search: str, size: str) -> list[Product]:
        max_attempts = self.http.config.retries
        delay = self.http.config.retry_delay_seconds
        products: list[Product] = []
        page = 1
        last_page = 1
        while True:
            for attempt in range(1, max_attempts + 1):
                try:
                    result = self.list_page(page, search=search, size=size)
                except (UnauthorizedError, ForbiddenError):
                    raise
                except ApiError as exc:
                    if attempt >= max_attempts:
                        logger.error(
                            "products_page_failed",
                            extra={"page": page, "attempts": attempt, "code": exc.code},
                        )
                        raise
                    logger.warning("products_page_retry", extra={"page": page, "attempt": attempt, "code": exc.code})
                    self.sleep(delay)
                else:
                    break
            products.extend(result.products)
            last_page = result.pagination.last_page or 1
            if page >= last_page:
                break
            page += 1
        logger.info("products_fetched", extra={"count": len(products), "pages": page})
        return products

    def create(self, draft: ProductDraft | Mapping[str, Any]) -> list[Product]:
        payload = validate_product_draft(draft).to_payload()
        data = self._request(
            "POST",
            PRODUCTS_PATH,
            json_body=payload,
            headers=NO_CACHE_HEADERS,
            module="products",
            operation="create",
            invalidate_paths=[PRODUCTS_PATH],
        )
        created = unwrap_envelope(data, failure_message="Gagal menambah produk")
        fallback_name = f"{payload['brand']} {payload['model']}".strip()
        if isinstance(created, dict) and isinstance(created.get("products"), list):
            return [Product.model_validate({"name": fallback_name, **item}) for item in created["products"]]
        if isinstance(created, dict) and created.get("id"):
            return [Product.model_validate({"name": fallback_name, **created})]
        raise EnvelopeError(
            code="INVALID_PRODUCT",
            message="Gagal menambah produk",
            details=None,
            trace_id=None,
            status_code=200,
            raw_payload=data,
        )

    def update(self, product_id: int | str, draft: ProductDraft | Mapping[str, Any]) -> Product:
        payload = validate_product_draft(draft).to_payload()
        data = self._request(
            "PUT",
            f"{PRODUCTS_PATH}{product_id}/",
            json_body=payload,
            headers=NO_CACHE_HEADERS,
            module="products",
            operation="update",
            invalidate_paths=[PRODUCTS_PATH],
        )
        updated = unwrap_envelope(data, failure_message="Gagal memperbarui produk")
        if not isinstance(updated, dict):
            raise EnvelopeError(
                code="INVALID_PRODUCT",
                message="Gagal memperbarui produk",
                details=None,
                trace_id=None,
                status_code=200,
                raw_payload=data,
            )
        fallback_name = f"{payload['brand']} {payload['model']}".strip()
        return Product.model_validate(
            {"id": product_id, "name": fallback_name, **updated, "units": updated.get("units") or []}
        )

    def delete(self, product_id: int | str) -> None:
        self._request(
            "DELETE",
            f"{PRODUCTS_PATH}{product_id}/",
            headers=NO_CACHE_HEADERS,
            module="products",
            operation="delete",
            invalidate_paths=[PRODUCTS_PATH],
        )
