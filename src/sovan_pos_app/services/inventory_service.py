from __future__ import annotations

import logging
from typing import Any, Mapping

from sovan_pos_sdk import ApiSession, Product, ProductCache, ProductDraft

from .errors import PosServiceError, normalize_error

logger = logging.getLogger(__name__)


class InventoryService:
    def __init__(self, session: ApiSession, cache: ProductCache | None = None) -> None:
        self.session = session
        self.cache = cache or ProductCache(store=session.local_store)

    def cached_products(self) -> list[Product] | None:
        return self.cache.load()

    def sync_products(self, *, search: str = "", size: str = "") -> list[Product]:
        """Pull the catalogue from the server; only an unfiltered pull is cached."""
        filtered = bool(search or size)
        if not filtered:
            self.cache.clear()
        try:
            products = self.session.products_client().fetch_all(search=search, size=size)
        except Exception as exc:
            raise normalize_error(exc, "Gagal mengambil data produk") from exc
        if not products:
            raise PosServiceError(message="Tidak ada produk valid ditemukan")
        if not filtered:
            self.cache.save(products)
        logger.info("inventory_synced", extra={"count": len(products), "filtered": filtered})
        return products

    def create_product(self, draft: ProductDraft | Mapping[str, Any]) -> list[Product]:
        try:
            return self.session.products_client().create(draft)
        except Exception as exc:
            raise normalize_error(exc, "Gagal menambah produk") from exc
        finally:
            self.cache.clear()

    def update_product(self, product_id: int | str, draft: ProductDraft | Mapping[str, Any]) -> Product:
        try:
            return self.session.products_client().update(product_id, draft)
        except Exception as exc:
            raise normalize_error(exc, "Gagal memperbarui produk") from exc
        finally:
            self.cache.clear()

    def delete_product(self, product_id: int | str) -> None:
        try:
            self.session.products_client().delete(product_id)
        except Exception as exc:
            raise normalize_error(exc, "Gagal menghapus produk") from exc
        finally:
            self.cache.clear()
