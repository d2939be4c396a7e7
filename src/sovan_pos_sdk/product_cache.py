from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from pydantic import ValidationError

from .local_store import LocalStore
from .models_products import Product

logger = logging.getLogger(__name__)

CACHE_KEY = "all_products"
CACHE_VALID_KEY = "cache_valid"
CHUNK_SIZE = 500


@dataclass
class ProductCache:
    """Product list persisted in fixed-size chunks of local storage.

    Layout: ``all_products_count`` holds the number of products,
    ``all_products_<offset>`` holds up to ``chunk_size`` products starting at
    ``offset`` and ``cache_valid`` marks a complete write.
    """

    store: LocalStore = field(default_factory=LocalStore)
    key: str = CACHE_KEY
    chunk_size: int = CHUNK_SIZE

    def save(self, products: Sequence[Product]) -> None:
        self.clear()
        for offset in range(0, len(products), self.chunk_size):
            chunk = [product.model_dump(mode="json") for product in products[offset : offset + self.chunk_size]]
            self.store.set_json(f"{self.key}_{offset}", chunk)
        self.store.set_item(f"{self.key}_count", str(len(products)))
        self.store.set_item(CACHE_VALID_KEY, "true")
        logger.info("product_cache_saved", extra={"count": len(products)})

    def load(self) -> list[Product] | None:
        if self.store.get_item(CACHE_VALID_KEY) != "true":
            return None
        total = self._count()
        if total is None:
            return None
        products: list[Product] = []
        for offset in range(0, total, self.chunk_size):
            chunk = self.store.get_json(f"{self.key}_{offset}")
            if not isinstance(chunk, list):
                logger.warning("product_cache_chunk_missing", extra={"offset": offset})
                return None
            try:
                products.extend(Product.model_validate(item) for item in chunk)
            except ValidationError:
                logger.warning("product_cache_chunk_invalid", extra={"offset": offset})
                return None
        if len(products) != total:
            return None
        return products

    def clear(self) -> None:
        self.store.remove_item(CACHE_VALID_KEY)
        total = self._count()
        if total is not None:
            for offset in range(0, total, self.chunk_size):
                self.store.remove_item(f"{self.key}_{offset}")
            self.store.remove_item(f"{self.key}_count")

    def _count(self) -> int | None:
        raw = self.store.get_item(f"{self.key}_count")
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            return None
