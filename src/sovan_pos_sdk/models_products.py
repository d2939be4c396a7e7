from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import Pagination, to_amount, to_count, to_optional_amount
from .text import sanitize


class Unit(BaseModel):
    model_config = ConfigDict(extra="allow")

    unit_code: str | None = None
    qr_code: str | None = None


class Product(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int | str
    name: str
    brand: str | None = None
    model: str | None = None
    size: str | None = None
    color: str | None = None
    stock: int = 0
    selling_price: Decimal = Decimal("0")
    discount_price: Decimal | None = None
    units: list[Unit] = Field(default_factory=list)

    @field_validator("stock", mode="before")
    @classmethod
    def _stock(cls, value: Any) -> int:
        return to_count(value)

    @field_validator("selling_price", mode="before")
    @classmethod
    def _selling_price(cls, value: Any) -> Decimal:
        return to_amount(value)

    @field_validator("discount_price", mode="before")
    @classmethod
    def _discount_price(cls, value: Any) -> Decimal | None:
        return to_optional_amount(value)

    @field_validator("size", "color", "brand", "model", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)


def is_valid_product_record(record: Any) -> bool:
    """Records the catalogue keeps: id, name, numeric stock and a units list."""
    if not isinstance(record, dict):
        return False
    stock = record.get("stock")
    return (
        bool(record.get("id"))
        and bool(record.get("name"))
        and isinstance(stock, (int, float))
        and not isinstance(stock, bool)
        and isinstance(record.get("units"), list)
    )


class ProductPage(BaseModel):
    products: list[Product] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)
    dropped: int = 0


class ProductDraft(BaseModel):
    """Form values for creating or editing a product."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    stock: str = ""
    size: str = ""
    color: str = ""
    selling_price: str = ""
    discount_price: str = ""

    @field_validator("name", "stock", "size", "color", "selling_price", "discount_price", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    def to_payload(self) -> dict[str, Any]:
        brand, _, model = sanitize(self.name).strip().partition(" ")
        return {
            "brand": brand or "Unknown",
            "model": model.strip(),
            "sizes": [{"size": sanitize(self.size) or "N/A", "stock": to_count(self.stock)}],
            "color": sanitize(self.color) or None,
            "selling_price": float(to_amount(self.selling_price)),
            "discount_price": float(to_amount(self.discount_price)) if self.discount_price.strip() else None,
        }

    @classmethod
    def from_product(cls, product: Product) -> "ProductDraft":
        name = " ".join(part for part in (product.brand, product.model) if part) or product.name
        return cls(
            name=name,
            stock=str(product.stock),
            size=product.size or "",
            color=product.color or "",
            selling_price=str(product.selling_price),
            discount_price="" if product.discount_price is None else str(product.discount_price),
        )
