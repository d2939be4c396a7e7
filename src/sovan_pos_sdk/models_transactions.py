from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer, field_validator

from .models import to_amount, to_count, to_optional_amount

PaymentMethod = Literal["cash", "qris", "debit", "transfer"]
CardType = Literal["Mandiri", "BRI", "BCA"]

PAYMENT_METHODS: tuple[str, ...] = ("cash", "qris", "debit", "transfer")
CARD_TYPES: tuple[str, ...] = ("Mandiri", "BRI", "BCA")


class AvailableUnit(BaseModel):
    """A sellable unit as listed by ``/api/units``."""

    model_config = ConfigDict(extra="allow")

    product_id: int | str
    product_name: str | None = None
    color: str | None = None
    size: str | None = None
    unit_code: str
    selling_price: Decimal = Decimal("0")
    discount_price: Decimal | None = None

    @field_validator("selling_price", mode="before")
    @classmethod
    def _selling_price(cls, value: Any) -> Decimal:
        return to_amount(value)

    @field_validator("discount_price", mode="before")
    @classmethod
    def _discount_price(cls, value: Any) -> Decimal | None:
        return to_optional_amount(value)

    @field_validator("size", "color", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str | None:
        return None if value is None else str(value)


class CartItem(BaseModel):
    product_id: int | str
    name: str | None = None
    color: str | None = None
    size: str | None = None
    unit_code: str
    selling_price: Decimal = Decimal("0")
    discount_price: Decimal | None = None
    quantity: int = 1

    @property
    def price(self) -> Decimal:
        if self.discount_price is not None:
            return self.discount_price
        return self.selling_price

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    @classmethod
    def from_unit(cls, unit: AvailableUnit) -> "CartItem":
        return cls(
            product_id=unit.product_id,
            name=unit.product_name,
            color=unit.color,
            size=unit.size,
            unit_code=unit.unit_code,
            selling_price=unit.selling_price,
            discount_price=unit.discount_price,
        )


class TransactionItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    product_name: str | None = None
    unit_code: str | None = None
    quantity: int = 1
    price: Decimal | None = None

    @field_validator("quantity", mode="before")
    @classmethod
    def _quantity(cls, value: Any) -> int:
        return to_count(value) if value is not None else 1

    @field_validator("price", mode="before")
    @classmethod
    def _price(cls, value: Any) -> Decimal | None:
        return to_optional_amount(value)


class Transaction(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int | str
    invoice_number: str | None = None
    customer_name: str | None = None
    items: list[TransactionItem] = Field(default_factory=list)
    payment_method: str | None = None
    card_type: str | None = None
    notes: str | None = None
    total_amount: Decimal = Decimal("0")
    final_amount: Decimal = Decimal("0")
    status: str | None = Field(default=None, validation_alias=AliasChoices("payment_status", "status"))
    created_at: str | None = None
    note: str = ""

    @field_validator("total_amount", "final_amount", mode="before")
    @classmethod
    def _amounts(cls, value: Any) -> Decimal:
        return to_amount(value)

    @property
    def discount(self) -> Decimal:
        return self.total_amount - self.final_amount

    def product_names(self) -> str:
        if not self.items:
            return "-"
        return ", ".join(item.product_name or "-" for item in self.items)


class TransactionLine(BaseModel):
    product_id: int | str
    unit_code: str
    discount_price: Decimal | None = None
    quantity: int = 1

    @field_serializer("discount_price")
    def _number(self, value: Decimal | None) -> float | None:
        return None if value is None else float(value)


class TransactionCreateRequest(BaseModel):
    customer_name: str = ""
    customer_phone: str = ""
    payment_method: PaymentMethod
    card_type: CardType | None = None
    notes: str = ""
    # The API records the final price of the sale under this name.
    discount_amount: Decimal
    products: list[TransactionLine]

    @field_serializer("discount_amount")
    def _number(self, value: Decimal) -> float:
        return float(value)


class TransactionQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    on_date: date | None = Field(default=None, alias="date")
    payment_method: str = ""
    status: str = ""

    def as_params(self) -> dict[str, str]:
        return {
            "date": self.on_date.isoformat() if self.on_date else "",
            "payment_method": self.payment_method,
            "status": self.status,
        }
