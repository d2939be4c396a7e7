from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import to_amount, to_count
from .models_transactions import Transaction


class HourlyPoint(BaseModel):
    model_config = ConfigDict(extra="allow")

    hour: str | int | None = None
    total: Decimal = Decimal("0")
    count: int = 0

    @field_validator("total", mode="before")
    @classmethod
    def _total(cls, value: Any) -> Decimal:
        return to_amount(value)

    @field_validator("count", mode="before")
    @classmethod
    def _count(cls, value: Any) -> int:
        return to_count(value)


class TopProduct(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str | None = None
    sold: int = 0

    @field_validator("sold", mode="before")
    @classmethod
    def _sold(cls, value: Any) -> int:
        return to_count(value)


class DashboardSummary(BaseModel):
    model_config = ConfigDict(extra="allow")

    total_products: int = 0
    total_transactions: int = 0
    total_sales: Decimal = Decimal("0")
    hourly_data: list[HourlyPoint] = Field(default_factory=list)
    top_products: list[TopProduct] = Field(default_factory=list)
    recent_transactions: list[Transaction] = Field(default_factory=list)

    @field_validator("total_products", "total_transactions", mode="before")
    @classmethod
    def _counts(cls, value: Any) -> int:
        return to_count(value)

    @field_validator("total_sales", mode="before")
    @classmethod
    def _sales(cls, value: Any) -> Decimal:
        return to_amount(value)


class Visitor(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int | str
    date: str | None = None
    count: int = 0

    @field_validator("count", mode="before")
    @classmethod
    def _count(cls, value: Any) -> int:
        return to_count(value)
