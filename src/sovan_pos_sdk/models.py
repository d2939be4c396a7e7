from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict


def to_amount(value: Any) -> Decimal:
    """Parse an API money value; unparsable or negative inputs become 0."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not amount.is_finite() or amount < 0:
        return Decimal("0")
    return amount


def to_optional_amount(value: Any) -> Decimal | None:
    if value in (None, ""):
        return None
    return to_amount(value)


def to_count(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        count = int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(count, 0)


class TokenResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    token: str
    message: str | None = None


class SessionData(BaseModel):
    token: str
    email: str | None = None
    env_name: str | None = None


class Pagination(BaseModel):
    model_config = ConfigDict(extra="allow")

    current_page: int | None = 1
    last_page: int | None = 1
    per_page: int | None = None
    total: int | None = None


class Envelope(BaseModel):
    model_config = ConfigDict(extra="allow")

    success: bool = True
    data: Any = None
    message: str | None = None
