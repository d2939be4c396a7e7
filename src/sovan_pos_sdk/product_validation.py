from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from .models_products import ProductDraft

REQUIRED_FIELDS_MESSAGE = "Nama, stok, dan harga jual wajib diisi"


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    reason: str


class ClientValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.issues:
            return "Validasi gagal"
        return self.issues[0].reason


def validate_product_draft(draft: ProductDraft | Mapping[str, Any]) -> ProductDraft:
    try:
        data = draft if isinstance(draft, ProductDraft) else ProductDraft.model_validate(draft)
    except PydanticValidationError as exc:
        raise ClientValidationError([ValidationIssue(field="draft", reason=str(exc))]) from exc
    missing = [name for name in ("name", "stock", "selling_price") if not getattr(data, name).strip()]
    if missing:
        raise ClientValidationError([ValidationIssue(field=name, reason=REQUIRED_FIELDS_MESSAGE) for name in missing])
    return data
