from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..exceptions import EnvelopeError
from ..http_client import unwrap_envelope
from ..models_transactions import AvailableUnit, Transaction, TransactionCreateRequest, TransactionQuery
from .base import BaseClient


@dataclass
class UnitsClient(BaseClient):
    def list_available(self) -> list[AvailableUnit]:
        payload = self._request("GET", "/api/units", module="units", operation="list")
        data = unwrap_envelope(payload, failure_message="Gagal mengambil data unit.")
        if not isinstance(data, list):
            return []
        return [AvailableUnit.model_validate(item) for item in data if isinstance(item, dict) and item.get("unit_code")]


@dataclass
class TransactionsClient(BaseClient):
    def list(self, query: TransactionQuery | Mapping[str, Any] | None = None) -> list[Transaction]:
        filters = _coerce_model(query or {}, TransactionQuery)
        payload = self._request(
            "GET",
            "/api/transactions",
            params=filters.as_params(),
            module="transactions",
            operation="list",
            use_get_cache=False,
        )
        data = unwrap_envelope(payload, failure_message="Gagal mengambil data transaksi.")
        rows = data.get("transactions") if isinstance(data, dict) else None
        if rows is None:
            raise EnvelopeError(
                code="TRANSACTIONS_MISSING",
                message="Data transaksi tidak ditemukan.",
                details=None,
                trace_id=None,
                status_code=200,
                raw_payload=payload,
            )
        return [Transaction.model_validate(row) for row in rows]

    def create(self, request: TransactionCreateRequest | Mapping[str, Any]) -> dict[str, Any]:
        body = _coerce_model(request, TransactionCreateRequest)
        with self._operation("checkout"):
            payload = self._request(
                "POST",
                "/api/transactions",
                json_body=body.model_dump(mode="json", exclude_none=True),
                module="transactions",
                operation="create",
                invalidate_paths=["/api/transactions", "/api/units", "/api/dashboard"],
            )
        data = unwrap_envelope(payload, failure_message="Gagal membuat transaksi.")
        return data if isinstance(data, dict) else {}


def _coerce_model(value: Any, model_type: type[Any]):
    if isinstance(value, model_type):
        return value
    return model_type.model_validate(value)
