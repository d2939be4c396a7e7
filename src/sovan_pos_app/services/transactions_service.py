from __future__ import annotations

import logging
from typing import Any, Mapping

from sovan_pos_sdk import (
    ApiSession,
    AvailableUnit,
    Transaction,
    TransactionCreateRequest,
    TransactionQuery,
)

from .errors import normalize_error

logger = logging.getLogger(__name__)

NOTES_KEY = "transactionNotes"


class TransactionsService:
    def __init__(self, session: ApiSession) -> None:
        self.session = session

    def list_transactions(self, query: TransactionQuery | Mapping[str, Any] | None = None) -> list[Transaction]:
        try:
            rows = self.session.transactions_client().list(query)
        except Exception as exc:
            raise normalize_error(exc, "Gagal mengambil data transaksi.") from exc
        notes = self.load_notes()
        return [row.model_copy(update={"note": notes.get(str(row.id), "")}) for row in rows]

    def list_units(self) -> list[AvailableUnit]:
        try:
            return self.session.units_client().list_available()
        except Exception as exc:
            raise normalize_error(exc, "Gagal mengambil data unit.") from exc

    def create_transaction(self, request: TransactionCreateRequest) -> dict[str, Any]:
        try:
            created = self.session.transactions_client().create(request)
        except Exception as exc:
            raise normalize_error(exc, "Gagal membuat transaksi.") from exc
        logger.info(
            "transaction_created",
            extra={"invoice_number": created.get("invoice_number"), "items": len(request.products)},
        )
        return created

    def load_notes(self) -> dict[str, str]:
        notes = self.session.local_store.get_json(NOTES_KEY, default={})
        return notes if isinstance(notes, dict) else {}

    def save_note(self, transaction_id: int | str, note: str) -> str:
        notes = self.load_notes()
        cleaned = note.strip()
        notes[str(transaction_id)] = cleaned
        self.session.local_store.set_json(NOTES_KEY, notes)
        return cleaned
