from __future__ import annotations

from dataclasses import dataclass

from ..http_client import unwrap_envelope
from ..models_dashboard import DashboardSummary, Visitor
from .base import BaseClient


@dataclass
class DashboardClient(BaseClient):
    def summary(self) -> DashboardSummary:
        payload = self._request(
            "GET",
            "/api/dashboard",
            module="dashboard",
            operation="summary",
            use_get_cache=False,
        )
        data = unwrap_envelope(payload, failure_message="Gagal mengambil data dashboard.")
        return DashboardSummary.model_validate(data if isinstance(data, dict) else {})


@dataclass
class VisitorsClient(BaseClient):
    def list(self) -> list[Visitor]:
        payload = self._request("GET", "/api/visitors", module="visitors", operation="list")
        # Older deployments answer with a bare array instead of an envelope.
        rows = payload if isinstance(payload, list) else unwrap_envelope(payload, failure_message="Gagal mengambil data pengunjung.")
        if not isinstance(rows, list):
            return []
        return [Visitor.model_validate(row) for row in rows if isinstance(row, dict)]
