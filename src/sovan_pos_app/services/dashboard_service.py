from __future__ import annotations

from sovan_pos_sdk import ApiSession, DashboardSummary, Visitor

from .errors import normalize_error


class DashboardService:
    def __init__(self, session: ApiSession) -> None:
        self.session = session

    def summary(self) -> DashboardSummary:
        try:
            return self.session.dashboard_client().summary()
        except Exception as exc:
            raise normalize_error(exc, "Gagal mengambil data dashboard.") from exc


class VisitorService:
    def __init__(self, session: ApiSession) -> None:
        self.session = session

    def list_visitors(self) -> list[Visitor]:
        try:
            return self.session.visitors_client().list()
        except Exception as exc:
            raise normalize_error(exc, "Gagal mengambil data pengunjung.") from exc
