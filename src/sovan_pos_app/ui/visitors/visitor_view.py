from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from sovan_pos_sdk import Visitor

from sovan_pos_app.services.dashboard_service import VisitorService
from sovan_pos_app.services.errors import PosServiceError
from sovan_pos_app.ui.shared.view_state import resolve_state


@dataclass
class VisitorView:
    service: VisitorService
    on_session_expired: Callable[[], Any] | None = None
    visitors: list[Visitor] = field(default_factory=list)
    error_message: str | None = None
    requires_login: bool = False

    def load(self) -> bool:
        self.error_message = None
        try:
            self.visitors = self.service.list_visitors()
        except PosServiceError as exc:
            self.error_message = exc.message
            if exc.requires_login:
                self.requires_login = True
                if self.on_session_expired is not None:
                    self.on_session_expired()
            return False
        return True

    def render(self) -> dict[str, Any]:
        state = resolve_state(
            is_loading=False,
            error=self.error_message,
            has_data=bool(self.visitors),
            requires_login=self.requires_login,
            empty_message="Belum ada data pengunjung",
        )
        return {
            "title": "Monitoring Pengunjung",
            "rows": [
                {"id": visitor.id, "label": f"Tanggal: {visitor.date or '-'} - Jumlah: {visitor.count}"}
                for visitor in self.visitors
            ],
            "total": sum(visitor.count for visitor in self.visitors),
            "error": self.error_message,
            "view_state": state.render(),
        }
