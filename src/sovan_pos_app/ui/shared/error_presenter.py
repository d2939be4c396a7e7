from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sovan_pos_app.services.errors import UNEXPECTED_ERROR, PosServiceError


@dataclass(frozen=True)
class PresentedError:
    category: str
    title: str
    user_message: str
    safe_to_retry: bool
    requires_login: bool
    details: dict[str, Any]

    def render(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "title": self.title,
            "message": self.user_message,
            "safe_to_retry": self.safe_to_retry,
            "requires_login": self.requires_login,
            "details": self.details,
        }


class ErrorPresenter:
    """Turns service failures into the dialog payload the screens show."""

    _TITLES = {
        "session": "Sesi Berakhir",
        "validation": "Data Tidak Valid",
        "permission_denied": "Akses Ditolak",
        "not_found": "Data Tidak Ditemukan",
        "transport": "Koneksi Gagal",
        "server": "Kesalahan Server",
        "unknown": "Gagal",
    }

    def present(self, error: PosServiceError, *, action: str, allow_retry: bool = False) -> PresentedError:
        category = self._categorize(error)
        return PresentedError(
            category=category,
            title=self._TITLES[category],
            user_message=error.message,
            safe_to_retry=allow_retry and category in {"transport", "server"},
            requires_login=error.requires_login,
            details={
                "action": action,
                "trace_id": error.trace_id,
                "raw_details": error.details,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    def _categorize(self, error: PosServiceError) -> str:
        if error.requires_login:
            return "session"
        if (error.details or "").startswith(UNEXPECTED_ERROR):
            return "unknown"
        details_text = f"{error.details or ''}".lower()
        if "client_validation" in details_text or "422" in details_text or "400" in details_text:
            return "validation"
        if "403" in details_text:
            return "permission_denied"
        if "404" in details_text:
            return "not_found"
        if "transport" in details_text or "http 0" in details_text:
            return "transport"
        if any(token in details_text for token in ("http 500", "http 502", "http 503", "http 504")):
            return "server"
        return "unknown"
