from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ViewStateStatus(str, Enum):
    LOADING = "loading"
    EMPTY = "empty"
    SUCCESS = "success"
    PARTIAL_ERROR = "partial_error"
    FATAL_ERROR = "fatal_error"
    LOGIN_REQUIRED = "login_required"


_ICONS = {
    "loading": "spinner",
    "empty": "inbox",
    "success": "check",
    "partial_error": "warning",
    "fatal_error": "error",
    "login_required": "lock",
}


@dataclass(frozen=True)
class ViewState:
    status: ViewStateStatus
    message: str | None = None
    trace_id: str | None = None
    data_available: bool = False

    def render(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "icon": _ICONS[self.status.value],
            "message": self.message,
            "trace_id": self.trace_id,
            "data_available": self.data_available,
        }


def resolve_state(
    *,
    is_loading: bool,
    error: str | None,
    has_data: bool,
    requires_login: bool = False,
    empty_message: str = "Tidak ada data",
    trace_id: str | None = None,
) -> ViewState:
    if requires_login:
        return ViewState(ViewStateStatus.LOGIN_REQUIRED, error, trace_id=trace_id)
    if is_loading:
        return ViewState(ViewStateStatus.LOADING, "Memuat data...", trace_id=trace_id, data_available=has_data)
    if error and has_data:
        return ViewState(ViewStateStatus.PARTIAL_ERROR, error, trace_id=trace_id, data_available=True)
    if error:
        return ViewState(ViewStateStatus.FATAL_ERROR, error, trace_id=trace_id)
    if not has_data:
        return ViewState(ViewStateStatus.EMPTY, empty_message, trace_id=trace_id)
    return ViewState(ViewStateStatus.SUCCESS, "Siap", trace_id=trace_id, data_available=True)
