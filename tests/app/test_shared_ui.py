from __future__ import annotations

import pytest

from sovan_pos_sdk import Visitor

from sovan_pos_app.services.errors import PosServiceError, normalize_error
from sovan_pos_app.ui.shared.error_presenter import ErrorPresenter
from sovan_pos_app.ui.shared.notification_center import NotificationCenter
from sovan_pos_app.ui.shared.pagination import PaginationState, goto_page, next_page, prev_page, total_pages, update_total
from sovan_pos_app.ui.shared.view_state import resolve_state
from sovan_pos_app.ui.visitors.visitor_view import VisitorView


def test_total_pages() -> None:
    assert total_pages(0, 20) == 0
    assert total_pages(20, 20) == 1
    assert total_pages(21, 20) == 2


def test_page_navigation_is_clamped() -> None:
    state = PaginationState(page_size=10)
    update_total(state, 25)

    assert next_page(state).page == 2
    assert next_page(state).page == 3
    assert next_page(state).page == 3
    assert prev_page(goto_page(state, -4)).page == 1
    assert state.slice(list(range(25))) == list(range(10))

    update_total(state, 0, reset=True)
    assert state.page == 1
    assert state.render()["has_next"] is False


def test_shrinking_total_pulls_page_back() -> None:
    state = PaginationState(page=3, page_size=10, total_items=30)
    update_total(state, 12)
    assert state.page == 2
    assert state.offset() == 10


@pytest.mark.parametrize(
    ("kwargs", "status"),
    [
        ({"is_loading": True, "error": None, "has_data": False}, "loading"),
        ({"is_loading": False, "error": None, "has_data": False}, "empty"),
        ({"is_loading": False, "error": None, "has_data": True}, "success"),
        ({"is_loading": False, "error": "x", "has_data": True}, "partial_error"),
        ({"is_loading": False, "error": "x", "has_data": False}, "fatal_error"),
        ({"is_loading": True, "error": "x", "has_data": True, "requires_login": True}, "login_required"),
    ],
)
def test_resolve_state(kwargs, status) -> None:
    assert resolve_state(**kwargs).status.value == status


def test_notification_levels() -> None:
    center = NotificationCenter()
    center.push(level="success", title="Sukses", message="ok")

    with pytest.raises(ValueError):
        center.push(level="fatal", title="x", message="y")

    assert center.render()["count"] == 1
    center.clear()
    assert center.latest() is None


@pytest.mark.parametrize(
    ("error", "category", "retry"),
    [
        (PosServiceError(message="m", requires_login=True), "session", False),
        (PosServiceError(message="m", details="CLIENT_VALIDATION"), "validation", False),
        (PosServiceError(message="m", details="HTTP_422 (HTTP 422)"), "validation", False),
        (PosServiceError(message="m", details="HTTP_403 (HTTP 403)"), "permission_denied", False),
        (PosServiceError(message="m", details="HTTP_404 (HTTP 404)"), "not_found", False),
        (PosServiceError(message="m", details="TRANSPORT_ERROR (HTTP 0)"), "transport", True),
        (PosServiceError(message="m", details="HTTP_503 (HTTP 503)"), "server", True),
        (PosServiceError(message="m"), "unknown", False),
    ],
)
def test_error_presenter_categories(error, category, retry) -> None:
    presented = ErrorPresenter().present(error, action="test.action", allow_retry=True)
    assert presented.category == category
    assert presented.safe_to_retry is retry
    assert presented.render()["details"]["action"] == "test.action"


def test_normalize_error_for_plain_exceptions() -> None:
    assert normalize_error(RuntimeError(""), "Gagal").message == "Gagal"
    wrapped = normalize_error(KeyError("hourly_data"), "Gagal memuat dashboard")
    assert wrapped.message == "Gagal memuat dashboard"
    assert wrapped.details == "UNEXPECTED_ERROR: KeyError: 'hourly_data'"
    assert ErrorPresenter().present(wrapped, action="dashboard.load").category == "unknown"
    existing = PosServiceError(message="sudah")
    assert normalize_error(existing, "Gagal") is existing


class _VisitorService:
    def __init__(self, result) -> None:
        self.result = result

    def list_visitors(self):
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def test_visitor_view_rows_and_total() -> None:
    view = VisitorView(service=_VisitorService([Visitor(id=1, date="2026-10-18", count=4), Visitor(id=2, count=3)]))

    assert view.load() is True
    rendered = view.render()
    assert [row["label"] for row in rendered["rows"]] == [
        "Tanggal: 2026-10-18 - Jumlah: 4",
        "Tanggal: - - Jumlah: 3",
    ]
    assert rendered["total"] == 7


def test_visitor_view_session_expired() -> None:
    expired: list[bool] = []
    view = VisitorView(
        service=_VisitorService(PosServiceError(message="Sesi habis", requires_login=True)),
        on_session_expired=lambda: expired.append(True),
    )

    assert view.load() is False
    assert expired == [True]
    assert view.render()["view_state"]["status"] == "login_required"
