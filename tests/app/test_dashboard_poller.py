from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from decimal import Decimal

from sovan_pos_sdk import DashboardSummary

from sovan_pos_app.services.errors import PosServiceError
from sovan_pos_app.telemetry import TelemetryLogger
from sovan_pos_app.ui.dashboard.dashboard_poller import DashboardPoller
from sovan_pos_app.ui.dashboard.dashboard_view import DashboardView, summary_payload


@dataclass
class ScriptedDashboardService:
    outcomes: list = field(default_factory=list)
    calls: int = 0

    def summary(self):
        self.calls += 1
        outcome = self.outcomes.pop(0) if self.outcomes else DashboardSummary(total_products=1)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _summary(products: int) -> DashboardSummary:
    return DashboardSummary.model_validate(
        {
            "total_products": products,
            "total_transactions": 2,
            "total_sales": "1500000",
            "hourly_data": [{"hour": 10, "total": "1500000", "count": 2}],
            "top_products": [{"name": None, "sold": 2}],
            "recent_transactions": [
                {
                    "id": 1,
                    "invoice_number": "INV-1",
                    "payment_method": "cash",
                    "payment_status": "paid",
                    "final_amount": "750000",
                    "created_at": "2026-10-18T01:00:00Z",
                }
            ],
        }
    )


def test_tick_updates_summary_and_notifies() -> None:
    updates: list[DashboardSummary] = []
    poller = DashboardPoller(service=ScriptedDashboardService([_summary(7)]), on_update=updates.append)

    assert poller.tick() is True

    assert poller.summary.total_products == 7
    assert updates == [poller.summary]
    assert poller.last_error is None


def test_failed_tick_keeps_last_good_summary() -> None:
    service = ScriptedDashboardService([_summary(7), PosServiceError(message="Terjadi kesalahan pada server, coba lagi nanti.")])
    poller = DashboardPoller(service=service)

    poller.tick()
    assert poller.tick() is False

    assert poller.summary.total_products == 7
    assert poller.last_error == "Terjadi kesalahan pada server, coba lagi nanti."
    assert poller.stopped is False


def test_session_expiry_stops_polling() -> None:
    expired: list[bool] = []
    service = ScriptedDashboardService([PosServiceError(message="Sesi habis", requires_login=True)])
    poller = DashboardPoller(service=service, interval_seconds=0.01, on_session_expired=lambda: expired.append(True))

    poller.run(max_ticks=5)

    assert service.calls == 1
    assert poller.session_expired is True
    assert poller.stopped is True
    assert expired == [True]


def test_run_honours_max_ticks() -> None:
    service = ScriptedDashboardService()
    poller = DashboardPoller(service=service, interval_seconds=0)

    poller.run(max_ticks=3)

    assert service.calls == 3
    assert poller.ticks == 3


def test_background_thread_start_and_stop() -> None:
    service = ScriptedDashboardService()
    refreshed = threading.Event()
    poller = DashboardPoller(service=service, interval_seconds=0.01, on_update=lambda _summary: refreshed.set())

    poller.start()
    poller.start()
    assert refreshed.wait(timeout=2)
    poller.stop(timeout=2)

    assert poller.is_running() is False
    assert poller.stopped is True
    assert service.calls >= 1


def test_summary_payload_formats_cards_and_rows() -> None:
    payload = summary_payload(_summary(3))

    assert payload["cards"] == {"total_products": 3, "total_transactions": 2, "total_sales": "Rp 1.500.000"}
    assert payload["hourly"] == [{"hour": 10, "total": "Rp 1.500.000", "count": 2}]
    assert payload["top_products"] == [{"name": "-", "sold": 2}]
    recent = payload["recent_transactions"][0]
    assert recent["payment_method"] == "Tunai"
    assert recent["status"] == "Lunas"
    assert recent["created_at"] == "18/10/2026 08:00"


def test_dashboard_view_states() -> None:
    service = ScriptedDashboardService([_summary(1), PosServiceError(message="Sesi habis", requires_login=True)])
    view = DashboardView(poller=DashboardPoller(service=service))

    assert view.render()["view_state"]["status"] == "loading"
    view.refresh()
    rendered = view.render()
    assert rendered["view_state"]["status"] == "success"
    assert [entry["label"] for entry in rendered["menu"]] == [
        "Lihat Inventory",
        "Buat Transaksi",
        "Monitoring Pengunjung",
        "Logout",
    ]
    assert rendered["summary"]["cards"]["total_sales"] == "Rp 1.500.000"

    view.refresh()
    assert view.render()["view_state"]["status"] == "login_required"


def test_summary_amounts_stay_decimal() -> None:
    assert _summary(1).total_sales == Decimal("1500000")


def test_failures_are_counted_and_reported(tmp_path) -> None:
    log_file = tmp_path / "telemetry.jsonl"
    service = ScriptedDashboardService(
        [
            PosServiceError(message="down", trace_id="t-1"),
            PosServiceError(message="down", trace_id="t-2"),
            _summary(3),
        ]
    )
    poller = DashboardPoller(
        service=service,
        interval_seconds=5.0,
        telemetry=TelemetryLogger(app_name="sovan_pos", enabled=True, log_file=log_file),
    )

    poller.tick()
    poller.tick()
    assert poller.consecutive_failures == 2
    assert poller.tick() is True
    assert poller.consecutive_failures == 0

    events = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert [event["context"]["consecutive_failures"] for event in events] == [1, 2]
    assert {event["error_code"] for event in events} == {"refresh_failed"}
    assert events[1]["trace_id"] == "t-2"
