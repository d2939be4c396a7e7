from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sovan_pos_sdk import DashboardSummary, format_rupiah

from sovan_pos_app.app.navigation import DASHBOARD_MENU
from sovan_pos_app.ui.dashboard.dashboard_poller import DashboardPoller
from sovan_pos_app.ui.shared.formatting import format_timestamp, payment_method_label, status_label
from sovan_pos_app.ui.shared.view_state import resolve_state


def summary_payload(summary: DashboardSummary) -> dict[str, Any]:
    return {
        "cards": {
            "total_products": summary.total_products,
            "total_transactions": summary.total_transactions,
            "total_sales": format_rupiah(summary.total_sales),
        },
        "hourly": [
            {"hour": point.hour, "total": format_rupiah(point.total), "count": point.count}
            for point in summary.hourly_data
        ],
        "top_products": [{"name": item.name or "-", "sold": item.sold} for item in summary.top_products],
        "recent_transactions": [
            {
                "invoice_number": row.invoice_number or "-",
                "customer_name": row.customer_name or "-",
                "payment_method": payment_method_label(row.payment_method, row.card_type),
                "status": status_label(row.status),
                "final_amount": format_rupiah(row.final_amount),
                "created_at": format_timestamp(row.created_at),
            }
            for row in summary.recent_transactions
        ],
    }


@dataclass
class DashboardView:
    poller: DashboardPoller

    def refresh(self) -> bool:
        return self.poller.tick()

    def render(self) -> dict[str, Any]:
        summary = self.poller.summary
        state = resolve_state(
            is_loading=summary is None and self.poller.last_error is None and self.poller.ticks == 0,
            error=self.poller.last_error,
            has_data=summary is not None,
            requires_login=self.poller.session_expired,
        )
        return {
            "title": "Dashboard",
            "menu": [{"key": entry.key, "label": entry.label} for entry in DASHBOARD_MENU],
            "summary": summary_payload(summary) if summary is not None else None,
            "error": self.poller.last_error,
            "view_state": state.render(),
        }
