from __future__ import annotations

from decimal import Decimal

import pytest
import responses

from sovan_pos_sdk.clients.dashboard_client import DashboardClient, VisitorsClient
from sovan_pos_sdk.exceptions import EnvelopeError, SessionExpiredError

DASHBOARD_URL = "https://api.example.com/api/dashboard"
VISITORS_URL = "https://api.example.com/api/visitors"


@responses.activate
def test_summary_parses_cards_and_lists(http) -> None:
    responses.add(
        responses.GET,
        DASHBOARD_URL,
        json={
            "success": True,
            "data": {
                "total_products": "12",
                "total_transactions": 4,
                "total_sales": "1250000.50",
                "hourly_data": [{"hour": "10", "total": "500000", "count": 2}],
                "top_products": [{"name": "Nike Air Max", "sold": 3}],
                "recent_transactions": [{"id": 1, "invoice_number": "INV-1", "final_amount": "200000"}],
            },
        },
        status=200,
    )

    summary = DashboardClient(http=http, access_token="tok-1").summary()

    assert summary.total_products == 12
    assert summary.total_sales == Decimal("1250000.50")
    assert summary.hourly_data[0].count == 2
    assert summary.top_products[0].sold == 3
    assert summary.recent_transactions[0].final_amount == Decimal("200000")


@responses.activate
def test_summary_is_fetched_fresh_each_poll(http) -> None:
    responses.add(responses.GET, DASHBOARD_URL, json={"success": True, "data": {"total_products": 1}}, status=200)
    responses.add(responses.GET, DASHBOARD_URL, json={"success": True, "data": {"total_products": 2}}, status=200)
    client = DashboardClient(http=http, access_token="tok-1")

    client.summary()
    second = client.summary()

    assert second.total_products == 2


@responses.activate
def test_summary_with_missing_data_defaults_to_zero(http) -> None:
    responses.add(responses.GET, DASHBOARD_URL, json={"success": True, "data": None}, status=200)

    summary = DashboardClient(http=http, access_token="tok-1").summary()

    assert summary.total_products == 0
    assert summary.recent_transactions == []


@responses.activate
def test_summary_expired_token(http) -> None:
    responses.add(responses.GET, DASHBOARD_URL, json={"message": "Unauthenticated."}, status=401)

    with pytest.raises(SessionExpiredError):
        DashboardClient(http=http, access_token="stale").summary()


@responses.activate
def test_visitors_accept_bare_array(http) -> None:
    responses.add(
        responses.GET,
        VISITORS_URL,
        json=[{"id": 1, "date": "2026-10-18", "count": "37"}, "noise"],
        status=200,
    )

    visitors = VisitorsClient(http=http, access_token="tok-1").list()

    assert len(visitors) == 1
    assert visitors[0].count == 37


@responses.activate
def test_visitors_accept_envelope(http) -> None:
    responses.add(
        responses.GET,
        VISITORS_URL,
        json={"success": True, "data": [{"id": 2, "date": None, "count": 5}]},
        status=200,
    )

    visitors = VisitorsClient(http=http, access_token="tok-1").list()

    assert visitors[0].date is None


@responses.activate
def test_visitors_failed_envelope(http) -> None:
    responses.add(responses.GET, VISITORS_URL, json={"success": False}, status=200)

    with pytest.raises(EnvelopeError) as excinfo:
        VisitorsClient(http=http, access_token="tok-1").list()

    assert excinfo.value.message == "Gagal mengambil data pengunjung."
