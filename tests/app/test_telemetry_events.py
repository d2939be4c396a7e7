from __future__ import annotations

import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from sovan_pos_app.telemetry import (
    TelemetryLogger,
    api_call_result,
    build_event,
    checkout_result,
    inventory_synced,
    poll_failed,
    screen_view,
)


def test_build_event_rejects_unknown_category() -> None:
    with pytest.raises(ValueError, match="Unsupported telemetry category"):
        build_event(category="metrics", name="x", screen="m", action="a")


def test_build_event_rejects_pii_context() -> None:
    with pytest.raises(ValueError, match="customer_phone"):
        build_event(category="checkout", name="x", screen="m", action="a", context={"customer_phone": "0812"})


def test_build_event_rejects_keys_outside_the_category() -> None:
    with pytest.raises(ValueError, match="not allowed for navigation"):
        build_event(category="navigation", name="screen_view", screen="m", action="a", context={"product_count": 3})


def test_event_to_dict_drops_empty_fields() -> None:
    event = build_event(
        category="api_call_result",
        name="api_call_result",
        screen="inventory",
        action="inventory.refresh",
        success=True,
        now=datetime(2026, 10, 18, tzinfo=timezone.utc),
    )

    assert event.to_dict() == {
        "category": "api_call_result",
        "name": "api_call_result",
        "screen": "inventory",
        "action": "inventory.refresh",
        "timestamp_utc": "2026-10-18T00:00:00+00:00",
        "success": True,
    }


def test_inventory_synced_records_catalogue_size() -> None:
    event = inventory_synced(product_count=120, filtered=True, source="server", action="inventory.search")

    assert event.category == "inventory_sync"
    assert event.context == {"product_count": 120, "filtered": True, "source": "server"}
    with pytest.raises(ValueError, match="catalogue source"):
        inventory_synced(product_count=1, filtered=False, source="disk", action="inventory.load")


def test_checkout_result_carries_invoice_and_total_as_text() -> None:
    event = checkout_result(
        success=True,
        item_count=2,
        payment_method="debit",
        total=Decimal("1200000"),
        invoice_number="INV-0010",
    )

    assert event.context == {
        "item_count": 2,
        "payment_method": "debit",
        "total": "1200000",
        "invoice_number": "INV-0010",
    }
    failed = checkout_result(success=False, item_count=1, payment_method="cash", error_code="request_failed")
    assert "invoice_number" not in failed.context
    assert failed.error_code == "request_failed"


def test_poll_failed_and_row_counts() -> None:
    event = poll_failed(consecutive_failures=3, interval_seconds=5.0, error_code="refresh_failed")
    assert event.to_dict()["context"] == {"consecutive_failures": 3, "interval_seconds": 5.0}

    assert "context" not in api_call_result(screen="transactions", action="load", success=False).to_dict()
    assert api_call_result(screen="transactions", action="load", success=True, row_count=4).context == {"row_count": 4}


def test_disabled_logger_writes_nothing(tmp_path) -> None:
    log_file = tmp_path / "events.jsonl"
    logger = TelemetryLogger(app_name="sovan_pos", enabled=False, log_file=log_file)

    assert logger.emit(screen_view("inventory")) is False
    assert not log_file.exists()


def test_enabled_logger_appends_jsonl_with_run_id(tmp_path) -> None:
    log_file = tmp_path / "nested" / "events.jsonl"
    logger = TelemetryLogger(app_name="sovan_pos", enabled=True, log_file=log_file, run_id="run-1")

    logger.emit(screen_view("inventory"))
    logger.emit(checkout_result(success=True, item_count=1, payment_method="cash", total=Decimal("50000")))

    lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert [line["run_id"] for line in lines] == ["run-1", "run-1"]
    assert [line["app_name"] for line in lines] == ["sovan_pos", "sovan_pos"]
    assert lines[1]["context"]["total"] == "50000"


def test_logger_reads_environment_toggle(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("SOVAN_TELEMETRY_ENABLED", "true")
    assert TelemetryLogger(app_name="sovan_pos", log_file=tmp_path / "t.jsonl").enabled is True

    monkeypatch.setenv("SOVAN_TELEMETRY_ENABLED", "0")
    assert TelemetryLogger(app_name="sovan_pos", log_file=tmp_path / "t.jsonl").enabled is False


def test_default_log_file_is_per_app() -> None:
    first = TelemetryLogger(app_name="sovan_pos", enabled=False)
    assert first.log_file.name == "sovan_pos.jsonl"
    assert first.run_id != TelemetryLogger(app_name="sovan_pos", enabled=False).run_id
