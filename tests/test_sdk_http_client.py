from __future__ import annotations

import pytest
import requests
import responses

from sovan_pos_sdk.exceptions import EnvelopeError, ServerError, SessionExpiredError, TransportError
from sovan_pos_sdk.http_client import unwrap_envelope
from sovan_pos_sdk.tracing import TRACE_HEADER, TraceContext, new_trace_id

URL = "https://api.example.com/api/dashboard"


@responses.activate
def test_get_sends_accept_and_trace_headers(http) -> None:
    responses.add(responses.GET, URL, json={"success": True, "data": {}}, status=200)

    payload = http.request("GET", "/api/dashboard")

    assert payload == {"success": True, "data": {}}
    sent = responses.calls[0].request.headers
    assert sent["Accept"] == "application/json"
    assert sent[TRACE_HEADER] == http.trace.trace_id
    assert http.last_operation is not None
    assert http.last_operation.result == "success"


@responses.activate
def test_get_cache_serves_repeat_reads(http) -> None:
    responses.add(responses.GET, URL, json={"value": 1}, status=200)
    responses.add(responses.GET, URL, json={"value": 2}, status=200)

    first = http.request("GET", "/api/dashboard")
    second = http.request("GET", "/api/dashboard")

    assert first == second == {"value": 1}
    assert len(responses.calls) == 1


@responses.activate
def test_get_cache_can_be_skipped(http) -> None:
    responses.add(responses.GET, URL, json={"value": 1}, status=200)
    responses.add(responses.GET, URL, json={"value": 2}, status=200)

    http.request("GET", "/api/dashboard", use_get_cache=False)
    second = http.request("GET", "/api/dashboard", use_get_cache=False)

    assert second == {"value": 2}
    assert len(responses.calls) == 2


@responses.activate
def test_post_invalidates_cached_paths(http) -> None:
    responses.add(responses.GET, URL, json={"value": 1}, status=200)
    responses.add(responses.GET, URL, json={"value": 2}, status=200)
    responses.add(responses.POST, "https://api.example.com/api/transactions", json={"success": True}, status=200)

    http.request("GET", "/api/dashboard")
    http.request("POST", "/api/transactions", json_body={}, invalidate_paths=["/api/dashboard"])
    refreshed = http.request("GET", "/api/dashboard")

    assert refreshed == {"value": 2}


@responses.activate
def test_get_retries_server_errors(http) -> None:
    responses.add(responses.GET, URL, json={"message": "down"}, status=503)
    responses.add(responses.GET, URL, json={"value": "ok"}, status=200)

    payload = http.request("GET", "/api/dashboard", use_get_cache=False)

    assert payload == {"value": "ok"}
    assert len(responses.calls) == 2


@responses.activate
def test_retry_disabled_raises_first_server_error(http) -> None:
    responses.add(responses.GET, URL, json={"message": "down"}, status=500)

    with pytest.raises(ServerError):
        http.request("GET", "/api/dashboard", retry=False)

    assert len(responses.calls) == 1


@responses.activate
def test_post_is_not_retried(http) -> None:
    responses.add(responses.POST, "https://api.example.com/api/transactions", json={}, status=503)

    with pytest.raises(ServerError):
        http.request("POST", "/api/transactions", json_body={"products": []})

    assert len(responses.calls) == 1


@responses.activate
def test_network_failure_becomes_transport_error(http) -> None:
    responses.add(responses.GET, URL, body=requests.ConnectionError("unreachable"))

    with pytest.raises(TransportError) as excinfo:
        http.request("GET", "/api/dashboard")

    assert excinfo.value.message == "Tidak bisa terhubung ke server, coba lagi"
    assert len(responses.calls) == http.config.retries


@responses.activate
def test_non_json_success_body_is_rejected(http) -> None:
    responses.add(responses.GET, URL, body="<html>oops</html>", status=200, content_type="text/html")

    with pytest.raises(EnvelopeError) as excinfo:
        http.request("GET", "/api/dashboard")

    assert excinfo.value.message == "Respons server tidak valid (bukan JSON)."


@responses.activate
def test_unauthorized_maps_to_session_expired(http) -> None:
    responses.add(responses.GET, URL, json={"message": "Unauthenticated."}, status=401)

    with pytest.raises(SessionExpiredError):
        http.request("GET", "/api/dashboard")


@responses.activate
def test_trace_id_is_taken_from_response_headers(http) -> None:
    responses.add(responses.GET, URL, json={}, status=200, headers={"X-Request-ID": "server-trace"})

    http.request("GET", "/api/dashboard")

    assert http.trace.trace_id == "server-trace"


def test_unwrap_envelope_returns_data() -> None:
    assert unwrap_envelope({"success": True, "data": [1]}, failure_message="x") == [1]
    assert unwrap_envelope({"data": {"a": 1}}, failure_message="x") == {"a": 1}


def test_unwrap_envelope_rejects_failed_and_malformed_payloads() -> None:
    with pytest.raises(EnvelopeError) as failed:
        unwrap_envelope({"success": False, "message": "Stok habis"}, failure_message="Gagal")
    assert failed.value.message == "Stok habis"
    assert failed.value.code == "REQUEST_FAILED"

    with pytest.raises(EnvelopeError) as fallback:
        unwrap_envelope({"success": False}, failure_message="Gagal membuat transaksi.")
    assert fallback.value.message == "Gagal membuat transaksi."

    with pytest.raises(EnvelopeError) as malformed:
        unwrap_envelope([1, 2], failure_message="Gagal")
    assert malformed.value.code == "INVALID_ENVELOPE"


def test_operation_scope_restores_outer_trace() -> None:
    trace = TraceContext()
    outer = trace.ensure()

    with trace.operation("checkout") as scoped:
        assert scoped.startswith("pos-checkout-")
        assert trace.ensure() == scoped
        trace.update_from_headers({"X-Trace-ID": "server-side"})
        assert trace.trace_id == "server-side"

    assert trace.trace_id == outer
    assert trace.operation_name is None
    assert new_trace_id().startswith("pos-")
