from __future__ import annotations

import json
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import EnvelopeError, TransportError
from .tracing import TRACE_HEADER, TraceContext

logger = logging.getLogger(__name__)

Payload = dict[str, Any] | list[Any] | None


@dataclass
class LastOperation:
    module: str
    operation: str
    duration_ms: int
    result: str
    trace_id: str | None


@dataclass
class HttpClient:
    config: ClientConfig
    trace: TraceContext | None = None
    session: requests.Session | None = None
    cache_ttl_seconds: float = 3.0
    enable_get_cache: bool = True
    _cache: dict[str, tuple[float, Payload]] | None = None
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()
            adapter = HTTPAdapter(
                pool_connections=self.config.max_connections,
                pool_maxsize=self.config.max_connections,
            )
            self.session.mount("http://", adapter)
            self.session.mount("https://", adapter)
        if self._cache is None:
            self._cache = {}

    def _build_url(self, path: str) -> str:
        base = self.config.api_base_url.rstrip("/") + "/"
        return urljoin(base, path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        module: str = "unknown",
        operation: str = "unknown",
        use_get_cache: bool = True,
        retry: bool = True,
        invalidate_paths: list[str] | None = None,
    ) -> Payload:
        if self.session is None:
            raise RuntimeError("HTTP session not initialized")
        request_headers = {"Accept": "application/json"}
        if json_body is not None:
            request_headers["Content-Type"] = "application/json"
        if headers:
            request_headers.update(headers)
        trace_context = self.trace or TraceContext()
        request_headers[TRACE_HEADER] = trace_context.ensure()

        normalized_method = method.upper()
        url = self._build_url(path)

        can_retry = retry and normalized_method in {"GET", "HEAD"}
        attempts = self.config.retries if can_retry else 1
        cache_key = self._cache_key(normalized_method, url, request_headers, params)
        should_use_get_cache = self.enable_get_cache and use_get_cache and normalized_method == "GET"
        if should_use_get_cache and cache_key:
            cached = self._read_cache(cache_key)
            if cached is not None:
                self.last_operation = LastOperation(
                    module=module,
                    operation=operation,
                    duration_ms=0,
                    result="success(cache)",
                    trace_id=trace_context.trace_id,
                )
                return cached

        started = time.monotonic()
        response: requests.Response | None = None
        for attempt in range(attempts):
            try:
                response = self.session.request(
                    method=normalized_method,
                    url=url,
                    headers=request_headers,
                    json=json_body,
                    params=params,
                    timeout=(self.config.connect_timeout_seconds, self.config.read_timeout_seconds),
                    verify=self.config.verify_ssl,
                )
            except requests.RequestException as exc:
                if attempt >= attempts - 1:
                    self._record_operation(module, operation, started, "error", trace_context.trace_id)
                    raise TransportError(
                        code="TRANSPORT_ERROR",
                        message="Tidak bisa terhubung ke server, coba lagi",
                        details={"type": type(exc).__name__, "error": str(exc)},
                        trace_id=trace_context.trace_id,
                        status_code=0,
                        raw_payload=None,
                    ) from exc
                logger.warning(
                    "transport_retry",
                    extra={"operation": operation, "attempt": attempt + 1, "error": type(exc).__name__},
                )
            else:
                if response.status_code < 500 or attempt >= attempts - 1:
                    break
            time.sleep(self.config.retry_backoff_seconds * (2**attempt))

        if response is None:
            raise RuntimeError("HTTP request failed without response")

        trace_context.update_from_headers(response.headers)
        if response.ok:
            if not response.content:
                self._record_operation(module, operation, started, "success", trace_context.trace_id)
                self._invalidate_cache(invalidate_paths or [])
                return None
            try:
                parsed = response.json()
            except ValueError as exc:
                self._record_operation(module, operation, started, "error", trace_context.trace_id)
                raise EnvelopeError(
                    code="INVALID_JSON",
                    message="Respons server tidak valid (bukan JSON).",
                    details={"content_type": response.headers.get("Content-Type")},
                    trace_id=trace_context.trace_id,
                    status_code=response.status_code,
                    raw_payload=response.text,
                ) from exc
            if should_use_get_cache and cache_key:
                self._write_cache(cache_key, parsed)
            if normalized_method != "GET":
                self._invalidate_cache(invalidate_paths or [])
            self._record_operation(module, operation, started, "success", trace_context.trace_id)
            return parsed

        payload: Any = None
        try:
            payload = response.json()
        except ValueError:
            payload = {"message": response.text} if response.text else None
        self._record_operation(module, operation, started, "error", trace_context.trace_id)
        logger.info(
            "http_error",
            extra={"operation": operation, "status_code": response.status_code, "trace_id": trace_context.trace_id},
        )
        raise map_error(response.status_code, payload if isinstance(payload, dict) else None, trace_context.trace_id)

    def clear_cache(self) -> None:
        if self._cache is not None:
            self._cache.clear()

    def _record_operation(self, module: str, operation: str, started: float, result: str, trace_id: str | None) -> None:
        self.last_operation = LastOperation(
            module=module,
            operation=operation,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
            trace_id=trace_id,
        )

    def _cache_key(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        params: dict[str, Any] | None,
    ) -> str | None:
        if method != "GET":
            return None
        safe_headers = {key: value for key, value in headers.items() if key == "Authorization"}
        return json.dumps({"url": url, "headers": safe_headers, "params": params or {}}, sort_keys=True)

    def _read_cache(self, key: str) -> Payload:
        if self._cache is None:
            return None
        record = self._cache.get(key)
        if not record:
            return None
        expires_at, payload = record
        if time.monotonic() >= expires_at:
            self._cache.pop(key, None)
            return None
        return payload

    def _write_cache(self, key: str, payload: Payload) -> None:
        if self._cache is None:
            self._cache = {}
        self._cache[key] = (time.monotonic() + self.cache_ttl_seconds, payload)

    def _invalidate_cache(self, paths: list[str]) -> None:
        if not self._cache or not paths:
            return
        doomed = [key for key in self._cache if any(path in key for path in paths)]
        for key in doomed:
            self._cache.pop(key, None)


def unwrap_envelope(payload: Payload, *, failure_message: str, trace_id: str | None = None) -> Any:
    """Return ``data`` from a ``{success, data, message}`` envelope.

    Payloads without a ``success`` key are treated as successful so that
    endpoints answering ``{data: ...}`` directly keep working.
    """
    if not isinstance(payload, dict):
        raise EnvelopeError(
            code="INVALID_ENVELOPE",
            message=failure_message,
            details={"type": type(payload).__name__},
            trace_id=trace_id,
            status_code=200,
            raw_payload=payload,
        )
    if payload.get("success") is False:
        raise EnvelopeError(
            code="REQUEST_FAILED",
            message=str(payload.get("message") or failure_message),
            details=payload.get("errors"),
            trace_id=trace_id,
            status_code=200,
            raw_payload=payload,
        )
    return payload.get("data")
