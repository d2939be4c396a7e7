from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

# Context keys each event category may carry; anything else is rejected.
CONTEXT_KEYS: dict[str, frozenset[str]] = {
    "auth": frozenset(),
    "navigation": frozenset(),
    "session_expired": frozenset({"screen"}),
    "inventory_sync": frozenset({"product_count", "filtered", "source"}),
    "checkout": frozenset({"invoice_number", "item_count", "payment_method", "total"}),
    "dashboard_poll": frozenset({"consecutive_failures", "interval_seconds"}),
    "api_call_result": frozenset({"row_count"}),
}
TELEMETRY_CATEGORIES = frozenset(CONTEXT_KEYS)
PII_KEYS = frozenset(
    {
        "email",
        "password",
        "phone",
        "customer_name",
        "customer_phone",
        "token",
        "authorization",
        "notes",
    }
)
SYNC_SOURCES = ("cache", "server")


@dataclass(frozen=True)
class PosEvent:
    category: str
    name: str
    screen: str
    action: str
    timestamp_utc: str
    trace_id: str | None = None
    duration_ms: int | None = None
    success: bool | None = None
    error_code: str | None = None
    context: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        return {key: value for key, value in payload.items() if value is not None and value != {}}


def _validate_context(category: str, context: dict[str, Any] | None) -> dict[str, Any] | None:
    if not context:
        return None
    pii = sorted(key for key in context if key.lower() in PII_KEYS)
    if pii:
        raise ValueError(f"PII-like keys are forbidden in telemetry context: {pii}")
    unknown = sorted(set(context) - CONTEXT_KEYS[category])
    if unknown:
        raise ValueError(f"Context keys {unknown} are not allowed for {category} events")
    return {key: str(value) if isinstance(value, Decimal) else value for key, value in context.items()}


def build_event(
    *,
    category: str,
    name: str,
    screen: str,
    action: str,
    trace_id: str | None = None,
    duration_ms: int | None = None,
    success: bool | None = None,
    error_code: str | None = None,
    context: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> PosEvent:
    if category not in TELEMETRY_CATEGORIES:
        raise ValueError(f"Unsupported telemetry category: {category}")
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    return PosEvent(
        category=category,
        name=name,
        screen=screen,
        action=action,
        timestamp_utc=stamp,
        trace_id=trace_id,
        duration_ms=duration_ms,
        success=success,
        error_code=error_code,
        context=_validate_context(category, context),
    )


def screen_view(route: str) -> PosEvent:
    return build_event(category="navigation", name="screen_view", screen=route, action=route, success=True)


def auth_result(*, success: bool, duration_ms: int, trace_id: str | None) -> PosEvent:
    return build_event(
        category="auth",
        name="auth_login_result",
        screen="login",
        action="login",
        success=success,
        duration_ms=duration_ms,
        trace_id=trace_id,
        error_code=None if success else "login_failed",
    )


def session_expired(screen: str) -> PosEvent:
    return build_event(
        category="session_expired",
        name="session_expired",
        screen=screen,
        action="logout",
        success=False,
        error_code="session_expired",
        context={"screen": screen},
    )


def inventory_synced(*, product_count: int, filtered: bool, source: str, action: str, trace_id: str | None = None) -> PosEvent:
    if source not in SYNC_SOURCES:
        raise ValueError(f"Unknown catalogue source: {source}")
    return build_event(
        category="inventory_sync",
        name="inventory_synced",
        screen="inventory",
        action=action,
        success=True,
        trace_id=trace_id,
        context={"product_count": product_count, "filtered": filtered, "source": source},
    )


def checkout_result(
    *,
    success: bool,
    item_count: int,
    payment_method: str,
    total: Decimal | None = None,
    invoice_number: str | None = None,
    trace_id: str | None = None,
    error_code: str | None = None,
) -> PosEvent:
    context: dict[str, Any] = {"item_count": item_count, "payment_method": payment_method}
    if total is not None:
        context["total"] = total
    if invoice_number:
        context["invoice_number"] = invoice_number
    return build_event(
        category="checkout",
        name="checkout_result",
        screen="create_transaction",
        action="transactions.create",
        success=success,
        trace_id=trace_id,
        error_code=error_code,
        context=context,
    )


def poll_failed(*, consecutive_failures: int, interval_seconds: float, error_code: str, trace_id: str | None = None) -> PosEvent:
    return build_event(
        category="dashboard_poll",
        name="dashboard_poll_failed",
        screen="dashboard",
        action="dashboard.poll",
        success=False,
        trace_id=trace_id,
        error_code=error_code,
        context={"consecutive_failures": consecutive_failures, "interval_seconds": interval_seconds},
    )


def api_call_result(
    *,
    screen: str,
    action: str,
    success: bool,
    trace_id: str | None = None,
    error_code: str | None = None,
    row_count: int | None = None,
) -> PosEvent:
    return build_event(
        category="api_call_result",
        name="api_call_result",
        screen=screen,
        action=action,
        success=success,
        trace_id=trace_id,
        error_code=error_code,
        context=None if row_count is None else {"row_count": row_count},
    )
