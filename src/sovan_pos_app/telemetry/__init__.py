from .events import (
    TELEMETRY_CATEGORIES,
    PosEvent,
    api_call_result,
    auth_result,
    build_event,
    checkout_result,
    inventory_synced,
    poll_failed,
    screen_view,
    session_expired,
)
from .logger import TelemetryLogger

__all__ = [
    "TELEMETRY_CATEGORIES",
    "PosEvent",
    "TelemetryLogger",
    "api_call_result",
    "auth_result",
    "build_event",
    "checkout_result",
    "inventory_synced",
    "poll_failed",
    "screen_view",
    "session_expired",
]
