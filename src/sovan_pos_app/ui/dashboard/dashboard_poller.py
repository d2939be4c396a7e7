from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable

from sovan_pos_sdk import DashboardSummary

from sovan_pos_app.services.dashboard_service import DashboardService
from sovan_pos_app.services.errors import PosServiceError
from sovan_pos_app.telemetry import TelemetryLogger, poll_failed

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 5.0


@dataclass
class DashboardPoller:
    """Refreshes the dashboard summary on a fixed interval.

    ``tick()`` performs one refresh and can be driven directly; ``start()``
    runs ticks on a daemon thread until ``stop()`` is called or the session
    expires. A failed refresh keeps the last good summary.
    """

    service: DashboardService
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    on_update: Callable[[DashboardSummary], Any] | None = None
    on_session_expired: Callable[[], Any] | None = None
    telemetry: TelemetryLogger = field(default_factory=lambda: TelemetryLogger(app_name="sovan_pos", enabled=False))
    summary: DashboardSummary | None = None
    last_error: str | None = None
    ticks: int = 0
    consecutive_failures: int = 0
    session_expired: bool = False
    _stop: threading.Event = field(default_factory=threading.Event, repr=False)
    _thread: threading.Thread | None = field(default=None, repr=False)

    def tick(self) -> bool:
        self.ticks += 1
        try:
            summary = self.service.summary()
        except PosServiceError as exc:
            self.last_error = exc.message
            self.consecutive_failures += 1
            self.telemetry.emit(
                poll_failed(
                    consecutive_failures=self.consecutive_failures,
                    interval_seconds=self.interval_seconds,
                    error_code="session_expired" if exc.requires_login else "refresh_failed",
                    trace_id=exc.trace_id,
                )
            )
            if exc.requires_login:
                logger.warning("dashboard_poll_session_expired")
                self.session_expired = True
                self._stop.set()
                if self.on_session_expired is not None:
                    self.on_session_expired()
            else:
                logger.warning(
                    "dashboard_poll_failed",
                    extra={"trace_id": exc.trace_id, "consecutive_failures": self.consecutive_failures},
                )
            return False
        self.summary = summary
        self.last_error = None
        self.consecutive_failures = 0
        if self.on_update is not None:
            self.on_update(summary)
        return True

    def run(self, max_ticks: int | None = None) -> None:
        while not self._stop.is_set():
            self.tick()
            if max_ticks is not None and self.ticks >= max_ticks:
                break
            if self._stop.wait(self.interval_seconds):
                break

    def start(self) -> None:
        if self.is_running():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name="dashboard-poller", daemon=True)
        self._thread.start()
        logger.info("dashboard_poll_started", extra={"interval_seconds": self.interval_seconds})

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("dashboard_poll_stopped")

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()
