from __future__ import annotations

import logging
from dataclasses import dataclass
from time import perf_counter

from sovan_pos_sdk import ApiError, ApiSession, ClientConfig, load_config, to_user_facing_error
from sovan_pos_sdk.ui_errors import LOGIN_REQUIRED_MESSAGE, SESSION_EXPIRED_MESSAGE

from sovan_pos_app.app.navigation import find_entry, menu_labels
from sovan_pos_app.app.preferences import Preferences
from sovan_pos_app.app.state import PROTECTED_ROUTES, AppState, Route
from sovan_pos_app.services.auth_service import AuthService
from sovan_pos_app.services.dashboard_service import DashboardService, VisitorService
from sovan_pos_app.services.inventory_service import InventoryService
from sovan_pos_app.services.transactions_service import TransactionsService
from sovan_pos_app.telemetry import TelemetryLogger, auth_result, screen_view, session_expired
from sovan_pos_app.ui.dashboard.dashboard_poller import DashboardPoller
from sovan_pos_app.ui.dashboard.dashboard_view import DashboardView
from sovan_pos_app.ui.inventory.inventory_view import InventoryView
from sovan_pos_app.ui.transactions.create_transaction_view import CreateTransactionView
from sovan_pos_app.ui.transactions.transaction_list_view import TransactionListView
from sovan_pos_app.ui.visitors.visitor_view import VisitorView

logger = logging.getLogger(__name__)


@dataclass
class BootstrapResult:
    route: Route
    error_message: str | None = None


class PosAppBootstrap:
    def __init__(
        self,
        config: ClientConfig | None = None,
        session: ApiSession | None = None,
        telemetry: TelemetryLogger | None = None,
    ) -> None:
        self.config = config or load_config()
        self.session = session or ApiSession(self.config)
        self.state = AppState()
        self.auth_service = AuthService(self.session)
        self.inventory_service = InventoryService(self.session)
        self.transactions_service = TransactionsService(self.session)
        self.dashboard_service = DashboardService(self.session)
        self.visitor_service = VisitorService(self.session)
        self.preferences = Preferences(self.session.local_store)
        self.telemetry = telemetry or TelemetryLogger(app_name="sovan_pos", enabled=self.config.telemetry_enabled)

    def start(self) -> BootstrapResult:
        self.state.dark_mode = self.preferences.dark_mode()
        if not self.auth_service.has_active_session():
            self._navigate(Route.LOGIN, "Belum login")
            return BootstrapResult(route=self.state.route)
        self.state.email = self.session.email
        self._navigate(Route.DASHBOARD, "Sesi tersimpan")
        return BootstrapResult(route=self.state.route)

    def login(self, email: str, password: str) -> BootstrapResult:
        started = perf_counter()
        try:
            self.auth_service.login(email, password)
        except Exception as exc:
            self.state.error_message = self._friendly_error(exc)
            self._emit_auth_result(
                False,
                duration_ms=int((perf_counter() - started) * 1000),
                trace_id=getattr(exc, "trace_id", None),
            )
            self._navigate(Route.LOGIN, "Login gagal")
            return BootstrapResult(route=self.state.route, error_message=self.state.error_message)
        self.state.error_message = None
        self.state.email = email
        self._emit_auth_result(True, duration_ms=int((perf_counter() - started) * 1000), trace_id=None)
        self._navigate(Route.DASHBOARD, "Login berhasil")
        return BootstrapResult(route=self.state.route)

    def logout(self) -> BootstrapResult:
        self.auth_service.logout()
        self.state.email = None
        self.state.error_message = None
        self._navigate(Route.LOGIN, "Sesi dihapus")
        return BootstrapResult(route=self.state.route)

    def navigate(self, route: Route) -> BootstrapResult:
        if route in PROTECTED_ROUTES and not self.auth_service.has_active_session():
            self.state.error_message = LOGIN_REQUIRED_MESSAGE
            self._navigate(Route.LOGIN, "Login diperlukan")
            return BootstrapResult(route=self.state.route, error_message=self.state.error_message)
        self._navigate(route, "Siap")
        self._emit_screen_view(route.value)
        return BootstrapResult(route=self.state.route)

    def select_menu(self, key: str) -> BootstrapResult:
        entry = find_entry(key)
        if entry.route is None:
            return self.logout()
        return self.navigate(entry.route)

    def handle_session_expired(self) -> BootstrapResult:
        logger.warning("session_expired", extra={"route": self.state.route.value})
        self.session.clear()
        self.state.email = None
        self.state.error_message = SESSION_EXPIRED_MESSAGE
        self.telemetry.emit(session_expired(self.state.route.value))
        self._navigate(Route.LOGIN, "Sesi habis")
        return BootstrapResult(route=self.state.route, error_message=self.state.error_message)

    def toggle_dark_mode(self) -> bool:
        self.state.dark_mode = self.preferences.toggle_dark_mode()
        return self.state.dark_mode

    def menu_labels(self) -> list[str]:
        return menu_labels()

    def inventory_view(self) -> InventoryView:
        return InventoryView(
            service=self.inventory_service,
            base_url=self.config.api_base_url,
            on_session_expired=self.handle_session_expired,
            telemetry=self.telemetry,
        )

    def create_transaction_view(self) -> CreateTransactionView:
        return CreateTransactionView(
            service=self.transactions_service,
            on_session_expired=self.handle_session_expired,
            on_completed=lambda: self.navigate(Route.TRANSACTIONS),
            telemetry=self.telemetry,
        )

    def transaction_list_view(self) -> TransactionListView:
        return TransactionListView(
            service=self.transactions_service,
            preferences=self.preferences,
            on_session_expired=self.handle_session_expired,
            telemetry=self.telemetry,
        )

    def dashboard_view(self) -> DashboardView:
        poller = DashboardPoller(
            service=self.dashboard_service,
            interval_seconds=self.config.dashboard_poll_seconds,
            on_session_expired=self.handle_session_expired,
            telemetry=self.telemetry,
        )
        return DashboardView(poller=poller)

    def visitor_view(self) -> VisitorView:
        return VisitorView(service=self.visitor_service, on_session_expired=self.handle_session_expired)

    @staticmethod
    def _friendly_error(exc: Exception) -> str:
        if isinstance(exc, ApiError):
            return to_user_facing_error(exc).message
        return str(exc) or "Terjadi kesalahan yang tidak terduga"

    def _emit_auth_result(self, success: bool, *, duration_ms: int, trace_id: str | None) -> None:
        self.telemetry.emit(auth_result(success=success, duration_ms=duration_ms, trace_id=trace_id))

    def _emit_screen_view(self, route: str) -> None:
        self.telemetry.emit(screen_view(route))

    def _navigate(self, route: Route, status_message: str) -> None:
        logger.info("navigation", extra={"route": route.value})
        self.state.route = route
        self.state.status_message = status_message
