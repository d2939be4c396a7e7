from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .auth_store import AuthStore
from .clients.auth import AuthClient
from .clients.dashboard_client import DashboardClient, VisitorsClient
from .clients.products_client import ProductsClient
from .clients.transactions_client import TransactionsClient, UnitsClient
from .config import ClientConfig
from .exceptions import MissingTokenError
from .http_client import HttpClient
from .local_store import LocalStore
from .models import SessionData, TokenResponse
from .tracing import TraceContext
from .ui_errors import LOGIN_REQUIRED_MESSAGE

logger = logging.getLogger(__name__)


@dataclass
class ApiSession:
    config: ClientConfig
    auth_store: AuthStore | None = None
    local_store: LocalStore | None = None
    trace: TraceContext | None = None
    token: str | None = None
    email: str | None = None
    _http: HttpClient | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.auth_store = self.auth_store or AuthStore()
        self.local_store = self.local_store or LocalStore()
        self.trace = self.trace or TraceContext()
        stored = self.auth_store.load()
        if stored and not self.token:
            self.token = stored.token
            self.email = stored.email

    def http(self) -> HttpClient:
        if self._http is None:
            self._http = HttpClient(config=self.config, trace=self.trace)
        return self._http

    def auth_client(self) -> AuthClient:
        return AuthClient(http=self.http(), access_token=self.token)

    def products_client(self) -> ProductsClient:
        return ProductsClient(http=self.http(), access_token=self.token)

    def units_client(self) -> UnitsClient:
        return UnitsClient(http=self.http(), access_token=self.token)

    def transactions_client(self) -> TransactionsClient:
        return TransactionsClient(http=self.http(), access_token=self.token)

    def dashboard_client(self) -> DashboardClient:
        return DashboardClient(http=self.http(), access_token=self.token)

    def visitors_client(self) -> VisitorsClient:
        return VisitorsClient(http=self.http(), access_token=self.token)

    def require_token(self) -> str:
        if not self.token:
            raise MissingTokenError(
                code="TOKEN_MISSING",
                message=LOGIN_REQUIRED_MESSAGE,
                details=None,
                trace_id=None,
                status_code=0,
            )
        return self.token

    def establish(self, token: TokenResponse, email: str | None = None) -> None:
        self.token = token.token
        self.email = email
        self.auth_store.save(SessionData(token=self.token, email=email, env_name=self.config.env_name))
        logger.info("session_established", extra={"env": self.config.env_name})

    def clear(self) -> None:
        self.token = None
        self.email = None
        if self._http is not None:
            self._http.clear_cache()
        if self.auth_store:
            self.auth_store.clear()
        logger.info("session_cleared")
