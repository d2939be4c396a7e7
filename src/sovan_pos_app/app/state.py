from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Route(str, Enum):
    LOGIN = "login"
    DASHBOARD = "dashboard"
    INVENTORY = "inventory"
    TRANSACTIONS = "transactions"
    CREATE_TRANSACTION = "create_transaction"
    VISITORS = "visitors"


PROTECTED_ROUTES = frozenset(route for route in Route if route is not Route.LOGIN)


@dataclass
class AppState:
    route: Route = Route.LOGIN
    error_message: str | None = None
    status_message: str = "Siap"
    trace_id: str | None = None
    email: str | None = None
    dark_mode: bool = False
