from .auth_service import AuthService
from .dashboard_service import DashboardService, VisitorService
from .errors import PosServiceError, normalize_error
from .inventory_service import InventoryService
from .transactions_service import TransactionsService

__all__ = [
    "AuthService",
    "DashboardService",
    "InventoryService",
    "PosServiceError",
    "TransactionsService",
    "VisitorService",
    "normalize_error",
]
