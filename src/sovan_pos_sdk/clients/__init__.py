from .auth import AuthClient
from .dashboard_client import DashboardClient, VisitorsClient
from .products_client import ProductsClient
from .transactions_client import TransactionsClient, UnitsClient

__all__ = [
    "AuthClient",
    "DashboardClient",
    "ProductsClient",
    "TransactionsClient",
    "UnitsClient",
    "VisitorsClient",
]
