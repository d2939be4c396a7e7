from .auth_store import AuthStore
from .cart import Cart, CartTotals, DuplicateUnitError, compute_cart_totals, compute_subtotal, parse_entered_total
from .checkout_validation import CheckoutIssue, CheckoutValidationResult, validate_checkout
from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    ApiError,
    EnvelopeError,
    ForbiddenError,
    InvalidCredentialsError,
    MissingTokenError,
    NotFoundError,
    SessionExpiredError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from .http_client import HttpClient, unwrap_envelope
from .local_store import LocalStore
from .models import Pagination, SessionData, TokenResponse
from .models_dashboard import DashboardSummary, HourlyPoint, TopProduct, Visitor
from .models_products import Product, ProductDraft, ProductPage, Unit
from .models_transactions import (
    CARD_TYPES,
    PAYMENT_METHODS,
    AvailableUnit,
    CartItem,
    Transaction,
    TransactionCreateRequest,
    TransactionItem,
    TransactionLine,
    TransactionQuery,
)
from .product_cache import ProductCache
from .product_validation import ClientValidationError, ValidationIssue, validate_product_draft
from .session import ApiSession
from .text import format_rupiah, sanitize
from .tracing import TraceContext
from .ui_errors import UserFacingError, to_user_facing_error

__all__ = [
    "ApiError",
    "ApiSession",
    "AuthStore",
    "AvailableUnit",
    "CARD_TYPES",
    "Cart",
    "CartItem",
    "CartTotals",
    "CheckoutIssue",
    "CheckoutValidationResult",
    "ClientConfig",
    "ClientValidationError",
    "ConfigError",
    "DashboardSummary",
    "DuplicateUnitError",
    "EnvelopeError",
    "ForbiddenError",
    "HourlyPoint",
    "HttpClient",
    "InvalidCredentialsError",
    "LocalStore",
    "MissingTokenError",
    "NotFoundError",
    "PAYMENT_METHODS",
    "Pagination",
    "Product",
    "ProductCache",
    "ProductDraft",
    "ProductPage",
    "SessionData",
    "SessionExpiredError",
    "TokenResponse",
    "TopProduct",
    "TraceContext",
    "Transaction",
    "TransactionCreateRequest",
    "TransactionItem",
    "TransactionLine",
    "TransactionQuery",
    "TransportError",
    "UnauthorizedError",
    "Unit",
    "UserFacingError",
    "ValidationError",
    "ValidationIssue",
    "Visitor",
    "compute_cart_totals",
    "compute_subtotal",
    "format_rupiah",
    "load_config",
    "parse_entered_total",
    "sanitize",
    "to_user_facing_error",
    "unwrap_envelope",
    "validate_checkout",
    "validate_product_draft",
]
