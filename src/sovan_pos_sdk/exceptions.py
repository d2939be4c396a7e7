from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None
    trace_id: str | None
    status_code: int
    raw_payload: object | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.status_code}] {self.code}: {self.message}{trace}"


class UnauthorizedError(ApiError):
    pass


class ForbiddenError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    pass


class SessionExpiredError(UnauthorizedError):
    """401 on an authenticated call: the stored token is no longer valid."""


class InvalidCredentialsError(UnauthorizedError):
    """Login rejected (no token in the response)."""


class MissingTokenError(UnauthorizedError):
    """No token stored on the device."""


class ConflictError(ApiError):
    """409 or conflict-style errors."""


class RateLimitError(ApiError):
    """429 throttling error."""


class ServerError(ApiError):
    """5xx server-side failures."""


class TransportError(ApiError):
    """Network/transport failure before an HTTP response was returned."""


class EnvelopeError(ApiError):
    """2xx response with success=false, a non-JSON body or an unexpected shape."""
