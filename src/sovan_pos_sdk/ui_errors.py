from __future__ import annotations

from dataclasses import dataclass

from .exceptions import (
    ApiError,
    EnvelopeError,
    ForbiddenError,
    InvalidCredentialsError,
    MissingTokenError,
    NotFoundError,
    ServerError,
    SessionExpiredError,
    TransportError,
)

SESSION_EXPIRED_MESSAGE = "Sesi habis atau token tidak valid. Silakan login kembali."
LOGIN_REQUIRED_MESSAGE = "Silakan login terlebih dahulu"


@dataclass(frozen=True)
class UserFacingError:
    message: str
    details: str | None = None
    trace_id: str | None = None
    requires_login: bool = False

    @property
    def technical_details(self) -> str | None:
        if self.details:
            return self.details
        return None


def _primary_message(exc: ApiError) -> str:
    if isinstance(exc, MissingTokenError):
        return LOGIN_REQUIRED_MESSAGE
    if isinstance(exc, SessionExpiredError):
        return SESSION_EXPIRED_MESSAGE
    if isinstance(exc, InvalidCredentialsError):
        return exc.message.strip() or "Email atau password salah"
    if isinstance(exc, TransportError):
        return "Tidak bisa terhubung ke server, coba lagi"
    if isinstance(exc, ForbiddenError):
        return "Anda tidak memiliki akses untuk tindakan ini."
    if isinstance(exc, NotFoundError):
        return exc.message.strip() or "Data tidak ditemukan."
    if isinstance(exc, ServerError):
        return "Terjadi kesalahan pada server, coba lagi nanti."
    if isinstance(exc, EnvelopeError):
        return exc.message.strip() or "Respons server tidak valid."
    return exc.message.strip() or f"HTTP Error: {exc.status_code}"


def to_user_facing_error(exc: ApiError) -> UserFacingError:
    details = f"{exc.code} (HTTP {exc.status_code})"
    if exc.details:
        details = f"{details}: {exc.details}"
    return UserFacingError(
        message=_primary_message(exc),
        details=details,
        trace_id=exc.trace_id,
        requires_login=isinstance(exc, (SessionExpiredError, MissingTokenError)),
    )
