from __future__ import annotations

from dataclasses import dataclass

from sovan_pos_sdk import ApiError, ClientValidationError, to_user_facing_error

UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


@dataclass(frozen=True)
class PosServiceError(RuntimeError):
    message: str
    details: str | None = None
    trace_id: str | None = None
    requires_login: bool = False

    def __str__(self) -> str:
        return self.message


def normalize_error(exc: Exception, fallback: str) -> PosServiceError:
    if isinstance(exc, PosServiceError):
        return exc
    if isinstance(exc, ApiError):
        user_facing = to_user_facing_error(exc)
        return PosServiceError(
            message=user_facing.message,
            details=user_facing.technical_details,
            trace_id=user_facing.trace_id,
            requires_login=user_facing.requires_login,
        )
    if isinstance(exc, ClientValidationError):
        return PosServiceError(message=str(exc), details="CLIENT_VALIDATION")
    # Raw text of an unexpected failure goes to the details pane only.
    return PosServiceError(message=fallback, details=f"{UNEXPECTED_ERROR}: {type(exc).__name__}: {exc}")
