from __future__ import annotations

from ..exceptions import InvalidCredentialsError, UnauthorizedError, ValidationError
from ..models import TokenResponse
from .base import BaseClient

DEFAULT_LOGIN_FAILURE = "Email atau password salah"


class AuthClient(BaseClient):
    def login(self, email: str, password: str) -> TokenResponse:
        payload = {"email": email, "password": password}
        try:
            data = self.http.request(
                "POST",
                "/api/login",
                json_body=payload,
                module="auth",
                operation="login",
            )
        except (UnauthorizedError, ValidationError) as exc:
            raise InvalidCredentialsError(
                code="INVALID_CREDENTIALS",
                message=exc.message if exc.message and not exc.message.startswith("HTTP Error") else DEFAULT_LOGIN_FAILURE,
                details=exc.details,
                trace_id=exc.trace_id,
                status_code=exc.status_code,
                raw_payload=exc.raw_payload,
            ) from exc
        if not isinstance(data, dict) or not data.get("token"):
            message = data.get("message") if isinstance(data, dict) else None
            raise InvalidCredentialsError(
                code="INVALID_CREDENTIALS",
                message=str(message or DEFAULT_LOGIN_FAILURE),
                details=None,
                trace_id=self.http.trace.trace_id if self.http.trace else None,
                status_code=200,
                raw_payload=data,
            )
        return TokenResponse.model_validate(data)

    def logout(self) -> None:
        self._request("POST", "/api/logout", module="auth", operation="logout")
