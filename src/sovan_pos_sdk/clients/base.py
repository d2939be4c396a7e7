from __future__ import annotations

from contextlib import nullcontext
from dataclasses import dataclass

from ..exceptions import MissingTokenError
from ..http_client import HttpClient
from ..ui_errors import LOGIN_REQUIRED_MESSAGE


@dataclass
class BaseClient:
    http: HttpClient
    access_token: str | None = None

    def _auth_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _require_token(self) -> None:
        if not self.access_token:
            raise MissingTokenError(
                code="TOKEN_MISSING",
                message=LOGIN_REQUIRED_MESSAGE,
                details=None,
                trace_id=None,
                status_code=0,
            )

    def _operation(self, name: str):
        if self.http.trace is None:
            return nullcontext()
        return self.http.trace.operation(name)

    def _request(self, method: str, path: str, **kwargs):
        self._require_token()
        headers = kwargs.pop("headers", {})
        merged = {**self._auth_headers(), **headers}
        return self.http.request(method, path, headers=merged, **kwargs)
