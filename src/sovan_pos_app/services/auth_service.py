from __future__ import annotations

import logging

from sovan_pos_sdk import ApiError, ApiSession, InvalidCredentialsError, TokenResponse

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, session: ApiSession) -> None:
        self.session = session

    def has_active_session(self) -> bool:
        return bool(self.session.token)

    def login(self, email: str, password: str) -> TokenResponse:
        logger.info("login_attempt")
        try:
            token = self.session.auth_client().login(email, password)
        except InvalidCredentialsError:
            logger.warning("login_rejected")
            raise
        except Exception:
            logger.exception("login_failure")
            raise
        self.session.establish(token, email=email)
        logger.info("login_success")
        return token

    def logout(self, *, notify_server: bool = False) -> None:
        if notify_server and self.session.token:
            try:
                self.session.auth_client().logout()
            except ApiError as exc:
                logger.warning("logout_remote_failed", extra={"code": exc.code, "trace_id": exc.trace_id})
        logger.info("logout")
        self.session.clear()
