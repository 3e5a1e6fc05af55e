"""Admin token authentication and the access guard used by privileged routes."""

from __future__ import annotations

import secrets
import time
from collections import OrderedDict
from threading import Lock
from typing import Callable, Optional

from inkbook.utils.config import Settings, get_settings
from inkbook.utils.logger import get_logger


logger = get_logger(__name__)


class AuthenticationError(Exception):
    """Base authentication failure."""


class AdminTokenNotConfiguredError(AuthenticationError):
    """Raised when ADMIN_TOKEN is missing."""


class InvalidAdminTokenError(AuthenticationError):
    """Raised when provided token is invalid."""


class AuthService:
    """Exchanges the configured admin token for bearer session tokens.

    Sessions expire after ``ADMIN_SESSION_TTL_SECONDS``; at most
    ``MAX_ACTIVE_SESSIONS`` are kept, the oldest being dropped first.
    Without ADMIN_TOKEN nobody can log in, so every privileged operation is
    refused.
    """

    MAX_ACTIVE_SESSIONS = 32

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings or get_settings()
        self._clock = clock
        self._sessions: OrderedDict[str, float] = OrderedDict()
        self._lock = Lock()

    @property
    def auth_configured(self) -> bool:
        return bool(self._settings.admin_token)

    @property
    def active_session_count(self) -> int:
        with self._lock:
            self._prune_expired()
            return len(self._sessions)

    def _expected_token(self) -> str:
        if not self._settings.admin_token:
            raise AdminTokenNotConfiguredError(
                "ADMIN_TOKEN is not configured. Set ADMIN_TOKEN in environment variables."
            )
        return self._settings.admin_token

    def _prune_expired(self) -> None:
        now = self._clock()
        expired = [token for token, expires_at in self._sessions.items() if expires_at <= now]
        for token in expired:
            del self._sessions[token]

    def login(self, provided_admin_token: str) -> str:
        expected = self._expected_token()
        if not secrets.compare_digest(provided_admin_token.encode(), expected.encode()):
            logger.warning("Rejected admin login attempt")
            raise InvalidAdminTokenError("Invalid admin token")
        session_token = secrets.token_urlsafe(32)
        with self._lock:
            self._prune_expired()
            while len(self._sessions) >= self.MAX_ACTIVE_SESSIONS:
                self._sessions.popitem(last=False)
            self._sessions[session_token] = self._clock() + self._settings.admin_session_ttl_seconds
        logger.info("Admin session opened")
        return session_token

    def logout(self, bearer_token: str) -> None:
        with self._lock:
            self._sessions.pop(bearer_token, None)

    def is_admin(self, bearer_token: Optional[str]) -> bool:
        if not self.auth_configured or not bearer_token:
            return False
        with self._lock:
            self._prune_expired()
            active = list(self._sessions)
        provided = bearer_token.encode()
        return any(secrets.compare_digest(provided, token.encode()) for token in active)
