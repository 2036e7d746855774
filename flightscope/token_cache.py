from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from .errors import AuthenticationError

logger = logging.getLogger(__name__)

TOKEN_PATH = "/v1/security/oauth2/token"


@dataclass(frozen=True, slots=True)
class AccessToken:
    value: str
    expires_at: float


class TokenCache:
    """Client-credentials bearer token, refreshed on expiry or on demand.

    One instance is meant to be shared by every request in the process.
    Two callers may refresh at the same time; the last one to finish wins.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        *,
        base_url: str = "https://test.api.amadeus.com",
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
        safety_margin_s: int = 60,
        timeout: float = 10.0,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_url = base_url.rstrip("/") + TOKEN_PATH
        self.session = session or requests.Session()
        self.clock = clock
        self.safety_margin_s = safety_margin_s
        self.timeout = timeout
        self._token: Optional[AccessToken] = None

    @property
    def token(self) -> Optional[AccessToken]:
        return self._token

    def get(self) -> str:
        """Return a valid token value, exchanging credentials if needed."""
        now = self.clock()
        token = self._token
        if token is not None and now < token.expires_at:
            return token.value

        token = self._exchange(now)
        self._token = token
        return token.value

    def invalidate(self) -> None:
        """Forget the cached token so the next ``get`` refreshes it."""
        if self._token is not None:
            logger.info("Access token invalidated")
        self._token = None

    def _exchange(self, now: float) -> AccessToken:
        if not self.client_id or not self.client_secret:
            raise AuthenticationError("API credentials are not configured")

        try:
            resp = self.session.post(
                self.token_url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                },
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Token request failed: %s", exc.__class__.__name__)
            raise AuthenticationError(
                "Authentication failed. Please check your API credentials."
            ) from exc

        if resp.status_code != 200:
            logger.error("Token request rejected with HTTP %s", resp.status_code)
            raise AuthenticationError(
                "Authentication failed. Please check your API credentials."
            )

        try:
            data = resp.json()
            value = data["access_token"]
            ttl = int(data.get("expires_in", 0))
        except (ValueError, KeyError, TypeError) as exc:
            raise AuthenticationError("Malformed token response") from exc

        logger.info("Access token refreshed, valid for %ss", ttl)
        return AccessToken(value=value, expires_at=now + ttl - self.safety_margin_s)


__all__ = ["AccessToken", "TokenCache", "TOKEN_PATH"]
