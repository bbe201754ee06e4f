"""Client-credentials authentication for the Sustainalytics API.

Holds at most one bearer token. There is no proactive expiry: absence of a
cached token is the only reason to fetch, and a 401/403 from the API (see
client.AuthenticatedFetcher) is the only reason to refresh.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime

import httpx
from pydantic import ValidationError

from sustainalytics.config import ServerOptions
from sustainalytics.models.auth import TokenResponse, TokenStatus
from sustainalytics.utils.errors import AuthenticationError

logger = logging.getLogger(__name__)

TOKEN_PATH = "/auth/token"


class TokenStore:
    """Caches a single bearer token and knows how to issue a new one."""

    def __init__(self, options: ServerOptions) -> None:
        self._options = options
        self._token: TokenResponse | None = None
        self._issued_at: datetime | None = None
        self._lock = threading.Lock()
        self._http = httpx.Client(timeout=options.timeout)

    @property
    def token_url(self) -> str:
        return self._options.api_root + TOKEN_PATH

    def ensure(self) -> str:
        """Return the cached token, fetching one first if none is cached."""
        with self._lock:
            if self._token is None:
                self._fetch()
            return self._token.access_token  # type: ignore[union-attr]

    def force_refresh(self) -> str:
        """Fetch a new token and replace the cache unconditionally."""
        with self._lock:
            self._fetch()
            return self._token.access_token  # type: ignore[union-attr]

    def status(self) -> TokenStatus:
        """Get the current token status (metadata only, never the token)."""
        token = self._token
        if token is None:
            return TokenStatus(has_token=False)
        return TokenStatus(
            has_token=True,
            token_type=token.token_type,
            scope=token.scope,
            expires_in=token.expires_in,
            issued_at=self._issued_at,
        )

    def clear(self) -> None:
        with self._lock:
            self._token = None
            self._issued_at = None

    def _fetch(self) -> None:
        """POST client credentials and store the result. Caller holds the lock."""
        url = self.token_url
        logger.info(f"Requesting access token from {url}")

        try:
            response = self._http.post(
                url,
                data={
                    "client_id": self._options.client_id,
                    "client_secret": self._options.client_secret,
                },
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            raise AuthenticationError(f"auth failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise AuthenticationError(
                f"auth failed: status={response.status_code} body={response.text}",
                status=response.status_code,
                body=response.text,
            )

        try:
            token = TokenResponse(**response.json())
        except (ValueError, TypeError, ValidationError) as e:
            raise AuthenticationError(
                f"invalid auth json: {e}",
                status=response.status_code,
                body=response.text,
            ) from e

        self._token = token
        self._issued_at = datetime.now()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()
