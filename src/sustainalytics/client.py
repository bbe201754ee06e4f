"""Authenticated JSON fetches against the Sustainalytics API.

Injects the bearer token and performs exactly one re-authentication and
retry when the API answers 401 or 403.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from sustainalytics.auth import TokenStore
from sustainalytics.config import ServerOptions
from sustainalytics.utils.errors import ProtocolError, UpstreamError

logger = logging.getLogger(__name__)

AUTH_RETRY_STATUSES = (401, 403)


class AuthenticatedFetcher:
    """HTTP GET wrapper with bearer auth and a single refresh-and-retry."""

    def __init__(
        self,
        options: ServerOptions,
        tokens: TokenStore,
        verbose: bool = False,
    ) -> None:
        self._options = options
        self._tokens = tokens
        self._verbose = verbose
        self._http = httpx.Client(timeout=options.timeout)

    def url(self, path: str) -> str:
        """Join an API path onto the configured base URL."""
        return self._options.api_root + path

    def get_json(self, url: str) -> tuple[int, Any]:
        """GET a URL and decode its JSON body.

        Returns:
            (status_code, decoded body). Non-2xx statuses are returned, not
            raised; callers decide what a failure means for them.

        Raises:
            ProtocolError: If the returned body is not valid JSON.
            UpstreamError: If the request could not be sent.
            AuthenticationError: If the token cannot be obtained.
        """
        token = self._tokens.ensure()
        response = self._send(url, token)

        if response.status_code in AUTH_RETRY_STATUSES:
            logger.warning(
                f"Got {response.status_code}, refreshing token and retrying..."
            )
            token = self._tokens.force_refresh()
            response = self._send(url, token)

        return response.status_code, self._decode(response, url)

    def _send(self, url: str, token: str) -> httpx.Response:
        if self._verbose:
            logger.info(f"GET {url}")

        try:
            response = self._http.get(url, headers=self._build_headers(token))
        except httpx.HTTPError as e:
            raise UpstreamError(f"request failed: {e} url={url}", url=url) from e

        if self._verbose:
            logger.info(f"Response: {response.status_code}")
        return response

    def _build_headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }

    @staticmethod
    def _decode(response: httpx.Response, url: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ProtocolError(
                f"invalid json: {e} status={response.status_code} url={url}",
                status=response.status_code,
                url=url,
            ) from e

    def close(self) -> None:
        """Close the underlying HTTP client and the token store's client."""
        self._http.close()
        self._tokens.close()
