"""Scan session: the single stateful object a query host drives.

A session owns one token cache and at most one active scan. The host calls
``begin`` / ``next`` / ``end`` in sequence per query. Every public method
holds the session lock, so a session may be shared across threads as long
as only one query runs through it at a time.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator, Mapping
from typing import Union

from sustainalytics.auth import TokenStore
from sustainalytics.client import AuthenticatedFetcher
from sustainalytics.config import ServerOptions
from sustainalytics.models import data_services, field_mappings
from sustainalytics.models.cells import CellType, Row, require_columns
from sustainalytics.models.data_services import DataServicesParams
from sustainalytics.services.data_services import DataServicesScan
from sustainalytics.services.field_mappings import FieldMappingLoader, FieldMappingScan
from sustainalytics.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

SCHEMAS: dict[str, dict[str, CellType]] = {
    data_services.RESOURCE: data_services.COLUMNS,
    field_mappings.RESOURCE: field_mappings.COLUMNS,
}


class Inactive:
    """No scan in progress."""

    def __repr__(self) -> str:
        return "Inactive()"


ScanState = Union[Inactive, DataServicesScan, FieldMappingScan]


class ScanSession:
    """Selects and drives one resource scanner at a time."""

    def __init__(self, options: ServerOptions, verbose: bool = False) -> None:
        self._options = options
        self._tokens = TokenStore(options)
        self._fetcher = AuthenticatedFetcher(options, self._tokens, verbose=verbose)
        self._state: ScanState = Inactive()
        self._lock = threading.RLock()

    @classmethod
    def from_options(cls, options: Mapping[str, str], verbose: bool = False) -> ScanSession:
        return cls(ServerOptions.from_options(options), verbose=verbose)

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def tokens(self) -> TokenStore:
        return self._tokens

    def begin(self, resource: str, options: Mapping[str, str] | None = None) -> None:
        """Start a scan of ``resource``, discarding any previous scan."""
        options = options or {}
        with self._lock:
            self._state = Inactive()

            if resource == data_services.RESOURCE:
                params = DataServicesParams.from_options(options)
                scan = DataServicesScan(self._fetcher, params)
                scan.load_next_page()
                self._state = scan
            elif resource == field_mappings.RESOURCE:
                rows = FieldMappingLoader(self._fetcher).load_all()
                self._state = FieldMappingScan(rows)
            else:
                raise ConfigurationError(f"unknown endpoint: {resource}")

            logger.info(f"Began {resource} scan")

    def begin_from_table(self, options: Mapping[str, str]) -> None:
        """Start a scan whose resource is named by the ``endpoint`` table option."""
        endpoint = options.get("endpoint")
        if not endpoint:
            raise ConfigurationError("missing table option endpoint")
        self.begin(endpoint, options)

    def next(self, columns: Iterable[str]) -> Row | None:
        """Return the next row projected onto ``columns``, or None at end."""
        with self._lock:
            state = self._state
            if isinstance(state, Inactive):
                return None
            if isinstance(state, DataServicesScan):
                requested = require_columns(columns, data_services.COLUMNS, data_services.RESOURCE)
                return state.next_row(requested)
            if isinstance(state, FieldMappingScan):
                requested = require_columns(columns, field_mappings.COLUMNS, field_mappings.RESOURCE)
                return state.next_row(requested)
            raise TypeError(f"unhandled scan state: {state!r}")

    def end(self) -> None:
        """Drop the active scan, whatever it was."""
        with self._lock:
            state = self._state
            if isinstance(state, DataServicesScan):
                logger.info(
                    f"Ended DataServices scan after {state.cursor.pages_fetched} page(s)"
                )
            elif isinstance(state, FieldMappingScan):
                logger.info(f"Ended FieldMappingDefinitions scan at row {state.index}")
            elif not isinstance(state, Inactive):
                raise TypeError(f"unhandled scan state: {state!r}")
            self._state = Inactive()

    def scan(
        self,
        resource: str,
        options: Mapping[str, str] | None = None,
        columns: Iterable[str] | None = None,
    ) -> Iterator[Row]:
        """Yield every row of a resource; ends the scan even on early exit."""
        requested = list(columns) if columns is not None else list(SCHEMAS.get(resource, ()))
        self.begin(resource, options)
        try:
            while True:
                row = self.next(requested)
                if row is None:
                    return
                yield row
        finally:
            self.end()

    def close(self) -> None:
        """End any scan, drop the token and close HTTP clients."""
        with self._lock:
            self._state = Inactive()
            self._tokens.clear()
            self._fetcher.close()

    def __enter__(self) -> ScanSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
