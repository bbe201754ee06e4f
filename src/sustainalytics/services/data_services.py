"""DataServices listing scanner (Skip/Take pagination)."""

from __future__ import annotations

import logging
from urllib.parse import quote

from sustainalytics.client import AuthenticatedFetcher
from sustainalytics.models.cells import Row
from sustainalytics.models.data_services import DataServicesParams, project_entity
from sustainalytics.utils.errors import SchemaError, UpstreamError
from sustainalytics.utils.pagination import PageCursor

logger = logging.getLogger(__name__)

DATA_SERVICE_PATH = "/v2/DataService"


def _enc(value: str) -> str:
    return quote(value, safe="")


class DataServicesScan:
    """Streams DataService entities page by page.

    Pages are fetched strictly in increasing Skip order and never after a
    short page has been seen.
    """

    def __init__(self, fetcher: AuthenticatedFetcher, params: DataServicesParams) -> None:
        self._fetcher = fetcher
        self.params = params
        self.cursor = PageCursor(params.take)

    def build_url(self, skip: int) -> str:
        p = self.params
        parts = [
            f"ProductId={_enc(p.product_id)}",
            f"Skip={skip}",
            f"Take={p.take}",
        ]
        if p.package_ids is not None:
            parts.append(f"PackageIds={_enc(p.package_ids)}")
        if p.field_cluster_ids is not None:
            parts.append(f"FieldClusterIds={_enc(p.field_cluster_ids)}")
        if p.field_ids is not None:
            parts.append(f"FieldIds={_enc(p.field_ids)}")

        return f"{self._fetcher.url(DATA_SERVICE_PATH)}?{'&'.join(parts)}"

    def load_next_page(self) -> None:
        """Fetch the page at the cursor's offset. No-op once done."""
        if self.cursor.done:
            return

        url = self.build_url(self.cursor.skip)
        status, body = self._fetcher.get_json(url)
        if not 200 <= status < 300:
            raise UpstreamError(
                f"DataServices failed: status={status} url={url}",
                status=status,
                url=url,
            )
        if not isinstance(body, list):
            raise SchemaError("DataServices response not an array")

        self.cursor.accept(body)
        logger.info(
            f"DataServices page {self.cursor.pages_fetched}: {len(body)} rows "
            f"(done={self.cursor.done})"
        )

    def next_row(self, columns: list[str]) -> Row | None:
        """Project the next entity onto ``columns``; None at end of data."""
        while self.cursor.needs_page:
            self.load_next_page()
        if self.cursor.page_exhausted:
            return None
        return project_entity(self.cursor.advance(), columns)
