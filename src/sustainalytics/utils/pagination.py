"""Skip/Take pagination cursor."""

from __future__ import annotations

from typing import Any


class PageCursor:
    """Tracks position within offset-paginated results.

    A page shorter than ``take`` marks the end of data; ``done`` never goes
    back to False, and ``skip`` only advances after a full page.
    """

    def __init__(self, take: int) -> None:
        self.take = take
        self.skip = 0
        self.page: list[Any] = []
        self.index = 0
        self.done = False
        self.pages_fetched = 0

    @property
    def page_exhausted(self) -> bool:
        return self.index >= len(self.page)

    @property
    def needs_page(self) -> bool:
        """True when the current page is used up and more data may exist."""
        return self.page_exhausted and not self.done

    def accept(self, page: list[Any]) -> None:
        """Install a freshly fetched page and advance the offset."""
        self.page = page
        self.index = 0
        self.pages_fetched += 1
        if len(page) < self.take:
            self.done = True
        else:
            self.skip += self.take

    def advance(self) -> Any:
        """Return the next element of the current page.

        Elements may themselves be JSON null, so check ``page_exhausted``
        first rather than testing the result.
        """
        if self.page_exhausted:
            raise IndexError("page exhausted")
        item = self.page[self.index]
        self.index += 1
        return item
