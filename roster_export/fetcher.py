"""Offset-cursor pagination over the source roster."""

from __future__ import annotations

import logging
from typing import Iterator

from roster_export.errors import FetchError
from roster_export.models import ClientRecord
from roster_export.source_api import RosterApiClient

logger = logging.getLogger("roster_export.fetcher")


class PaginatedFetcher:
    """Walks ``GET clients`` in fixed-size pages until an empty page.

    An empty JSON list is the end-of-data marker. Anything that is not a
    list (``null``, an error object) is treated as a failed fetch rather
    than as the end of the roster. With ``stop_on_short_page`` a page
    shorter than the limit also ends the walk, saving the trailing empty
    request.
    """

    def __init__(
        self,
        api: RosterApiClient,
        page_size: int = 1000,
        stop_on_short_page: bool = False,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be a positive integer")
        self._api = api
        self.page_size = page_size
        self.stop_on_short_page = stop_on_short_page

    def fetch_page(self, limit: int, offset: int) -> list[ClientRecord]:
        body = self._api.list_clients(limit, offset)
        if not isinstance(body, list):
            raise FetchError(
                f"Unexpected clients payload at offset {offset}: {type(body).__name__}"
            )
        return [ClientRecord.from_api(item) for item in body]

    def iter_pages(self) -> Iterator[list[ClientRecord]]:
        offset = 0
        page_no = 0
        while True:
            page = self.fetch_page(self.page_size, offset)
            if not page:
                logger.info("Reached end of roster", extra={"offset": offset})
                return
            page_no += 1
            logger.info(
                "Fetched page %d (%d records)", page_no, len(page),
                extra={"page": page_no, "offset": offset, "records": len(page)},
            )
            offset += self.page_size
            yield page
            if self.stop_on_short_page and len(page) < self.page_size:
                return
