"""Per-page status enrichment."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from roster_export.errors import EnrichmentError
from roster_export.models import ClientRecord, ExportRow, StatusMap
from roster_export.source_api import RosterApiClient

logger = logging.getLogger("roster_export.enricher")


class StatusEnricher:
    def __init__(self, api: RosterApiClient) -> None:
        self._api = api

    def fetch_statuses(self, ids: Iterable[Any]) -> StatusMap:
        """One status request for the whole id set of a page."""
        id_list = list(dict.fromkeys(ids))
        if not id_list:
            return {}
        body = self._api.client_statuses(id_list)
        if not isinstance(body, list):
            raise EnrichmentError(
                f"Unexpected status payload: {type(body).__name__}"
            )
        statuses: StatusMap = {}
        for entry in body:
            if isinstance(entry, dict) and entry.get("id") is not None:
                statuses[entry["id"]] = entry.get("status")
        missing = len(id_list) - sum(1 for i in id_list if statuses.get(i))
        if missing:
            logger.debug("%d ids without status, defaulting to Unknown", missing)
        return statuses

    @staticmethod
    def merge(records: Sequence[ClientRecord], statuses: StatusMap) -> list[ExportRow]:
        return [ExportRow.merge(record, statuses) for record in records]

    def enrich(self, records: Sequence[ClientRecord]) -> list[ExportRow]:
        return self.merge(records, self.fetch_statuses(r.id for r in records))
