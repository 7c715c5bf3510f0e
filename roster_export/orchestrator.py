"""Drives fetch -> enrich -> accumulate, then hands the full set to the writer."""

from __future__ import annotations

import enum
import logging
import time
import uuid
from typing import Any

from roster_export.enricher import StatusEnricher
from roster_export.fetcher import PaginatedFetcher
from roster_export.models import ExportRow
from roster_export.writer import TabularWriter

logger = logging.getLogger("roster_export.orchestrator")


class SyncState(enum.Enum):
    FETCHING = "FETCHING"
    DONE = "DONE"


class SyncOrchestrator:
    """Single-run, single-writer export pipeline.

    Nothing is written unless pagination and enrichment finish for every
    page. ``duplicate_policy`` decides what happens to an id seen on more
    than one page: ``append`` keeps every occurrence, ``dedupe`` keeps the
    first.
    """

    def __init__(
        self,
        fetcher: PaginatedFetcher,
        enricher: StatusEnricher,
        writer: TabularWriter,
        duplicate_policy: str = "append",
    ) -> None:
        if duplicate_policy not in ("append", "dedupe"):
            raise ValueError(f"Unknown duplicate policy {duplicate_policy!r}")
        self._fetcher = fetcher
        self._enricher = enricher
        self._writer = writer
        self._duplicate_policy = duplicate_policy
        self.state = SyncState.DONE
        self.pages = 0
        self.duplicates_dropped = 0

    def collect(self) -> list[ExportRow]:
        """Walk every page and return the merged rows in fetch order."""
        rows: list[ExportRow] = []
        seen: set[Any] = set()
        self.pages = 0
        self.duplicates_dropped = 0
        self.state = SyncState.FETCHING

        try:
            for page in self._fetcher.iter_pages():
                self.pages += 1
                for row in self._enricher.enrich(page):
                    if self._duplicate_policy == "dedupe":
                        if row.record.id in seen:
                            self.duplicates_dropped += 1
                            continue
                        seen.add(row.record.id)
                    rows.append(row)
        finally:
            self.state = SyncState.DONE

        if self.duplicates_dropped:
            logger.warning("Dropped %d duplicate client ids", self.duplicates_dropped)
        logger.info(
            "Collected %d rows from %d pages", len(rows), self.pages,
            extra={"records": len(rows), "page": self.pages},
        )
        return rows

    def run(self) -> dict[str, int]:
        """Run the export. Returns counts for the run summary."""
        run_id = str(uuid.uuid4())
        started = time.monotonic()
        logger.info("Export started", extra={"run_id": run_id})
        try:
            rows = self.collect()
            result = self._writer.write(rows)
        except Exception as exc:
            logger.error(
                "Export failed: %s", exc,
                extra={"run_id": run_id, "duration_s": round(time.monotonic() - started, 3)},
            )
            raise

        summary = {
            "records": len(rows),
            "pages": self.pages,
            "duplicates_dropped": self.duplicates_dropped,
            "rows_written": result.rows_written,
            "batches": result.batches,
            "next_row": result.next_row,
        }
        logger.info(
            "Export complete",
            extra={
                "run_id": run_id,
                "records": result.rows_written,
                "duration_s": round(time.monotonic() - started, 3),
            },
        )
        return summary
