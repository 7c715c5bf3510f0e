"""Capacity-aware, rate-limit tolerant bulk append into a tabular store."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from roster_export.errors import RateLimitedError, RateLimitExhaustedError
from roster_export.models import HEADER, ExportRow
from roster_export.retry import RetryPolicy

logger = logging.getLogger("roster_export.writer")

ProgressCallback = Callable[[int, int], None]


class TabularDestination(ABC):
    """A growable grid of rows, 1-based."""

    @abstractmethod
    def row_capacity(self) -> int:
        """Number of rows currently allocated in the grid."""

    @abstractmethod
    def add_rows(self, count: int) -> None:
        """Grow the grid by ``count`` rows."""

    @abstractmethod
    def used_row_count(self) -> int:
        """Number of rows already holding values."""

    @abstractmethod
    def write_values(self, start_row: int, values: list[list[Any]]) -> None:
        """Write a contiguous block of rows starting at ``start_row``.

        Raises RateLimitedError when the caller should back off and retry.
        """


@dataclass(frozen=True)
class WriteResult:
    header_written: bool
    start_row: int
    rows_written: int
    batches: int
    next_row: int


def batch_rows(rows: Sequence[Any], size: int) -> list[Sequence[Any]]:
    """Split rows into contiguous batches of at most ``size``."""
    return [rows[i : i + size] for i in range(0, len(rows), size)]


class TabularWriter:
    def __init__(
        self,
        destination: TabularDestination,
        retry: Optional[RetryPolicy] = None,
        batch_size: int = 1000,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be a positive integer")
        self._dest = destination
        self._retry = retry or RetryPolicy()
        self.batch_size = batch_size
        self._progress = progress

    def ensure_capacity(self, data_rows: int, existing_rows: int = 0) -> int:
        """Grow the grid so ``data_rows`` fit after the existing content. Returns rows added.

        An empty sheet also needs room for the header row, so the last row
        written is ``max(existing_rows, 1) + data_rows``.
        """
        current = self._dest.row_capacity()
        needed = max(existing_rows, 1) + data_rows
        if needed <= current:
            return 0
        to_add = needed - current
        logger.info("Sheet has %d rows, %d needed; extending", current, needed)
        self._dest.add_rows(to_add)
        return to_add

    def place_header(self, existing_rows: int) -> tuple[int, bool]:
        """Write the header into an empty sheet. Returns (first data row, header written)."""
        if existing_rows == 0:
            self._dest.write_values(1, [list(HEADER)])
            logger.info("Wrote header to empty sheet")
            return 2, True
        return existing_rows + 1, False

    def write(self, rows: Sequence[ExportRow]) -> WriteResult:
        existing = self._dest.used_row_count()
        self.ensure_capacity(len(rows), existing)
        start_row, header_written = self.place_header(existing)

        cursor = start_row
        written = 0
        batches = batch_rows(rows, self.batch_size)
        total = len(rows)
        started = time.monotonic()

        for number, batch in enumerate(batches, 1):
            values = [row.to_values() for row in batch]
            attempts = self._write_batch(cursor, values)
            logger.info(
                "Committed batch %d/%d at row %d (%d rows, %d attempt(s))",
                number, len(batches), cursor, len(values), attempts,
                extra={"batch": number, "start_row": cursor, "records": len(values)},
            )
            cursor += len(values)
            written += len(values)
            if self._progress is not None:
                self._progress(written, total)

        logger.info(
            "Wrote %d rows in %d batches", written, len(batches),
            extra={"records": written, "duration_s": round(time.monotonic() - started, 3)},
        )
        return WriteResult(
            header_written=header_written,
            start_row=start_row,
            rows_written=written,
            batches=len(batches),
            next_row=cursor,
        )

    def _write_batch(self, start_row: int, values: list[list[Any]]) -> int:
        """Write one batch at a fixed row, retrying only on rate limiting."""
        max_attempts = self._retry.max_attempts
        for attempt in range(max_attempts):
            try:
                self._dest.write_values(start_row, values)
                return attempt + 1
            except RateLimitedError:
                if attempt + 1 < max_attempts:
                    self._retry.wait(attempt)

        end_row = start_row + len(values) - 1
        logger.error(
            "Giving up on rows %d-%d after %d attempts", start_row, end_row, max_attempts,
            extra={"start_row": start_row, "attempt": max_attempts},
        )
        raise RateLimitExhaustedError(start_row, end_row, max_attempts)
