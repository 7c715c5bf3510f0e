"""Exception taxonomy for an export run.

Everything except RateLimitedError is fatal to the run. RateLimitedError is
only ever raised by the destination and is consumed by the writer's retry
loop; when the budget runs out it is promoted to RateLimitExhaustedError.
"""

from __future__ import annotations


class ExportError(RuntimeError):
    """Base class for export failures."""


class AuthenticationError(ExportError):
    """Login failed or returned no token."""


class FetchError(ExportError):
    """A roster page could not be fetched or was malformed."""


class EnrichmentError(ExportError):
    """Status lookup for a page failed or was malformed."""


class DestinationError(ExportError):
    """The sheet rejected a capacity, header or data request."""


class RateLimitedError(DestinationError):
    """The destination asked us to slow down (HTTP 429)."""


class RateLimitExhaustedError(DestinationError):
    def __init__(self, start_row: int, end_row: int, attempts: int) -> None:
        self.start_row = start_row
        self.end_row = end_row
        self.attempts = attempts
        super().__init__(
            f"Failed to write rows {start_row}-{end_row}: still rate limited "
            f"after {attempts} attempts"
        )
