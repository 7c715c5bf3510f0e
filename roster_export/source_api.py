"""HTTP client for the source roster API."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

import requests

from roster_export.config import ApiConfig
from roster_export.errors import EnrichmentError, ExportError, FetchError

logger = logging.getLogger("roster_export.source_api")


class RosterApiClient:
    """Bearer-authenticated access to ``clients`` listing and status lookup."""

    def __init__(
        self,
        config: ApiConfig,
        token: str,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._base = config.base_url
        self._timeout = config.timeout_s
        self._session = session or requests.Session()
        # The login endpoint hands out the complete header value.
        self._session.headers.update({
            "Authorization": token,
            "Content-Type": "application/json",
        })

    def list_clients(self, limit: int, offset: int) -> Any:
        return self._request_json(
            "GET", "clients", FetchError,
            params={"limit": limit, "offset": offset},
        )

    def client_statuses(self, user_ids: Iterable[Any]) -> Any:
        return self._request_json(
            "POST", "clients", EnrichmentError,
            json={"userIds": list(user_ids)},
        )

    def _request_json(
        self,
        method: str,
        path: str,
        error_cls: type[ExportError],
        **kwargs: Any,
    ) -> Any:
        url = self._base + path
        try:
            resp = self._session.request(method, url, timeout=self._timeout, **kwargs)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as exc:
            raise error_cls(f"{method} {url} failed: {exc}") from exc
        except ValueError as exc:
            raise error_cls(f"{method} {url} returned invalid JSON") from exc
