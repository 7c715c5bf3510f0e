"""Credential provider: registers the principal and logs in for a token."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from roster_export.config import ApiConfig
from roster_export.errors import AuthenticationError

logger = logging.getLogger("roster_export.auth")

# The service reports an existing user either as an HTTP 400/409 or as a
# 200 body carrying {"statusCode": 400}.
_ALREADY_EXISTS = (400, 409)


class CredentialProvider:
    def __init__(self, config: ApiConfig, session: Optional[requests.Session] = None) -> None:
        self._base = config.base_url
        self._principal = config.principal
        self._timeout = config.timeout_s
        self._session = session or requests.Session()

    def register(self) -> bool:
        """Register the principal. Returns False if it already exists."""
        try:
            resp = self._session.post(
                self._base + "auth/registration",
                json={"username": self._principal},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise AuthenticationError(f"Registration request failed: {exc}") from exc

        body = _json_or_none(resp)
        body_status = body.get("statusCode") if isinstance(body, dict) else None
        if resp.status_code in _ALREADY_EXISTS or body_status in _ALREADY_EXISTS:
            logger.info("User %s already exists, skipping registration", self._principal)
            return False
        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            raise AuthenticationError(f"Registration failed: {exc}") from exc
        logger.info("Registered user %s", self._principal)
        return True

    def login(self) -> str:
        try:
            resp = self._session.post(
                self._base + "auth/login",
                json={"username": self._principal},
                timeout=self._timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise AuthenticationError(f"Login failed: {exc}") from exc

        body = _json_or_none(resp)
        token = body.get("token") if isinstance(body, dict) else None
        if not token:
            raise AuthenticationError("Login response did not contain a token")
        logger.info("Logged in as %s", self._principal)
        return token

    def acquire_token(self) -> str:
        self.register()
        return self.login()


def _json_or_none(resp: requests.Response):
    try:
        return resp.json()
    except ValueError:
        return None
