"""Configuration via environment variables with cloud-native secret support.

Supports:
  - Environment variables and .env files (local dev)
  - AWS Secrets Manager / GCP Secret Manager references for the principal
    and spreadsheet id (see roster_export.secrets)
  - Application Default Credentials when no service account key is given
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from roster_export.retry import BACKOFF_CHOICES, RetryPolicy
from roster_export.secrets import resolve_secret

DUPLICATE_POLICIES = ("append", "dedupe")


@dataclass(frozen=True)
class ApiConfig:
    base_url: str
    principal: str
    timeout_s: int = 30


@dataclass(frozen=True)
class SheetConfig:
    spreadsheet_id: str
    sheet_name: str = "Sheet1"
    credentials_path: Optional[str] = None  # None = use ADC / Workload Identity


@dataclass(frozen=True)
class ExportConfig:
    api: ApiConfig
    sheet: SheetConfig
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    page_size: int = 1000
    batch_size: int = 1000
    duplicate_policy: str = "append"
    stop_on_short_page: bool = False

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ValueError("page_size must be a positive integer")
        if self.batch_size <= 0:
            raise ValueError("batch_size must be a positive integer")
        if self.duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(
                f"duplicate_policy must be one of {DUPLICATE_POLICIES}, "
                f"got {self.duplicate_policy!r}"
            )


def _required(name: str) -> str:
    value = os.environ.get(name, "")
    if not value:
        raise ValueError(f"{name} environment variable is required")
    return value


def _flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _normalise_base_url(url: str) -> str:
    # Endpoints are joined as base + "clients", so keep exactly one slash.
    return url.rstrip("/") + "/"


def load_config() -> ExportConfig:
    """Load configuration from environment variables (and .env if present)."""
    load_dotenv()

    api = ApiConfig(
        base_url=_normalise_base_url(_required("URL_API")),
        principal=resolve_secret(_required("USER_NAME")),
        timeout_s=int(os.environ.get("API_TIMEOUT_S", "30")),
    )

    sheet = SheetConfig(
        spreadsheet_id=resolve_secret(_required("SPREADSHEET_ID")),
        sheet_name=os.environ.get("SHEET_NAME", "Sheet1"),
        credentials_path=os.environ.get("GOOGLE_SA_KEY_FILE") or None,  # optional
    )

    backoff = os.environ.get("WRITE_RETRY_BACKOFF", "fixed").lower()
    if backoff not in BACKOFF_CHOICES:
        raise ValueError(
            f"WRITE_RETRY_BACKOFF must be one of {BACKOFF_CHOICES}, got {backoff!r}"
        )
    retry = RetryPolicy(
        max_attempts=int(os.environ.get("WRITE_MAX_ATTEMPTS", "5")),
        delay_seconds=float(os.environ.get("WRITE_RETRY_DELAY_S", "5")),
        backoff=backoff,
    )

    return ExportConfig(
        api=api,
        sheet=sheet,
        retry=retry,
        page_size=int(os.environ.get("PAGE_SIZE", "1000")),
        batch_size=int(os.environ.get("WRITE_BATCH_SIZE", "1000")),
        duplicate_policy=os.environ.get("DUPLICATE_POLICY", "append").lower(),
        stop_on_short_page=_flag("STOP_ON_SHORT_PAGE"),
    )
