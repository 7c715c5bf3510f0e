from __future__ import annotations

import pytest

from roster_export.config import ApiConfig, SheetConfig


@pytest.fixture
def api_config() -> ApiConfig:
    return ApiConfig(base_url="http://api.test/", principal="exporter", timeout_s=5)


@pytest.fixture
def sheet_config() -> SheetConfig:
    return SheetConfig(spreadsheet_id="sheet-123", sheet_name="Clients")


@pytest.fixture
def sleeps() -> list[float]:
    """Collects retry delays instead of sleeping."""
    return []
