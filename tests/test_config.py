import pytest

from roster_export import config as config_module
from roster_export.config import load_config

ENV_VARS = [
    "URL_API", "USER_NAME", "SPREADSHEET_ID", "SHEET_NAME", "GOOGLE_SA_KEY_FILE",
    "API_TIMEOUT_S", "PAGE_SIZE", "WRITE_BATCH_SIZE", "WRITE_MAX_ATTEMPTS",
    "WRITE_RETRY_DELAY_S", "WRITE_RETRY_BACKOFF", "DUPLICATE_POLICY", "STOP_ON_SHORT_PAGE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.setattr(config_module, "load_dotenv", lambda: None)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("URL_API", "https://api.example.com/v1")
    monkeypatch.setenv("USER_NAME", "exporter")
    monkeypatch.setenv("SPREADSHEET_ID", "sheet-123")


def test_defaults():
    cfg = load_config()
    assert cfg.api.base_url == "https://api.example.com/v1/"
    assert cfg.api.principal == "exporter"
    assert cfg.sheet.spreadsheet_id == "sheet-123"
    assert cfg.sheet.sheet_name == "Sheet1"
    assert cfg.sheet.credentials_path is None
    assert cfg.page_size == 1000
    assert cfg.batch_size == 1000
    assert cfg.retry.max_attempts == 5
    assert cfg.retry.delay_seconds == 5.0
    assert cfg.retry.backoff == "fixed"
    assert cfg.duplicate_policy == "append"
    assert cfg.stop_on_short_page is False


def test_overrides(monkeypatch):
    monkeypatch.setenv("SHEET_NAME", "Clients")
    monkeypatch.setenv("GOOGLE_SA_KEY_FILE", "/secrets/sa.json")
    monkeypatch.setenv("WRITE_BATCH_SIZE", "250")
    monkeypatch.setenv("WRITE_RETRY_BACKOFF", "Exponential")
    monkeypatch.setenv("DUPLICATE_POLICY", "dedupe")
    monkeypatch.setenv("STOP_ON_SHORT_PAGE", "yes")

    cfg = load_config()

    assert cfg.sheet.sheet_name == "Clients"
    assert cfg.sheet.credentials_path == "/secrets/sa.json"
    assert cfg.batch_size == 250
    assert cfg.retry.backoff == "exponential"
    assert cfg.duplicate_policy == "dedupe"
    assert cfg.stop_on_short_page is True


@pytest.mark.parametrize("name", ["URL_API", "USER_NAME", "SPREADSHEET_ID"])
def test_required_variables(monkeypatch, name):
    monkeypatch.delenv(name)
    with pytest.raises(ValueError, match=name):
        load_config()


@pytest.mark.parametrize("name,value", [
    ("DUPLICATE_POLICY", "merge"),
    ("WRITE_RETRY_BACKOFF", "random"),
    ("PAGE_SIZE", "0"),
])
def test_invalid_values_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        load_config()


def test_secret_references_are_resolved(monkeypatch):
    monkeypatch.setenv("SPREADSHEET_ID", "gcp-secret://roster-sheet")
    monkeypatch.setattr(
        config_module, "resolve_secret",
        lambda v: "resolved-sheet" if v.startswith("gcp-secret://") else v,
    )
    assert load_config().sheet.spreadsheet_id == "resolved-sheet"
