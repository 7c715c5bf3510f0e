import pytest

from roster_export.enricher import StatusEnricher
from roster_export.errors import EnrichmentError
from roster_export.models import ClientRecord, UNKNOWN_STATUS
from tests.fakes import FakeRosterApi, make_client


def _records(ids):
    return [ClientRecord.from_api(make_client(i)) for i in ids]


def test_single_status_request_per_page():
    api = FakeRosterApi([], statuses={1: "Active", 2: "Lead", 3: "Churned"})
    rows = StatusEnricher(api).enrich(_records([1, 2, 3]))

    assert api.status_calls == [[1, 2, 3]]
    assert [r.status for r in rows] == ["Active", "Lead", "Churned"]


def test_missing_statuses_resolve_to_unknown():
    api = FakeRosterApi([], statuses={2: "Lead"})
    rows = StatusEnricher(api).enrich(_records([1, 2, 3]))

    assert [r.status for r in rows] == [UNKNOWN_STATUS, "Lead", UNKNOWN_STATUS]
    assert all(r.status for r in rows)


def test_empty_id_set_skips_remote_call():
    api = FakeRosterApi([])
    assert StatusEnricher(api).fetch_statuses([]) == {}
    assert api.status_calls == []


def test_malformed_status_payload_raises():
    class BadApi(FakeRosterApi):
        def client_statuses(self, user_ids):
            return {"error": "nope"}

    with pytest.raises(EnrichmentError):
        StatusEnricher(BadApi([])).fetch_statuses([1])


def test_entries_without_id_are_ignored():
    class PartialApi(FakeRosterApi):
        def client_statuses(self, user_ids):
            return [{"status": "Ghost"}, {"id": 1, "status": "Active"}]

    assert StatusEnricher(PartialApi([])).fetch_statuses([1, 2]) == {1: "Active"}
