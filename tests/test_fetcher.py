import math

import pytest

from roster_export.errors import FetchError
from roster_export.fetcher import PaginatedFetcher
from tests.fakes import FakeRosterApi, make_client


@pytest.mark.parametrize("total,limit", [(0, 1000), (1, 1000), (2000, 1000), (2500, 1000), (7, 3)])
def test_issues_one_call_per_page_plus_final_empty(total, limit):
    api = FakeRosterApi([make_client(i) for i in range(total)])
    fetcher = PaginatedFetcher(api, page_size=limit)

    records = [r for page in fetcher.iter_pages() for r in page]

    assert len(api.list_calls) == math.ceil(total / limit) + 1
    assert [offset for _, offset in api.list_calls] == [
        i * limit for i in range(len(api.list_calls))
    ]
    assert [r.id for r in records] == list(range(total))


def test_stop_on_short_page_skips_trailing_request():
    api = FakeRosterApi([make_client(i) for i in range(2500)])
    fetcher = PaginatedFetcher(api, page_size=1000, stop_on_short_page=True)

    pages = list(fetcher.iter_pages())

    assert [len(p) for p in pages] == [1000, 1000, 500]
    assert len(api.list_calls) == 3


def test_non_list_body_is_a_fetch_error_not_end_of_data():
    class NullApi(FakeRosterApi):
        def list_clients(self, limit, offset):
            return None

    fetcher = PaginatedFetcher(NullApi([]), page_size=10)
    with pytest.raises(FetchError):
        list(fetcher.iter_pages())


def test_transport_errors_propagate():
    class BrokenApi(FakeRosterApi):
        def list_clients(self, limit, offset):
            if offset:
                raise FetchError("boom")
            return super().list_clients(limit, offset)

    fetcher = PaginatedFetcher(BrokenApi([make_client(i) for i in range(20)]), page_size=10)
    pages = fetcher.iter_pages()
    assert len(next(pages)) == 10
    with pytest.raises(FetchError, match="boom"):
        next(pages)


def test_rejects_non_positive_page_size():
    with pytest.raises(ValueError):
        PaginatedFetcher(FakeRosterApi([]), page_size=0)
