"""SearchAggregator: cursor pagination and the fetch_all_pages flag."""
import pytest

from crm.hubspot import COMPANIES, ConfigurationError, Credentials, ProviderCallError, SearchQuery
from crm.hubspot.client import HubSpotClient
from crm.hubspot.request_spec import RequestSpecBuilder
from crm.hubspot.search import SearchAggregator

from .conftest import COMPANIES_URL, search_page

SEARCH_URL = f"{COMPANIES_URL}/search"
CREDS = Credentials(api_key="k")


def _pages(n):
    """n single-record pages, each pointing at the next; the last has no cursor."""
    return [{"json": search_page([i], after=str(i) if i < n else None)} for i in range(1, n + 1)]


@pytest.fixture
def aggregator(store):
    return SearchAggregator(RequestSpecBuilder(COMPANIES), HubSpotClient(), store)


class TestFetchAllPages:
    def test_single_page_when_flag_off(self, requests_mock, aggregator):
        requests_mock.post(SEARCH_URL, json=search_page([1, 2], after="2"))
        out = aggregator.run(SearchQuery(query="acme"), CREDS)
        assert requests_mock.call_count == 1
        assert out.total == 2
        assert out.pages == 1

    def test_follows_cursor_until_exhausted(self, requests_mock, aggregator, store):
        requests_mock.post(SEARCH_URL, _pages(5))
        out = aggregator.run(SearchQuery(limit=1, fetch_all_pages=True), CREDS)
        assert requests_mock.call_count == 5
        assert out.total == 5
        assert out.pages == 5
        assert [r["hs_object_id"] for r in store.read(out.uri)] == ["1", "2", "3", "4", "5"]

    def test_cursor_sent_on_following_pages(self, requests_mock, aggregator):
        requests_mock.post(SEARCH_URL, _pages(3))
        aggregator.run(SearchQuery(limit=1, query="x", fetch_all_pages=True), CREDS)
        bodies = [r.json() for r in requests_mock.request_history]
        assert "after" not in bodies[0]
        assert [b.get("after") for b in bodies[1:]] == ["1", "2"]
        assert all(b["query"] == "x" and b["limit"] == 1 for b in bodies)

    def test_initial_after_is_honoured(self, requests_mock, aggregator):
        requests_mock.post(SEARCH_URL, json=search_page([7]))
        aggregator.run(SearchQuery(after="6"), CREDS)
        assert requests_mock.last_request.json()["after"] == "6"

    def test_flag_accepts_strings(self, requests_mock, aggregator):
        requests_mock.post(SEARCH_URL, _pages(2))
        out = aggregator.run(SearchQuery(fetch_all_pages="true"), CREDS)
        assert out.pages == 2

    def test_bad_flag(self, aggregator):
        with pytest.raises(ConfigurationError) as exc:
            aggregator.run(SearchQuery(fetch_all_pages="maybe"), CREDS)
        assert exc.value.field == "fetch_all_pages"

    def test_empty_result(self, requests_mock, aggregator, store):
        requests_mock.post(SEARCH_URL, json={"total": 0, "results": []})
        out = aggregator.run(SearchQuery(fetch_all_pages=True), CREDS)
        assert out.total == 0
        assert list(store.read(out.uri)) == []

    def test_numeric_ids_in_results(self, requests_mock, aggregator, store):
        requests_mock.post(SEARCH_URL, json={"results": [{"id": 123, "properties": {"name": "Acme"}}]})
        out = aggregator.run(SearchQuery(), CREDS)
        assert out.total == 1
        assert list(store.read(out.uri)) == [{"name": "Acme"}]

    def test_credentials_resolved_per_page(self, requests_mock, store):
        tokens = iter(["t1", "t2", "t3"])
        builder = RequestSpecBuilder(COMPANIES, render=lambda v: next(tokens) if v == "${TOKEN}" else v)
        requests_mock.post(SEARCH_URL, _pages(3))
        SearchAggregator(builder, HubSpotClient(), store).run(
            SearchQuery(fetch_all_pages=True), Credentials(api_key="${TOKEN}")
        )
        auth = [r.headers["Authorization"] for r in requests_mock.request_history]
        assert auth == ["Bearer t1", "Bearer t2", "Bearer t3"]

    def test_failed_page_aborts_without_artifact(self, requests_mock, aggregator, tmp_path):
        requests_mock.post(SEARCH_URL, [{"json": search_page([1], after="1")}, {"status_code": 500, "text": "boom"}])
        with pytest.raises(ProviderCallError):
            aggregator.run(SearchQuery(fetch_all_pages=True), CREDS)
        assert not (tmp_path / "artifacts").exists()


class TestPaginationGuards:
    def test_repeated_cursor_stops(self, requests_mock, aggregator, events):
        requests_mock.post(SEARCH_URL, [
            {"json": search_page([1], after="A")},
            {"json": search_page([2], after="B")},
            {"json": search_page([3], after="A")},
        ])
        out = aggregator.run(SearchQuery(fetch_all_pages=True), CREDS)
        assert requests_mock.call_count == 3
        assert out.total == 3
        stopped = [e for e in events if e.message == "paging.stopped"]
        assert stopped[0].fields["reason"] == "repeated_cursor"

    def test_max_pages_stops(self, requests_mock, store, events):
        requests_mock.post(SEARCH_URL, _pages(10))
        agg = SearchAggregator(RequestSpecBuilder(COMPANIES), HubSpotClient(), store, max_pages=3)
        out = agg.run(SearchQuery(fetch_all_pages=True), CREDS)
        assert requests_mock.call_count == 3
        assert out.pages == 3
        assert [e.fields["reason"] for e in events if e.message == "paging.stopped"] == ["max_pages"]

    def test_done_and_stored_events(self, requests_mock, aggregator, events):
        requests_mock.post(SEARCH_URL, _pages(2))
        out = aggregator.run(SearchQuery(fetch_all_pages=True), CREDS)
        done = next(e for e in events if e.message == "paging.done")
        stored = next(e for e in events if e.message == "artifact.stored")
        assert (done.count, done.fields["pages"]) == (2, 2)
        assert stored.fields["uri"] == out.uri
