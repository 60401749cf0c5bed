# crm/hubspot/search.py
from __future__ import annotations

import enum
import logging
from typing import Any, Dict, List, Set, Tuple

from .client import HubSpotClient
from .constants import DEFAULT_MAX_SEARCH_PAGES
from .credentials import Credentials
from .errors import ConfigurationError
from .events import paging_done, paging_start, paging_stopped, records_stored
from .models import SearchOutput, SearchQuery
from .rendering import ABSENT, render_value
from .request_spec import RequestSpecBuilder
from .responses import SearchPage
from .storage import ResultStore

logger = logging.getLogger(__name__)


class SearchState(enum.Enum):
    FETCHING = "fetching"
    DONE = "done"


def _as_flag(value: Any) -> bool:
    if value is ABSENT:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        v = value.strip().lower()
        if v in ("1", "true", "yes", "y", "on"):
            return True
        if v in ("", "0", "false", "no", "n", "off"):
            return False
    if isinstance(value, int):
        return bool(value)
    raise ConfigurationError(f"fetch_all_pages must be a boolean, got {value!r}", field="fetch_all_pages")


class SearchAggregator:
    """
    Drives one search invocation: first page, then (when fetch_all_pages is
    set) every page the provider's `paging.next.after` cursor points at.

    The loop also stops on a cursor already consumed in this invocation and
    after `max_pages` pages, logging a warning instead of failing.
    """

    def __init__(
        self,
        builder: RequestSpecBuilder,
        client: HubSpotClient,
        store: ResultStore,
        *,
        max_pages: int = DEFAULT_MAX_SEARCH_PAGES,
    ):
        self.builder = builder
        self.client = client
        self.store = store
        self.max_pages = max(1, int(max_pages))

    @property
    def resource(self) -> str:
        return self.builder.resource.name

    def collect(self, query: SearchQuery, credentials: Credentials) -> Tuple[List[Dict[str, Any]], int]:
        """Run the pagination loop; returns (aggregated property bags, pages fetched)."""
        body = self.builder.search_body(query)
        fetch_all = _as_flag(render_value(self.builder.render, query.fetch_all_pages, field="fetch_all_pages"))

        records: List[Dict[str, Any]] = []
        seen: Set[str] = set()
        if "after" in body:
            seen.add(body["after"])
        pages = 0
        state = SearchState.FETCHING

        while state is SearchState.FETCHING:
            pages += 1
            paging_start(resource=self.resource, page=pages, limit=body.get("limit"))
            # fresh spec (and Authorization header) for every page
            spec = self.builder.search(credentials, body)
            page = self.client.call(spec, resource=self.resource, operation="search", response_model=SearchPage)

            for result in page.results:
                records.append(dict(result.properties))

            next_after = page.next_after()
            if not fetch_all or next_after is None:
                state = SearchState.DONE
            elif next_after in seen:
                logger.warning(
                    "%s search: provider repeated cursor %r after %d page(s); stopping",
                    self.resource,
                    next_after,
                    pages,
                )
                paging_stopped(resource=self.resource, pages=pages, reason="repeated_cursor")
                state = SearchState.DONE
            elif pages >= self.max_pages:
                logger.warning("%s search: reached max_pages=%d; stopping", self.resource, self.max_pages)
                paging_stopped(resource=self.resource, pages=pages, reason="max_pages")
                state = SearchState.DONE
            else:
                seen.add(next_after)
                body = {**body, "after": next_after}

        paging_done(resource=self.resource, pages=pages, total=len(records))
        return records, pages

    def run(self, query: SearchQuery, credentials: Credentials) -> SearchOutput:
        records, pages = self.collect(query, credentials)
        uri = self.store.store(records)
        records_stored(resource=self.resource, operation="search", count=len(records), uri=uri)
        logger.info("Retrieved %d %s record(s) in %d page(s)", len(records), self.resource, pages)
        return SearchOutput(total=len(records), uri=uri, pages=pages)
