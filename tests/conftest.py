"""Shared fixtures for the CRM object client tests.

Provides:
  - A ResultStore rooted in pytest's tmp_path
  - Settings pointing artifacts at that store
  - Credentials with a static API key
  - An event recorder installed as the runtime emitter
All HTTP is mocked with requests_mock; no real API calls.
"""
from __future__ import annotations

from typing import List

import pytest

from crm.hubspot import Credentials, HubSpotSettings, LocalStorage, ResultStore, client_for
from crm.runtime.events import RuntimeEvent, emitter_scope

BASE_URL = "https://api.hubapi.com"
COMPANIES_URL = f"{BASE_URL}/crm/v3/objects/companies"
CONTACTS_URL = f"{BASE_URL}/crm/v3/objects/contacts"
DEALS_URL = f"{BASE_URL}/crm/v3/objects/deals"
TICKETS_URL = f"{BASE_URL}/crm/v3/objects/tickets"


def search_page(ids, after=None):
    """A HubSpot search response body with one result per id."""
    body = {
        "total": len(ids),
        "results": [{"id": str(i), "properties": {"hs_object_id": str(i), "name": f"record {i}"}} for i in ids],
    }
    if after is not None:
        body["paging"] = {"next": {"after": after, "link": f"?after={after}"}}
    return body


@pytest.fixture
def store(tmp_path):
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    return ResultStore(LocalStorage(str(tmp_path / "artifacts")), scratch_dir=str(scratch))


@pytest.fixture
def settings(tmp_path):
    return HubSpotSettings(storage_dir=str(tmp_path / "artifacts"))


@pytest.fixture
def creds():
    return Credentials(api_key="test-key")


@pytest.fixture
def events():
    recorded: List[RuntimeEvent] = []
    with emitter_scope(recorded.append):
        yield recorded


@pytest.fixture
def companies(settings, store):
    return client_for("companies", settings=settings, store=store)


@pytest.fixture
def deals(settings, store):
    return client_for("deals", settings=settings, store=store)
