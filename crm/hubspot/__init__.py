"""
HubSpot CRM v3 object client.

Typical usage:
  from crm.hubspot import Credentials, RecordWrite, SearchQuery, client_for

  companies = client_for("companies")
  out = companies.create(RecordWrite(Credentials(api_key=key), fields={"name": "Acme", "domain": "acme.com"}))
  found = companies.search(SearchQuery(query="acme", fetch_all_pages=True), Credentials(api_key=key))
"""
from __future__ import annotations

from .config import HubSpotSettings, load_settings
from .credentials import Credentials, resolve_token
from .errors import (
    ConfigurationError,
    CrmError,
    ProviderCallError,
    SerializationError,
    StorageError,
    TransportError,
)
from .models import RecordDelete, RecordOutput, RecordRead, RecordWrite, SearchOutput, SearchQuery
from .operations import ResourceClient, client_for
from .rendering import ABSENT, env_render, identity_render
from .resources import COMPANIES, CONTACTS, DEALS, RESOURCES, TICKETS, Resource, get_resource
from .storage import LocalStorage, ResultStore

__all__ = [
    "ABSENT",
    "COMPANIES",
    "CONTACTS",
    "DEALS",
    "RESOURCES",
    "TICKETS",
    "ConfigurationError",
    "Credentials",
    "CrmError",
    "HubSpotSettings",
    "LocalStorage",
    "ProviderCallError",
    "RecordDelete",
    "RecordOutput",
    "RecordRead",
    "RecordWrite",
    "Resource",
    "ResourceClient",
    "ResultStore",
    "SearchOutput",
    "SearchQuery",
    "SerializationError",
    "StorageError",
    "TransportError",
    "client_for",
    "env_render",
    "get_resource",
    "identity_render",
    "load_settings",
    "resolve_token",
]
