# crm/hubspot/constants.py
from __future__ import annotations

HUBSPOT_BASE_URL = "https://api.hubapi.com"

OBJECTS_PATH = "/crm/v3/objects"

JSON_CONTENT_TYPE = "application/json; charset=UTF-8"

# Search page size when none is configured. HubSpot rejects anything above 100.
DEFAULT_SEARCH_LIMIT = 10
PROVIDER_MAX_SEARCH_LIMIT = 100

# Upper bound on pages followed by one fetch-all search.
DEFAULT_MAX_SEARCH_PAGES = 10_000

# timeouts: (connect, read)
DEFAULT_TIMEOUT = (10, 60)

# Local artifact store root when no storage_dir is configured.
DEFAULT_STORAGE_DIR = ".crm/artifacts"

ARTIFACT_SUFFIX = ".jsonl"
