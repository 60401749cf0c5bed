"""
Public convenience exports for the crm package.

The HubSpot object client lives in `crm/hubspot/`.
The progress event bus lives in `crm/runtime/`.

This file keeps imports stable for callers:
  from crm import client_for, Credentials, SearchQuery
"""
from __future__ import annotations

from crm.hubspot import (  # noqa: F401
    ABSENT,
    Credentials,
    RecordDelete,
    RecordRead,
    RecordWrite,
    ResourceClient,
    SearchQuery,
    client_for,
)

__all__ = [
    "ABSENT",
    "Credentials",
    "RecordDelete",
    "RecordRead",
    "RecordWrite",
    "ResourceClient",
    "SearchQuery",
    "client_for",
]
