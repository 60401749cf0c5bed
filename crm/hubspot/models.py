# crm/hubspot/models.py
"""
Operation inputs and outputs.

Inputs are frozen dataclasses whose optional fields default to ABSENT, so
"not configured" is never confused with an explicit value. Raw values may be
templates; they are rendered by the client when the operation runs.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .credentials import Credentials
from .rendering import ABSENT


@dataclass(frozen=True)
class RecordWrite:
    """
    Create (record_id ABSENT) or update (record_id set) one record.

    fields: typed fields keyed by the resource's attr names (e.g. "first_name").
    additional_properties: raw HubSpot property keys, applied last.
    """
    credentials: Credentials
    fields: Mapping[str, Any] = field(default_factory=dict)
    additional_properties: Any = ABSENT
    record_id: Any = ABSENT


@dataclass(frozen=True)
class RecordRead:
    credentials: Credentials
    record_id: Any
    properties: Any = ABSENT


@dataclass(frozen=True)
class RecordDelete:
    credentials: Credentials
    record_id: Any


@dataclass(frozen=True)
class SearchQuery:
    query: Any = ABSENT
    filter_groups: Any = ABSENT
    properties: Any = ABSENT
    limit: Any = ABSENT
    after: Any = ABSENT
    sorts: Any = ABSENT
    fetch_all_pages: Any = False


@dataclass(frozen=True)
class RecordOutput:
    id: Optional[int]
    uri: str


@dataclass(frozen=True)
class SearchOutput:
    total: int
    uri: str
    pages: int = 1
