# crm/hubspot/responses.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _Lenient(BaseModel):
    # HubSpot adds fields over time; only the ones we read are declared.
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ResourceRecord(_Lenient):
    """Single object as returned by create / get / update."""

    id: int
    properties: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("properties", mode="before")
    @classmethod
    def null_properties(cls, value: Any) -> Any:
        return {} if value is None else value


class SearchResult(_Lenient):
    id: str
    properties: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    archived: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def id_as_text(cls, value: Any) -> Any:
        # search results carry the id as "123" or 123
        return str(value) if isinstance(value, int) and not isinstance(value, bool) else value

    @field_validator("properties", mode="before")
    @classmethod
    def null_properties(cls, value: Any) -> Any:
        return {} if value is None else value


class PagingLink(_Lenient):
    after: Optional[str] = None
    link: Optional[str] = None


class Paging(_Lenient):
    next: Optional[PagingLink] = None


class SearchPage(_Lenient):
    results: List[SearchResult] = Field(default_factory=list)
    paging: Optional[Paging] = None
    total: Optional[int] = None

    @field_validator("results", mode="before")
    @classmethod
    def null_results(cls, value: Any) -> Any:
        return [] if value is None else value

    def next_after(self) -> Optional[str]:
        """Cursor for the following page, or None when this is the last one."""
        if self.paging is None or self.paging.next is None:
            return None
        nxt = self.paging.next.after
        return nxt if isinstance(nxt, str) and nxt else None
