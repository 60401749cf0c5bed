# crm/hubspot/events.py
from __future__ import annotations

from typing import Any, Dict, Optional

from crm.runtime.events import emit


def http_start(*, resource: str, operation: str, method: str, url: str, extra: Optional[Dict[str, Any]] = None) -> None:
    emit(
        "message",
        "http.request.start",
        resource=resource,
        operation=operation,
        method=method,
        url=url,
        **(extra or {}),
    )


def http_ok(
    *,
    resource: str,
    operation: str,
    method: str,
    url: str,
    status: int,
    elapsed_ms: int,
    items_count: Optional[int] = None,
) -> None:
    fields: Dict[str, Any] = {"method": method, "url": url, "status": status, "elapsed_ms": elapsed_ms}
    if isinstance(items_count, int):
        fields["items_count"] = items_count
    emit("message", "http.request.ok", resource=resource, operation=operation, **fields)


def http_error(
    *,
    resource: str,
    operation: str,
    method: str,
    url: str,
    status: Optional[int],
    error: str,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    fields: Dict[str, Any] = dict(extra or {})
    fields.update({"method": method, "url": url, "status": status, "error": error})
    emit("message", "http.request.error", resource=resource, operation=operation, level="error", **fields)


def paging_start(*, resource: str, page: int, limit: Any) -> None:
    emit("message", "paging.page.start", resource=resource, operation="search", page=page, limit=limit)


def paging_done(*, resource: str, pages: int, total: int) -> None:
    emit("count", "paging.done", resource=resource, operation="search", count=total, pages=pages)


def paging_stopped(*, resource: str, pages: int, reason: str) -> None:
    emit("message", "paging.stopped", resource=resource, operation="search", level="warn", pages=pages, reason=reason)


def records_stored(*, resource: str, operation: str, count: int, uri: str) -> None:
    emit("count", "artifact.stored", resource=resource, operation=operation, count=count, uri=uri)
