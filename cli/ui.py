from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from crm.hubspot import (
    ConfigurationError,
    ProviderCallError,
    RecordOutput,
    SearchOutput,
    SerializationError,
    StorageError,
    TransportError,
)
from crm.hubspot.redaction import redact_text
from crm.runtime.events import RuntimeEvent

BODY_PREVIEW = 800


def is_htmlish(body_preview: str) -> bool:
    head = (body_preview or "").lstrip()[:200].lower()
    return head.startswith("<!doctype html") or "<html" in head


def _panel(title: str, text: str = "", detail: str = "") -> Panel:
    parts = [f"[red]{title}[/red]"]
    if text:
        parts.append(escape(text))
    if detail:
        parts.append(f"\n[dim]{escape(detail[:BODY_PREVIEW])}[/dim]")
    return Panel("\n".join(parts), style="red")


def _provider_panel(e: ProviderCallError) -> Panel:
    status = e.status_code
    body = redact_text(e.body or "", max_len=BODY_PREVIEW)

    if is_htmlish(body):
        return _panel("HTML Response Error", f"Endpoint returned HTML instead of JSON (HTTP {status}).", body)
    if status in (401, 403):
        return _panel(f"Auth Error {status}", "Check the API key / OAuth token and its CRM scopes.", body)
    if status == 404:
        return _panel("Not Found (404)", f"{e.method} {e.url}", body)
    if status == 429:
        return _panel("Rate Limit (429)", "Rate limited by HubSpot. Wait and run the operation again.", body)
    return _panel(f"API Error {status}", f"{e.method} {e.url}", body)


def render_error_panel(e: Exception) -> Panel:
    if isinstance(e, ConfigurationError):
        title = f"Configuration Error ({e.field})" if e.field else "Configuration Error"
        return _panel(title, str(e))
    if isinstance(e, TransportError):
        return _panel("Network Error", str(e), "No HTTP response was received; nothing was retried.")
    if isinstance(e, ProviderCallError):
        return _provider_panel(e)
    if isinstance(e, SerializationError):
        return _panel("Unexpected Response", str(e), e.body_excerpt or "")
    if isinstance(e, StorageError):
        return _panel("Storage Error", str(e))
    return _panel("Error", str(e))


def truncate(s: Any, n: int = 96) -> str:
    text = str(s)
    return text if len(text) <= n else text[: n - 1] + "…"


# field name -> max rendered width; order is display order
_EVENT_FIELDS: Dict[str, int] = {
    "method": 10,
    "url": 160,
    "status": 10,
    "elapsed_ms": 12,
    "items_count": 12,
    "page": 10,
    "pages": 10,
    "limit": 10,
    "reason": 40,
    "uri": 160,
    "error": 180,
}


def format_event_line(ev: RuntimeEvent, *, include_level: bool = False) -> str:
    """One line per event: `[label] message  key=value ...`."""
    parts: List[str] = []
    if include_level and ev.level != "info":
        parts.append(f"[{ev.level}]")
    parts.append(f"[{ev.label}] {ev.message}")

    fields = ev.fields or {}
    for key, width in _EVENT_FIELDS.items():
        value = fields.get(key)
        if value is not None:
            parts.append(f"{key}={truncate(value, width)}")
        if key == "items_count" and isinstance(ev.count, int):
            parts.append(f"count={ev.count}")

    return "  ".join(parts)


def _summary(rows: Mapping[str, Any], title: str) -> Panel:
    table = Table(show_header=False, box=None)
    for label, value in rows.items():
        table.add_row(f"{label}:", str(value))
    return Panel(table, title=title, style="green")


def render_record_output(resource: str, operation: str, out: RecordOutput) -> Panel:
    return _summary({"Record ID": out.id, "Artifact": out.uri}, f"{resource} {operation}")


def render_search_output(resource: str, out: SearchOutput) -> Panel:
    return _summary({"Records": out.total, "Pages": out.pages, "Artifact": out.uri}, f"{resource} search")


def render_records_table(records: Iterable[Mapping[str, Any]], *, limit: int = 10) -> Table:
    """First `limit` property bags; columns are the union of keys in first-seen order."""
    rows: List[Mapping[str, Any]] = []
    for record in records:
        if len(rows) >= limit:
            break
        rows.append(record)

    columns: List[str] = list(dict.fromkeys(k for r in rows for k in r))
    cell: Callable[[Any], str] = lambda v: "" if v is None else escape(truncate(v))  # noqa: E731

    table = Table(title=f"First {len(rows)} record(s)")
    for c in columns:
        table.add_column(c, overflow="fold")
    for r in rows:
        table.add_row(*[cell(r.get(c)) for c in columns])
    return table
