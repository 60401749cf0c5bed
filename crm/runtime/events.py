"""
Progress events from the engine to whatever hosts it.

Nothing in this module prints. A host (the CLI, a scheduler, a test)
installs one emitter, a callable taking a RuntimeEvent; until it does,
`emit()` drops every event.

  from crm.runtime.events import emit

  emit("message", "http.request.start", resource="companies", operation="create", method="POST")
  emit("count", "paging.done", resource="deals", operation="search", count=250, pages=3)
"""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, Optional

LEVELS = ("debug", "info", "warn", "error")


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class RuntimeEvent:
    type: str  # "message" | "count"
    message: str
    resource: Optional[str] = None
    operation: Optional[str] = None
    count: Optional[int] = None
    level: str = "info"
    fields: Dict[str, Any] = field(default_factory=dict)
    ts: str = field(default_factory=_utc_now)

    @property
    def label(self) -> str:
        """`companies.create`, `deals`, or `crm` when the event has no resource."""
        base = self.resource or "crm"
        return f"{base}.{self.operation}" if self.operation else base


EventEmitter = Callable[[RuntimeEvent], None]

_current: Optional[EventEmitter] = None


def set_emitter(fn: Optional[EventEmitter]) -> None:
    """Install (or with None, remove) the process-wide emitter."""
    global _current
    _current = fn


def get_emitter() -> Optional[EventEmitter]:
    return _current


@contextmanager
def emitter_scope(fn: Optional[EventEmitter]) -> Iterator[None]:
    """Use `fn` inside the block; whatever was installed before comes back afterwards."""
    previous = get_emitter()
    set_emitter(fn)
    try:
        yield
    finally:
        set_emitter(previous)


def _build(event_type: str, message: str, level: str, **kwargs: Any) -> RuntimeEvent:
    lvl = str(level).strip().lower()
    return RuntimeEvent(
        type=str(event_type),
        message=str(message),
        level=lvl if lvl in LEVELS else "info",
        **kwargs,
    )


def emit(
    event_type: str,
    message: str,
    *,
    resource: Optional[str] = None,
    operation: Optional[str] = None,
    count: Optional[int] = None,
    level: str = "info",
    **fields: Any,
) -> None:
    fn = _current
    if fn is None:
        return

    event = _build(
        event_type,
        message,
        level,
        resource=resource,
        operation=operation,
        count=count,
        fields=dict(fields),
    )
    try:
        fn(event)
    except Exception:
        # a failing emitter must not fail the operation that reported progress
        return
