"""
Runtime package: host-facing progress events.

Exports:
- RuntimeEvent, emit, set_emitter, emitter_scope
"""
from __future__ import annotations

from .events import RuntimeEvent, emit, emitter_scope, get_emitter, set_emitter

__all__ = [
    "RuntimeEvent",
    "emit",
    "emitter_scope",
    "get_emitter",
    "set_emitter",
]
