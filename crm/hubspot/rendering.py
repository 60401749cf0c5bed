# crm/hubspot/rendering.py
"""
Value rendering.

Every configured value passes through a host-supplied `render` function before
it is used. The engine never knows how templating works; it only sees the
rendered value, or ABSENT when nothing was configured.
"""
from __future__ import annotations

import os
import re
from typing import Any, Callable, Dict, List, Mapping, Optional

from .errors import ConfigurationError


class _Absent:
    """Marker for a configuration value that was never supplied."""

    _instance: Optional["_Absent"] = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self):
        return (_Absent, ())


ABSENT: Any = _Absent()

Renderer = Callable[[Any], Any]

_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def identity_render(value: Any) -> Any:
    """Values are used as-is; None counts as not configured."""
    if value is None:
        return ABSENT
    return value


def env_render(value: Any, environ: Optional[Mapping[str, str]] = None) -> Any:
    """
    Expands `${NAME}` references in strings from the environment.

    Lists and dicts are rendered recursively. A string that expands to nothing
    is returned as "" (callers decide whether empty means absent).
    """
    env = os.environ if environ is None else environ
    if value is None or value is ABSENT:
        return ABSENT
    if isinstance(value, str):

        def _sub(m: "re.Match[str]") -> str:
            name = m.group(1)
            if name not in env:
                raise ConfigurationError(f"undefined variable {name!r} in {value!r}")
            return env[name]

        return _ENV_REF.sub(_sub, value)
    if isinstance(value, list):
        return [env_render(v, env) for v in value]
    if isinstance(value, dict):
        return {k: env_render(v, env) for k, v in value.items()}
    return value


def render_value(render: Renderer, value: Any, *, field: str) -> Any:
    """
    Renders one configured value.

    Unconfigured input short-circuits to ABSENT without calling the renderer.
    Renderer failures surface as ConfigurationError naming the field.
    """
    if value is ABSENT or value is None:
        return ABSENT
    try:
        out = render(value)
    except ConfigurationError as e:
        if e.field is None:
            e.field = field
        raise
    except Exception as e:
        raise ConfigurationError(f"failed to render {field}: {e}", field=field) from e
    return ABSENT if out is None else out


def render_string(render: Renderer, value: Any, *, field: str) -> Any:
    """Renders to a str, or ABSENT. Empty strings are returned as ""."""
    out = render_value(render, value, field=field)
    if out is ABSENT:
        return ABSENT
    return out if isinstance(out, str) else str(out)


def render_list(render: Renderer, value: Any, *, field: str) -> Any:
    out = render_value(render, value, field=field)
    if out is ABSENT:
        return ABSENT
    if isinstance(out, (list, tuple)):
        return list(out)
    raise ConfigurationError(f"{field} must be a list, got {type(out).__name__}", field=field)


def render_map(render: Renderer, value: Any, *, field: str) -> Any:
    out = render_value(render, value, field=field)
    if out is ABSENT:
        return ABSENT
    if isinstance(out, Mapping):
        result: Dict[str, Any] = {}
        for k, v in out.items():
            result[str(k)] = v
        return result
    raise ConfigurationError(f"{field} must be a mapping, got {type(out).__name__}", field=field)


def string_list(values: List[Any]) -> List[str]:
    return [str(v) for v in values if v is not None and str(v) != ""]
