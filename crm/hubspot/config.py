# crm/hubspot/config.py
from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError

from .constants import (
    DEFAULT_MAX_SEARCH_PAGES,
    DEFAULT_STORAGE_DIR,
    DEFAULT_TIMEOUT,
    HUBSPOT_BASE_URL,
)
from .errors import ConfigurationError

# env var -> settings field
_ENV_OVERRIDES: Dict[str, str] = {
    "HUBSPOT_BASE_URL": "base_url",
    "HUBSPOT_HTTP_TIMEOUT": "read_timeout",
    "HUBSPOT_CONNECT_TIMEOUT": "connect_timeout",
    "HUBSPOT_MAX_SEARCH_PAGES": "max_search_pages",
    "HUBSPOT_STORAGE_DIR": "storage_dir",
    "HUBSPOT_HTTP_RETRIES": "retries",
}


class HubSpotSettings(BaseModel):
    base_url: str = Field(default=HUBSPOT_BASE_URL, min_length=1)
    connect_timeout: float = Field(default=float(DEFAULT_TIMEOUT[0]), gt=0, le=600)
    read_timeout: float = Field(default=float(DEFAULT_TIMEOUT[1]), gt=0, le=3600)

    # Safety bound for fetch-all searches; a provider that never stops paging ends here.
    max_search_pages: int = Field(default=DEFAULT_MAX_SEARCH_PAGES, ge=1, le=1_000_000)

    storage_dir: str = Field(default=DEFAULT_STORAGE_DIR, min_length=1)

    # Transport retries (GET/DELETE only). 0 = never retry.
    retries: int = Field(default=0, ge=0, le=10)
    backoff_factor: float = Field(default=0.6, ge=0, le=30)

    @property
    def timeout(self) -> Tuple[float, float]:
        return (self.connect_timeout, self.read_timeout)


def load_settings(
    overrides: Optional[Mapping[str, Any]] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> HubSpotSettings:
    """
    Build settings from defaults, then environment, then explicit overrides.

    Blank environment values are ignored. Validation errors surface as
    ConfigurationError naming the first offending setting.
    """
    env = os.environ if environ is None else environ
    raw: Dict[str, Any] = {}
    for var, name in _ENV_OVERRIDES.items():
        v = (env.get(var) or "").strip()
        if v:
            raw[name] = v
    raw.update({k: v for k, v in (overrides or {}).items() if v is not None})

    try:
        return HubSpotSettings.model_validate(raw)
    except ValidationError as e:
        errors = e.errors()
        loc = str(errors[0]["loc"][0]) if errors and errors[0].get("loc") else None
        raise ConfigurationError(f"Invalid HubSpot settings: {e}", field=loc) from e
