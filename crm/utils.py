"""
Shared transport utilities.

Goals:
- One consistent HTTP stack (requests sessions + optional urllib3 retry + timeouts)
- No retry unless the host asks for it (retries=0)

Deliberately engine-only:
- NO Rich / Questionary / CLI rendering
- Any "pretty panels" or CLI messaging belongs in cli/
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

SessionFactory = Callable[[], requests.Session]


def build_session(
    retries: int = 0,
    backoff_factor: float = 0.6,
    status_forcelist: Tuple[int, ...] = (429, 500, 502, 503, 504),
    allowed_methods: Tuple[str, ...] = ("GET", "DELETE"),
    session: Optional[requests.Session] = None,
) -> requests.Session:
    """
    Creates a requests.Session, optionally with a retry strategy.

    Notes:
    - retries=0 mounts an adapter that never retries (the engine default).
    - Only GET/DELETE are retried unless the host widens `allowed_methods`;
      a retried POST/PATCH may apply twice on the provider.
    """
    sess = session or requests.Session()

    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        status=retries,
        backoff_factor=backoff_factor,
        status_forcelist=status_forcelist,
        allowed_methods=set(m.upper() for m in allowed_methods),
        raise_on_status=False,  # status codes are mapped to typed errors by the caller
        respect_retry_after_header=True,
    )

    adapter = HTTPAdapter(max_retries=retry)
    sess.mount("http://", adapter)
    sess.mount("https://", adapter)
    return sess


def session_factory(retries: int = 0, backoff_factor: float = 0.6) -> SessionFactory:
    """Returns a zero-arg factory producing a fresh session per call."""

    def _make() -> requests.Session:
        return build_session(retries=retries, backoff_factor=backoff_factor)

    return _make
