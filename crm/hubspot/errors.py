# crm/hubspot/errors.py
from __future__ import annotations

from typing import Optional


class CrmError(RuntimeError):
    """Base class for every failure raised by the object client."""


class ConfigurationError(CrmError):
    """Missing/invalid configuration. Raised before any network call."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ProviderCallError(CrmError):
    """Non-2xx response from the CRM API. Never retried by the client."""

    def __init__(
        self,
        status_code: Optional[int],
        body: str,
        *,
        method: str = "",
        url: str = "",
        message: Optional[str] = None,
    ):
        super().__init__(message or f"HubSpot {method} {url} failed with HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body
        self.method = method
        self.url = url


class TransportError(ProviderCallError):
    """The request never produced an HTTP response (DNS, connect, read timeout)."""

    def __init__(self, error: str, *, method: str = "", url: str = ""):
        super().__init__(
            None,
            "",
            method=method,
            url=url,
            message=f"HubSpot {method} {url} transport failure: {error}",
        )


class StorageError(CrmError):
    """The result artifact could not be written, committed or read back."""


class SerializationError(CrmError):
    def __init__(self, message: str, *, status_code: Optional[int] = None, body_excerpt: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body_excerpt = body_excerpt
