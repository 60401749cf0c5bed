# crm/hubspot/client.py
from __future__ import annotations

import logging
import time
from typing import Any, Optional, Tuple, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from crm.utils import SessionFactory, session_factory

from .constants import DEFAULT_TIMEOUT
from .errors import ProviderCallError, SerializationError, TransportError
from .events import http_error, http_ok, http_start
from .redaction import redact_text
from .request_spec import RequestSpec

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _safe_body_excerpt(resp: requests.Response, limit: int = 2000) -> str:
    return redact_text(resp.text or "", max_len=limit)


def _items_count(model: Any) -> Optional[int]:
    results = getattr(model, "results", None)
    return len(results) if isinstance(results, list) else None


class HubSpotClient:
    """
    Executes one RequestSpec per call.

    A session is taken from `sessions` for the call and closed on every exit
    path. Nothing is retried here; the session factory decides that.
    """

    def __init__(
        self,
        *,
        timeout: Tuple[float, float] = DEFAULT_TIMEOUT,
        sessions: Optional[SessionFactory] = None,
    ):
        self.timeout = timeout
        self.sessions = sessions or session_factory()

    def call(
        self,
        spec: RequestSpec,
        *,
        resource: str,
        operation: str,
        response_model: Optional[Type[M]] = None,
    ) -> Optional[M]:
        http_start(resource=resource, operation=operation, method=spec.method, url=spec.url)
        logger.debug("%s %s payload=%s", spec.method, spec.url, redact_text(spec.body or "", max_len=500))
        t0 = time.monotonic()

        with self.sessions() as session:
            try:
                resp = session.request(
                    spec.method,
                    spec.url,
                    headers=dict(spec.headers),
                    data=spec.body.encode("utf-8") if spec.body is not None else None,
                    timeout=self.timeout,
                )
            except requests.RequestException as e:
                http_error(resource=resource, operation=operation, method=spec.method, url=spec.url, status=None, error=str(e))
                raise TransportError(str(e), method=spec.method, url=spec.url) from e

            try:
                return self._handle(resp, spec, resource=resource, operation=operation, response_model=response_model, t0=t0)
            finally:
                resp.close()

    def _handle(
        self,
        resp: requests.Response,
        spec: RequestSpec,
        *,
        resource: str,
        operation: str,
        response_model: Optional[Type[M]],
        t0: float,
    ) -> Optional[M]:
        elapsed = int((time.monotonic() - t0) * 1000)
        status = resp.status_code

        if not 200 <= status < 300:
            excerpt = _safe_body_excerpt(resp)
            http_error(resource=resource, operation=operation, method=spec.method, url=spec.url, status=status, error=excerpt[:500])
            # .body keeps the provider's text untouched; only the message is redacted
            raise ProviderCallError(
                status,
                resp.text or "",
                method=spec.method,
                url=spec.url,
                message=f"HubSpot {spec.method} {spec.url} failed with HTTP {status}: {excerpt}",
            )

        if response_model is None:
            http_ok(resource=resource, operation=operation, method=spec.method, url=spec.url, status=status, elapsed_ms=elapsed)
            return None

        if not resp.content:
            http_error(resource=resource, operation=operation, method=spec.method, url=spec.url, status=status, error="empty_body")
            raise SerializationError(
                f"HubSpot {spec.method} {spec.url} returned an empty body (HTTP {status})",
                status_code=status,
            )

        try:
            data = resp.json()
        except ValueError as e:
            excerpt = _safe_body_excerpt(resp)
            http_error(
                resource=resource,
                operation=operation,
                method=spec.method,
                url=spec.url,
                status=status,
                error=f"json_decode_error: {e}",
                extra={"body_excerpt": excerpt[:500]},
            )
            raise SerializationError(
                f"HubSpot {spec.method} {spec.url} returned invalid JSON: {e}",
                status_code=status,
                body_excerpt=excerpt,
            ) from e

        try:
            model = response_model.model_validate(data)
        except ValidationError as e:
            excerpt = _safe_body_excerpt(resp)
            http_error(resource=resource, operation=operation, method=spec.method, url=spec.url, status=status, error="unexpected_shape")
            raise SerializationError(
                f"HubSpot {spec.method} {spec.url} response does not match {response_model.__name__}: {e}",
                status_code=status,
                body_excerpt=excerpt,
            ) from e

        http_ok(
            resource=resource,
            operation=operation,
            method=spec.method,
            url=spec.url,
            status=status,
            elapsed_ms=elapsed,
            items_count=_items_count(model),
        )
        return model
