# crm/hubspot/credentials.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .errors import ConfigurationError
from .rendering import ABSENT, Renderer, identity_render, render_string


@dataclass(frozen=True)
class Credentials:
    """
    Authentication settings for one operation.

    api_key wins over oauth_token whenever it renders to a non-empty string.
    Nothing here is cached: the token is resolved again for every request.
    """
    api_key: Any = ABSENT
    oauth_token: Any = ABSENT

    def __repr__(self) -> str:
        # Raw values may already hold secrets.
        return (
            f"Credentials(api_key={'set' if self.api_key is not ABSENT else 'ABSENT'}, "
            f"oauth_token={'set' if self.oauth_token is not ABSENT else 'ABSENT'})"
        )


def resolve_token(credentials: Credentials, render: Renderer = identity_render) -> str:
    api_key = render_string(render, credentials.api_key, field="api_key")
    if api_key is not ABSENT and api_key.strip():
        return api_key.strip()

    oauth_token = render_string(render, credentials.oauth_token, field="oauth_token")
    if oauth_token is not ABSENT and oauth_token.strip():
        return oauth_token.strip()

    raise ConfigurationError(
        "missing required authentication fields: api_key or oauth_token",
        field="api_key",
    )


def authorization_header(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
