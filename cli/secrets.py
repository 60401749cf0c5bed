"""
Credentials kept on disk for the console.

Layout of `.crm/secrets.toml`:

  [sources.hubspot]
  api_key = "pat-..."
  oauth_token = "..."

Every write happens under an exclusive portalocker lock and leaves the file
readable by its owner only.
"""
from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional

import tomlkit
from tomlkit import TOMLDocument

from crm.hubspot import ABSENT, Credentials

from .constants import ENV_API_KEY, ENV_OAUTH_TOKEN, SECRETS_FILE, SECRETS_SOURCE
from .locking import file_lock


def secure_secrets_file(path: str = SECRETS_FILE) -> None:
    if os.name != "nt" and os.path.exists(path):
        os.chmod(path, 0o600)


def _plain(table: Any) -> Dict[str, Any]:
    """tomlkit tables -> plain dict of plain values (one level deep)."""
    if not isinstance(table, Mapping):
        return {}
    out: Dict[str, Any] = {}
    for key, value in table.items():
        out[str(key)] = value.unwrap() if hasattr(value, "unwrap") else value
    return out


@contextmanager
def _editing(path: str) -> Iterator[TOMLDocument]:
    """Yield the parsed document under lock; it is written back when the block exits cleanly."""
    with file_lock(path) as f:
        text = f.read()
        doc = tomlkit.parse(text) if text.strip() else tomlkit.document()
        yield doc
        f.seek(0)
        f.write(tomlkit.dumps(doc))
        f.truncate()
    secure_secrets_file(path)


def update_secret(
    secret_data: Mapping[str, Any],
    *,
    source_name: str = SECRETS_SOURCE,
    path: str = SECRETS_FILE,
    merge: bool = True,
) -> None:
    """
    Store `secret_data` under [sources.<source_name>].

    With merge (default) keys not mentioned are kept, so saving an OAuth
    token leaves a stored API key in place. None values are skipped.
    """
    incoming = {k: v for k, v in _plain(secret_data).items() if v is not None}
    with _editing(path) as doc:
        if "sources" not in doc:
            doc["sources"] = tomlkit.table()
        sources = doc["sources"]
        current = _plain(sources.get(source_name)) if merge else {}
        current.update(incoming)
        sources[source_name] = current


def get_secret(*, source_name: str = SECRETS_SOURCE, path: str = SECRETS_FILE) -> Dict[str, Any]:
    if not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        doc = tomlkit.parse(f.read())
    return _plain(doc.get("sources", {}).get(source_name))


def delete_secret(*, source_name: str = SECRETS_SOURCE, path: str = SECRETS_FILE) -> None:
    if not os.path.exists(path):
        return
    with _editing(path) as doc:
        sources = doc.get("sources")
        if sources is not None and source_name in sources:
            del sources[source_name]


def load_credentials(
    *,
    environ: Optional[Mapping[str, str]] = None,
    path: str = SECRETS_FILE,
) -> Credentials:
    """
    HUBSPOT_API_KEY / HUBSPOT_OAUTH_TOKEN from the environment, else the
    secrets file, else ABSENT.

    Values are passed on unrendered; `${VAR}` references are expanded when
    an operation runs.
    """
    env = os.environ if environ is None else environ
    stored = get_secret(path=path)

    def _first(env_var: str, key: str) -> Any:
        for candidate in (env.get(env_var), stored.get(key)):
            if isinstance(candidate, str) and candidate.strip():
                return candidate.strip()
        return ABSENT

    return Credentials(
        api_key=_first(ENV_API_KEY, "api_key"),
        oauth_token=_first(ENV_OAUTH_TOKEN, "oauth_token"),
    )
