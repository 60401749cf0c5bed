# crm/hubspot/storage.py
"""
Result artifacts.

Property bags are written one JSON object per line to a temp file, then the
file is handed to a storage backend which makes it durable and returns its URI.
"""
from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Protocol
from urllib.parse import unquote, urlparse

from .constants import ARTIFACT_SUFFIX, DEFAULT_STORAGE_DIR
from .errors import StorageError

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    def commit(self, path: str) -> str:
        """Take ownership of the finished file at `path`; return its URI."""

    def open_lines(self, uri: str) -> Iterator[str]:
        """Yield the lines of a committed artifact."""


class LocalStorage:
    """Commits artifacts under <root>/<YYYY-MM-DD>/<uuid>.jsonl and addresses them with file:// URIs."""

    def __init__(self, root: str = DEFAULT_STORAGE_DIR):
        self.root = os.path.abspath(root)

    def _day_dir(self) -> str:
        day = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        path = os.path.join(self.root, day)
        os.makedirs(path, exist_ok=True)
        return path

    def commit(self, path: str) -> str:
        target = os.path.join(self._day_dir(), f"{uuid.uuid4().hex}{ARTIFACT_SUFFIX}")
        # rename on the same filesystem, copy+delete across devices
        shutil.move(path, target)
        return Path(target).as_uri()

    def open_lines(self, uri: str) -> Iterator[str]:
        parsed = urlparse(uri)
        if parsed.scheme != "file":
            raise StorageError(f"LocalStorage cannot read {uri!r}")
        with open(unquote(parsed.path), "r", encoding="utf-8") as f:
            for line in f:
                yield line


class ResultStore:
    def __init__(self, backend: Optional[StorageBackend] = None, *, scratch_dir: Optional[str] = None):
        self.backend: StorageBackend = backend or LocalStorage()
        self.scratch_dir = scratch_dir

    def store(self, records: Iterable[Mapping[str, Any]]) -> str:
        """
        Stream `records` to a temp file and commit it. Returns the artifact URI.

        The temp file never outlives the call: it is either moved by the
        backend or removed here.
        """
        tmp_path: Optional[str] = None
        count = 0
        try:
            fd, tmp_path = tempfile.mkstemp(prefix="crm-", suffix=ARTIFACT_SUFFIX, dir=self.scratch_dir)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                for record in records:
                    f.write(json.dumps(dict(record), ensure_ascii=False, default=str))
                    f.write("\n")
                    count += 1
            uri = self.backend.commit(tmp_path)
        except StorageError:
            raise
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"failed to store {count} record(s): {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        logger.debug("stored %d record(s) at %s", count, uri)
        return uri

    def read(self, uri: str) -> Iterator[Dict[str, Any]]:
        try:
            for line in self.backend.open_lines(uri):
                line = line.strip()
                if line:
                    yield json.loads(line)
        except StorageError:
            raise
        except (OSError, ValueError) as e:
            raise StorageError(f"failed to read artifact {uri}: {e}") from e
