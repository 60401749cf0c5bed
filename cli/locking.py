from __future__ import annotations

import os
from contextlib import contextmanager
from typing import IO, Iterator

import portalocker


@contextmanager
def file_lock(file_path: str) -> Iterator[IO[str]]:
    """Exclusive cross-platform lock around secrets reads/writes; creates the file if missing."""
    abs_path = os.path.abspath(file_path)
    os.makedirs(os.path.dirname(abs_path), exist_ok=True)

    if not os.path.exists(abs_path):
        open(abs_path, "w", encoding="utf-8").close()

    with open(abs_path, "r+", encoding="utf-8") as f:
        portalocker.lock(f, portalocker.LOCK_EX)
        try:
            yield f
        finally:
            portalocker.unlock(f)
