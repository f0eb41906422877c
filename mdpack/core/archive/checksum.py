"""Content digests of produced archives."""

from __future__ import annotations

import hashlib
from pathlib import Path

from mdpack.core.exceptions import ChecksumIOError


def file_md5(path: str | Path, *, chunk_size: int = 1024 * 1024) -> str:
    """Lowercase hex md5 of the file at ``path``.

    Raises:
        ChecksumIOError: if the file is missing or unreadable.
    """

    hasher = hashlib.md5()
    try:
        with open(path, "rb") as handle:
            for chunk in iter(lambda: handle.read(chunk_size), b""):
                hasher.update(chunk)
    except OSError as exc:
        raise ChecksumIOError(f"cannot read archive for checksum: {exc}", path=str(path)) from exc
    return hasher.hexdigest()


__all__ = ["file_md5"]
