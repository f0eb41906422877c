"""Date-bucketed ``.tar`` + gzip output containers.

A bucket is one compressed tar stream on disk. Buckets are opened lazily on
the first chunk routed to them and stay open until the owning registry is
released; a tar stream is strictly sequential, so every entry for a bucket
goes through the single cached handle.
"""

from __future__ import annotations

import gzip
import io
import os
import tarfile
from collections.abc import Callable, Iterator
from datetime import date, datetime
from enum import Enum
from typing import BinaryIO

from mdpack.core.archive.checksum import file_md5
from mdpack.core.exceptions import ChecksumIOError, OutputIOError, RegistryReleasedError
from mdpack.core.logging import logger
from mdpack.core.models.manifest import ArtifactManifestEntry
from mdpack.core.records.parser import to_date

RECENT_WINDOW_DAYS = 16


class BucketCollapse(str, Enum):
    """How dates older than the recent window are grouped into one container."""

    HALF_MONTH = "half_month"
    MONTH = "month"
    STATIC = "static"


def bucket_suffix(record_date: int, today: date, collapse: BucketCollapse) -> str:
    """Suffix appended to a target prefix to name the bucket for ``record_date``.

    Recent dates (within :data:`RECENT_WINDOW_DAYS` calendar days of ``today``)
    get one container per day. Older dates collapse to ``YYYYMM01``/``YYYYMM16``
    (half-month) or ``YYYYMM01`` (month). ``STATIC`` buckets always use the
    date value verbatim.
    """

    if collapse is BucketCollapse.STATIC:
        return str(record_date)

    parsed = to_date(record_date)
    if parsed is None:
        raise ValueError(f"invalid trading date: {record_date}")

    if (today - parsed).days <= RECENT_WINDOW_DAYS:
        return str(record_date)

    month_start = record_date // 100 * 100
    if collapse is BucketCollapse.MONTH:
        return str(month_start + 1)
    return str(month_start + (1 if parsed.day <= 15 else 16))


class ArchiveBucket:
    """One open output container: file handle, gzip stream and tar writer."""

    def __init__(self, path: str, file: BinaryIO, gzip_stream: gzip.GzipFile, tar: tarfile.TarFile) -> None:
        self.path = path
        self._file = file
        self._gzip = gzip_stream
        self._tar = tar
        self.entries = 0
        self.closed = False

    @classmethod
    def open(cls, path: str, compression_level: int) -> ArchiveBucket:
        """Create ``path`` and wrap it in gzip and tar writers.

        Raises:
            OutputIOError: if any layer cannot be created.
        """

        file: BinaryIO | None = None
        gzip_stream: gzip.GzipFile | None = None
        try:
            file = open(path, "wb")
            gzip_stream = gzip.GzipFile(filename="", mode="wb", compresslevel=compression_level, fileobj=file)
            tar = tarfile.open(fileobj=gzip_stream, mode="w", format=tarfile.PAX_FORMAT)
        except (OSError, tarfile.TarError, ValueError) as exc:
            if gzip_stream is not None:
                gzip_stream.close()
            if file is not None:
                file.close()
            raise OutputIOError(f"failed to create archive: {exc}", path=path) from exc

        logger.info(f"ArchiveBucket.open: {path} (level={compression_level})")
        return cls(path, file, gzip_stream, tar)

    def add_entry(self, name: str, data: bytes, *, mode: int, mtime: float) -> None:
        """Append one entry (header then body) to the tar stream."""

        if self.closed:
            raise OutputIOError("archive already closed", path=self.path)
        info = tarfile.TarInfo(name=name)
        info.size = len(data)
        info.mode = mode
        info.mtime = mtime
        try:
            self._tar.addfile(info, io.BytesIO(data))
        except (OSError, tarfile.TarError) as exc:
            raise OutputIOError(f"failed to write entry {name}: {exc}", path=self.path) from exc
        self.entries += 1

    def close(self) -> None:
        """Finish the tar stream, the gzip trailer and sync the file to disk."""

        if self.closed:
            return
        self.closed = True
        try:
            self._tar.close()
            self._gzip.close()
            self._file.flush()
            os.fsync(self._file.fileno())
        finally:
            self._file.close()
        logger.info(f"ArchiveBucket.close: {self.path} ({self.entries} entries)")


class BucketRegistry:
    """Bucket path -> open :class:`ArchiveBucket`, owned by one policy run."""

    def __init__(self, compression_level: int) -> None:
        self.compression_level = compression_level
        self._buckets: dict[str, ArchiveBucket] = {}
        self._released = False

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, path: object) -> bool:
        return path in self._buckets

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._buckets))

    @property
    def released(self) -> bool:
        return self._released

    def resolve(self, path: str) -> ArchiveBucket:
        """Return the cached bucket for ``path``, opening it on first use.

        Raises:
            OutputIOError: if the bucket cannot be created.
            RegistryReleasedError: if called after :meth:`release`.
        """

        if self._released:
            raise RegistryReleasedError()
        bucket = self._buckets.get(path)
        if bucket is None:
            bucket = ArchiveBucket.open(path, self.compression_level)
            self._buckets[path] = bucket
        return bucket

    def release(
        self,
        resource_type: str,
        clock: Callable[[], datetime] = datetime.now,
    ) -> list[ArtifactManifestEntry]:
        """Close every bucket and checksum the results in ascending path order.

        A bucket that fails to close or hash is left out of the manifest; the
        others are still returned.
        """

        if self._released:
            raise RegistryReleasedError()
        self._released = True
        logger.info(f"BucketRegistry.release: flushing {len(self._buckets)} archives to disk")

        closed: list[str] = []
        for path in sorted(self._buckets):
            try:
                self._buckets[path].close()
            except (OSError, tarfile.TarError) as exc:
                logger.bind(error_code="OUTPUT_IO_ERROR").error(f"BucketRegistry.release: failed to close {path}: {exc}")
                continue
            closed.append(path)
        self._buckets.clear()

        manifest: list[ArtifactManifestEntry] = []
        for path in closed:
            try:
                digest = file_md5(path)
            except ChecksumIOError as exc:
                logger.bind(error_code=exc.error_code).warning(
                    f"BucketRegistry.release: cannot checksum {path}: {exc}"
                )
                continue
            logger.info(f"BucketRegistry.release: closed {path}, md5 = {digest}")
            manifest.append(
                ArtifactManifestEntry(
                    resource_type=resource_type,
                    archive_path=path,
                    content_hash=digest,
                    produced_at=clock(),
                )
            )
        return manifest


__all__ = ["ArchiveBucket", "BucketCollapse", "BucketRegistry", "RECENT_WINDOW_DAYS", "bucket_suffix"]
