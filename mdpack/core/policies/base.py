"""Resource policy interface shared by every resource variant.

A policy bundles, for one resource type: which source files qualify, how a
file buffer is sliced into date-homogeneous chunks, where chunks are routed
(bucket naming and path rewriting) and the gzip level used. Each policy
instance owns the bucket registry for exactly one traversal.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime

from mdpack.core.archive import ArchiveBucket, BucketCollapse, BucketRegistry, bucket_suffix
from mdpack.core.exceptions import OutputIOError
from mdpack.core.logging import logger
from mdpack.core.models import ArtifactManifestEntry, Chunk, CompressionLevel, ResourceType
from mdpack.core.records import parse_date_field, to_date

CodeFilter = Callable[[str], bool]
Clock = Callable[[], datetime]


def scan_date_run(
    buffer: bytes,
    offset: int,
    accept: Callable[[int], bool],
) -> tuple[list[bytes], int, int]:
    """Collect the next run of accepted lines sharing one leading date.

    Lines with an unusable leading date, or whose date ``accept`` rejects, are
    skipped without ending the run. Returns ``(lines, date, consumed)`` where
    ``consumed`` stops right before the first line of the following date, or
    at end of buffer. Returned lines keep their line terminators.
    """

    end = len(buffer)
    position = offset
    run_date = 0
    lines: list[bytes] = []

    while position < end:
        newline = buffer.find(b"\n", position)
        line_end = end if newline == -1 else newline + 1
        line = buffer[position:line_end]

        record_date = parse_date_field(line)
        if record_date is not None and accept(record_date):
            if not lines:
                run_date = record_date
            elif record_date != run_date:
                return lines, run_date, position - offset
            lines.append(line if line.endswith(b"\n") else line + b"\n")
        position = line_end

    return lines, run_date, end - offset


class ResourcePolicy:
    """Base class for the resource variants selected by :func:`create_policy`."""

    resource_type: ResourceType
    target_prefix: str = ""
    bucket_collapse: BucketCollapse = BucketCollapse.HALF_MONTH

    def __init__(
        self,
        data_type: str,
        code_filter: CodeFilter | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.data_type = data_type
        self.code_filter = code_filter
        self.clock = clock or datetime.now
        self._registry: BucketRegistry | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(data_type={self.data_type!r})"

    def today(self) -> date:
        return self.clock().date()

    def age_in_days(self, record_date: int) -> int:
        parsed = to_date(record_date)
        if parsed is None:
            raise ValueError(f"invalid trading date: {record_date}")
        return (self.today() - parsed).days

    def initialize(self) -> None:
        """Create a fresh bucket registry for one traversal."""

        self._registry = BucketRegistry(int(self.compression_level()))

    def qualifies(self, file_name: str) -> bool:
        return True

    def rewrite_path(self, path: str) -> str:
        return path

    def load_next(self, buffer: bytes, offset: int = 0) -> Chunk:
        raise NotImplementedError

    def compression_level(self) -> CompressionLevel:
        return CompressionLevel.BALANCED

    def resolve_writer(self, target_prefix: str, record_date: int) -> ArchiveBucket | None:
        """Return the open bucket for ``(target_prefix, record_date)``.

        ``None`` means the bucket could not be created; the failure is logged.
        """

        if self._registry is None:
            self.initialize()
        assert self._registry is not None

        key = target_prefix + bucket_suffix(record_date, self.today(), self.bucket_collapse)
        try:
            return self._registry.resolve(key)
        except OutputIOError as exc:
            logger.bind(resource=self.data_type, error_code=exc.error_code).error(
                f"{type(self).__name__}.resolve_writer: cannot open {key}: {exc.message}"
            )
            return None

    def release(self) -> list[ArtifactManifestEntry]:
        """Close all buckets and return the manifest.

        The registry refuses further use afterwards; call :meth:`initialize`
        to start another traversal.
        """

        if self._registry is None:
            return []
        return self._registry.release(self.data_type, self.clock)

    @property
    def open_buckets(self) -> list[str]:
        if self._registry is None:
            return []
        return list(self._registry)


__all__ = ["Clock", "CodeFilter", "ResourcePolicy", "scan_date_run"]
