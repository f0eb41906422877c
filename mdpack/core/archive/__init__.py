"""Archive containers and bucket routing."""

from mdpack.core.archive.bucket import (
    RECENT_WINDOW_DAYS,
    ArchiveBucket,
    BucketCollapse,
    BucketRegistry,
    bucket_suffix,
)
from mdpack.core.archive.checksum import file_md5

__all__ = [
    "ArchiveBucket",
    "BucketCollapse",
    "BucketRegistry",
    "RECENT_WINDOW_DAYS",
    "bucket_suffix",
    "file_md5",
]
