"""Manifest models returned to the caller after finalization."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

MANIFEST_COLUMNS = ["resource_type", "archive_path", "content_hash", "produced_at"]


@dataclass(slots=True, frozen=True)
class ArtifactManifestEntry:
    """One closed archive bucket and the md5 of its final bytes."""

    resource_type: str
    archive_path: str
    content_hash: str
    produced_at: datetime

    def to_row(self) -> dict[str, object]:
        return {
            "resource_type": self.resource_type,
            "archive_path": self.archive_path,
            "content_hash": self.content_hash,
            "produced_at": self.produced_at.strftime("%Y-%m-%d %H:%M:%S"),
        }


@dataclass(slots=True)
class CompressionResult:
    """Outcome of compressing one source folder for one resource key."""

    resource_key: str
    manifest: list[ArtifactManifestEntry] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures


__all__ = ["ArtifactManifestEntry", "CompressionResult", "MANIFEST_COLUMNS"]
