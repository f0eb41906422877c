"""Core data models."""

from mdpack.core.models.manifest import MANIFEST_COLUMNS, ArtifactManifestEntry, CompressionResult
from mdpack.core.models.market import CompressionLevel, MarketType, ResourceType
from mdpack.core.models.records import Bar, Chunk, RawRecord

__all__ = [
    "ArtifactManifestEntry",
    "Bar",
    "Chunk",
    "CompressionLevel",
    "CompressionResult",
    "MANIFEST_COLUMNS",
    "MarketType",
    "RawRecord",
    "ResourceType",
]
