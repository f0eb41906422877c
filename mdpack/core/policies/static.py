"""Whole-file policies: weight records and the static column reference tables."""

from __future__ import annotations

import os

from mdpack.core.archive import BucketCollapse
from mdpack.core.models import Chunk, ResourceType
from mdpack.core.policies.base import Clock, CodeFilter, ResourcePolicy

# fixed entry date carried by column tables; they have no trading date
COLUMN_TABLE_DATE = 20120609

COLUMN_TABLES: dict[ResourceType, str] = {
    ResourceType.COLUMN_DY: "dybk.ini",
    ResourceType.COLUMN_GN: "gnbk.ini",
    ResourceType.COLUMN_HY: "hybk.ini",
    ResourceType.COLUMN_ZS: "zsbk.ini",
}


def _whole_buffer(buffer: bytes, offset: int, record_date: int) -> Chunk:
    remaining = buffer[offset:]
    if not remaining:
        return Chunk(b"", 0, 0)
    return Chunk(remaining, record_date, len(remaining))


class WeightPolicy(ResourcePolicy):
    """Weight/adjustment records, archived file by file into one container."""

    resource_type = ResourceType.WEIGHT
    target_prefix = "WEIGHT/WEIGHT."
    bucket_collapse = BucketCollapse.STATIC

    def load_next(self, buffer: bytes, offset: int = 0) -> Chunk:
        return _whole_buffer(buffer, offset, 0)


class ColumnPolicy(ResourcePolicy):
    """Passthrough for one of the fixed column reference tables."""

    bucket_collapse = BucketCollapse.STATIC

    def __init__(
        self,
        data_type: str,
        code_filter: CodeFilter | None = None,
        clock: Clock | None = None,
        *,
        resource_type: ResourceType,
    ) -> None:
        super().__init__(data_type, code_filter, clock)
        if resource_type not in COLUMN_TABLES:
            raise ValueError(f"not a column table: {resource_type}")
        self.resource_type = resource_type
        self.table_name = COLUMN_TABLES[resource_type]
        self.target_prefix = f"COLUMN/{resource_type.value.upper()}BK."

    def qualifies(self, file_name: str) -> bool:
        return self.table_name in os.path.basename(file_name).lower()

    def load_next(self, buffer: bytes, offset: int = 0) -> Chunk:
        return _whole_buffer(buffer, offset, COLUMN_TABLE_DATE)


__all__ = ["COLUMN_TABLES", "COLUMN_TABLE_DATE", "ColumnPolicy", "WeightPolicy"]
