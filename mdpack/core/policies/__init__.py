"""Resource policies."""

from mdpack.core.policies.bars import DayPolicy, MinutePolicy, ResamplingPolicy
from mdpack.core.policies.base import Clock, CodeFilter, ResourcePolicy, scan_date_run
from mdpack.core.policies.registry import create_policy, parse_resource_key
from mdpack.core.policies.static import COLUMN_TABLE_DATE, COLUMN_TABLES, ColumnPolicy, WeightPolicy

__all__ = [
    "COLUMN_TABLES",
    "COLUMN_TABLE_DATE",
    "Clock",
    "CodeFilter",
    "ColumnPolicy",
    "DayPolicy",
    "MinutePolicy",
    "ResamplingPolicy",
    "ResourcePolicy",
    "WeightPolicy",
    "create_policy",
    "parse_resource_key",
    "scan_date_run",
]
