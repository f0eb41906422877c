"""Market-related enums and types."""

from enum import Enum, IntEnum


class MarketType(str, Enum):
    """交易所代码枚举."""

    SSE = "sse"  # 上海证券交易所
    SZSE = "szse"  # 深圳证券交易所


class ResourceType(str, Enum):
    """资源类型枚举."""

    DAY_1 = "d1"
    MINUTE_1 = "m1"
    REAL_MINUTE_1 = "rm1"
    MINUTE_5 = "m5"
    MINUTE_60 = "m60"
    WEIGHT = "wt"
    COLUMN_DY = "dy"
    COLUMN_GN = "gn"
    COLUMN_HY = "hy"
    COLUMN_ZS = "zs"


class CompressionLevel(IntEnum):
    """gzip压缩级别."""

    FASTEST = 1
    BALANCED = 6
