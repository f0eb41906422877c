"""mdpack - 行情数据归档打包工具

将日线、分钟线、权息等按证券拆分的行情文件转换(可选重采样)后，
按日期分桶写入 tar.gz 归档，并生成带 md5 的发布清单。
"""

from pathlib import Path

from mdpack.core.models import ArtifactManifestEntry, CompressionResult
from mdpack.core.policies import create_policy
from mdpack.core.services import BuildScheduler, CodeRangeFilter, Compressor

__version__ = "0.1.0"


def compress(
    resource_key: str,
    source: str | Path,
    target: str | Path,
    code_ranges: list[str] | None = None,
) -> CompressionResult:
    """归档一个资源目录

    Args:
        resource_key: 资源键 (如 ``sse.d1``, ``szse.m5``)
        source: 源数据目录
        target: 归档输出根目录
        code_ranges: 证券代码区间 (如 ``["000001-000100"]``)，为空表示不过滤

    Returns:
        本次归档的结果与清单

    Examples:
        >>> import mdpack
        >>> result = mdpack.compress("sse.d1", "/data/sse/day", "/srv/out")
        >>> [entry.archive_path for entry in result.manifest]
    """
    code_filter = CodeRangeFilter.from_strings(code_ranges) if code_ranges else None
    return Compressor(target).compress(resource_key, source, code_filter)


__all__ = [
    "ArtifactManifestEntry",
    "BuildScheduler",
    "CodeRangeFilter",
    "CompressionResult",
    "Compressor",
    "compress",
    "create_policy",
    "__version__",
]
