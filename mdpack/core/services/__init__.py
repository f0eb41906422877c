"""Archive build services."""

from mdpack.core.services.code_range import CodeRange, CodeRangeFilter
from mdpack.core.services.compressor import Compressor, compress_file
from mdpack.core.services.scheduler import BuildScheduler

__all__ = ["BuildScheduler", "CodeRange", "CodeRangeFilter", "Compressor", "compress_file"]
