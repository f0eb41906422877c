"""Instrument-code range predicate consumed by the file-name filters."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from mdpack.core.exceptions import ConfigError


@dataclass(frozen=True, slots=True)
class CodeRange:
    """Inclusive numeric range of instrument codes, e.g. ``000001``..``000100``."""

    low: int
    high: int

    def __contains__(self, code: object) -> bool:
        if not isinstance(code, str) or not code.isdigit():
            return False
        return self.low <= int(code) <= self.high

    @classmethod
    def parse(cls, text: str) -> CodeRange:
        """Parse ``"000001-000100"`` or a single code ``"600000"``."""

        low, sep, high = text.strip().partition("-")
        high = high if sep else low
        if not (low.strip().isdigit() and high.strip().isdigit()):
            raise ConfigError(f"invalid code range: {text!r}", details={"range": text})
        code_range = cls(int(low), int(high))
        if code_range.low > code_range.high:
            raise ConfigError(f"code range is reversed: {text!r}", details={"range": text})
        return code_range


class CodeRangeFilter:
    """Callable ``code -> bool`` accepting codes inside any configured range."""

    def __init__(self, ranges: Iterable[CodeRange]) -> None:
        self.ranges = tuple(ranges)

    @classmethod
    def from_strings(cls, values: Iterable[str]) -> CodeRangeFilter:
        return cls(CodeRange.parse(value) for value in values)

    def __call__(self, code: str) -> bool:
        return any(code in code_range for code_range in self.ranges)

    def __repr__(self) -> str:
        spans = ", ".join(f"{r.low:06d}-{r.high:06d}" for r in self.ranges)
        return f"CodeRangeFilter([{spans}])"


__all__ = ["CodeRange", "CodeRangeFilter"]
