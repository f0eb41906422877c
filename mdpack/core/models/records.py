"""Record-level models shared by the parser, aggregator and policies."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class RawRecord:
    """One parsed source line."""

    date: int
    time: int
    open: float
    high: float
    low: float
    close: float
    settle: float
    amount: float
    volume: int
    open_interest: int
    trade_count: int
    misc: float


@dataclass(slots=True)
class Bar:
    """Aggregation target, mutated in place while its bucket is open.

    ``time`` holds the bucket close time as an ``HHMMSSmmm`` code.
    """

    date: int
    time: int
    open: float
    high: float
    low: float
    close: float = 0.0
    settle: float = 0.0
    amount: float = 0.0
    volume: int = 0
    open_interest: int = 0
    trade_count: int = 0
    misc: float = 0.0


@dataclass(slots=True, frozen=True)
class Chunk:
    """Result of one loader call.

    ``data`` is empty once the buffer is drained. ``consumed`` is relative to
    the offset the loader was called with.
    """

    data: bytes
    date: int
    consumed: int

    def __bool__(self) -> bool:
        return len(self.data) > 0


__all__ = ["RawRecord", "Bar", "Chunk"]
