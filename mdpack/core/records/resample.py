"""K-line resampling of minute records into coarser fixed-width bars."""

from __future__ import annotations

from collections.abc import Iterable

from mdpack.core.models.records import Bar, RawRecord

_HOUR_UNIT = 10_000_000
_MINUTE_UNIT = 100_000


def minute_of_day(time_code: int) -> int:
    """Minutes since midnight for an ``HHMMSSmmm`` time code (seconds ignored)."""

    return (time_code // _HOUR_UNIT) * 60 + (time_code // _MINUTE_UNIT) % 100


def time_code(minutes: int) -> int:
    """Inverse of :func:`minute_of_day`."""

    return (minutes // 60) * _HOUR_UNIT + (minutes % 60) * _MINUTE_UNIT


def bucket_close(minute: int, width: int) -> int:
    """Close minute of the bucket holding ``minute``.

    Buckets are end-labelled: the bucket closing at ``c`` holds minutes in
    ``(c - width, c]``.
    """

    return ((minute - 1) // width + 1) * width


class BarAggregator:
    """Folds ascending records of one trading day into ``width``-minute bars."""

    def __init__(self, width: int) -> None:
        if width <= 0:
            raise ValueError("bucket width must be positive")
        self.width = width
        self._current: Bar | None = None
        self._close_minute: int | None = None

    def feed(self, record: RawRecord) -> Bar | None:
        """Fold ``record`` and return the bar it completed, if any."""

        close_minute = bucket_close(minute_of_day(record.time), self.width)
        completed: Bar | None = None

        if self._current is None or self._close_minute is None:
            self._seed(record, close_minute)
        elif self._close_minute <= close_minute - self.width:
            completed = self._current
            self._seed(record, close_minute)

        self._fold(record)
        return completed

    def flush(self) -> Bar | None:
        """Emit the in-progress bar even if its close time was never reached."""

        completed = self._current
        self._current = None
        self._close_minute = None
        return completed

    def _seed(self, record: RawRecord, close_minute: int) -> None:
        self._close_minute = close_minute
        self._current = Bar(
            date=record.date,
            time=time_code(close_minute),
            open=record.open,
            high=record.high,
            low=record.low,
        )

    def _fold(self, record: RawRecord) -> None:
        bar = self._current
        assert bar is not None
        bar.close = record.close
        bar.settle = record.settle
        bar.misc = record.misc
        bar.high = max(bar.high, record.high)
        bar.low = min(bar.low, record.low)
        bar.amount += record.amount
        bar.volume += record.volume
        bar.open_interest += record.open_interest
        bar.trade_count += record.trade_count


def resample(records: Iterable[RawRecord], width: int) -> list[Bar]:
    """Aggregate ``records`` into completed bars, flushing the last one."""

    aggregator = BarAggregator(width)
    bars: list[Bar] = []
    for record in records:
        completed = aggregator.feed(record)
        if completed is not None:
            bars.append(completed)
    tail = aggregator.flush()
    if tail is not None:
        bars.append(tail)
    return bars


__all__ = ["BarAggregator", "bucket_close", "minute_of_day", "resample", "time_code"]
