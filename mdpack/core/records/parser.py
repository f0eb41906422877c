"""Bar record parser.

Source lines are ``date,time,open,high,low,close,settle,amount,volume,
open_interest,trade_count,misc``. Malformed lines are dropped by the callers:
sparse vendor files routinely carry headers, blank lines and truncated rows.
"""

from __future__ import annotations

from datetime import date

from mdpack.core.exceptions import FormatError
from mdpack.core.models.records import Bar, RawRecord

RECORD_FIELD_COUNT = 12


def to_date(value: int) -> date | None:
    """Convert a ``YYYYMMDD`` integer to :class:`date`, or ``None`` if invalid."""

    try:
        return date(value // 10000, value % 10000 // 100, value % 100)
    except ValueError:
        return None


def parse_date_field(line: bytes) -> int | None:
    """Return the leading trading date of ``line`` or ``None`` when unusable."""

    head = line.split(b",", 1)[0].strip()
    if not head:
        return None
    try:
        value = int(head)
    except ValueError:
        return None
    if to_date(value) is None:
        return None
    return value


def parse_record(line: bytes | str) -> RawRecord:
    """Parse one full record line.

    Raises:
        FormatError: if the line has too few fields or a field is not numeric.
    """

    text = line.decode("ascii", errors="replace") if isinstance(line, bytes) else line
    fields = [field.strip() for field in text.strip().split(",")]
    if len(fields) < RECORD_FIELD_COUNT:
        raise FormatError(f"expected {RECORD_FIELD_COUNT} fields, got {len(fields)}", line=text)

    try:
        return RawRecord(
            date=int(fields[0]),
            time=int(fields[1]),
            open=float(fields[2]),
            high=float(fields[3]),
            low=float(fields[4]),
            close=float(fields[5]),
            settle=float(fields[6]),
            amount=float(fields[7]),
            volume=int(fields[8]),
            open_interest=int(fields[9]),
            trade_count=int(fields[10]),
            misc=float(fields[11]),
        )
    except ValueError as exc:
        raise FormatError(f"non-numeric field: {exc}", line=text) from exc


def format_bar(bar: Bar) -> str:
    """Serialize ``bar`` as one newline-terminated record line."""

    return (
        f"{bar.date},{bar.time},{bar.open:.6f},{bar.high:.6f},{bar.low:.6f},"
        f"{bar.close:.6f},{bar.settle:.6f},{bar.amount:.6f},"
        f"{bar.volume},{bar.open_interest},{bar.trade_count},{bar.misc:.6f}\n"
    )


__all__ = ["RECORD_FIELD_COUNT", "format_bar", "parse_date_field", "parse_record", "to_date"]
