"""Record parsing and resampling."""

from mdpack.core.records.parser import format_bar, parse_date_field, parse_record, to_date
from mdpack.core.records.resample import BarAggregator, bucket_close, minute_of_day, resample, time_code

__all__ = [
    "BarAggregator",
    "bucket_close",
    "format_bar",
    "minute_of_day",
    "parse_date_field",
    "parse_record",
    "resample",
    "time_code",
    "to_date",
]
