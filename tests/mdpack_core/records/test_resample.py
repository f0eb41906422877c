"""K线重采样测试"""

import pytest

from mdpack.core.models import RawRecord
from mdpack.core.records import BarAggregator, bucket_close, format_bar, minute_of_day, parse_record, resample, time_code


def _minute(hhmm, *, open=10.0, high=10.5, low=9.5, close=10.2, volume=100, amount=1000.0, oi=1, trades=2):
    return RawRecord(
        date=20240319,
        time=(hhmm // 100) * 10_000_000 + (hhmm % 100) * 100_000,
        open=open,
        high=high,
        low=low,
        close=close,
        settle=close,
        amount=amount,
        volume=volume,
        open_interest=oi,
        trade_count=trades,
        misc=0.0,
    )


class TestTimeArithmetic:
    """测试时间换算"""

    def test_minute_of_day(self):
        assert minute_of_day(93_100_000) == 9 * 60 + 31
        assert minute_of_day(150_000_000) == 15 * 60
        # seconds and milliseconds are ignored
        assert minute_of_day(93_145_500) == 9 * 60 + 31

    def test_time_code_roundtrip(self):
        assert time_code(9 * 60 + 35) == 93_500_000
        assert minute_of_day(time_code(600)) == 600

    @pytest.mark.parametrize(
        ("minute", "width", "expected"),
        [(571, 5, 575), (575, 5, 575), (576, 5, 580), (571, 60, 600), (600, 60, 600), (601, 60, 660)],
    )
    def test_bucket_close_is_end_labelled(self, minute, width, expected):
        assert bucket_close(minute, width) == expected


class TestResample:
    """测试分钟线聚合"""

    def test_five_minute_bars(self):
        records = [
            _minute(931, open=10.0, high=10.1, low=9.9, close=10.05),
            _minute(932, high=10.8, low=9.7),
            _minute(933, low=9.2),
            _minute(934),
            _minute(935, close=10.4),
            _minute(936, open=10.4, close=10.6),
        ]

        bars = resample(records, 5)

        assert [bar.time for bar in bars] == [93_500_000, 94_000_000]
        first = bars[0]
        assert first.open == 10.0
        assert first.high == 10.8
        assert first.low == 9.2
        assert first.close == 10.4
        assert first.volume == 500
        assert first.amount == 5000.0
        assert first.open_interest == 5
        assert first.trade_count == 10
        assert bars[1].open == 10.4
        assert bars[1].close == 10.6

    def test_hour_bars(self):
        records = [_minute(931), _minute(1000), _minute(1001), _minute(1130)]

        bars = resample(records, 60)

        assert [bar.time for bar in bars] == [100_000_000, 110_000_000, 120_000_000]
        assert bars[0].volume == 200

    def test_low_takes_minimum(self):
        bars = resample([_minute(931, low=9.5), _minute(932, low=9.0), _minute(933, low=9.3)], 5)
        assert bars[0].low == 9.0

    def test_gap_starts_new_bar(self):
        bars = resample([_minute(931), _minute(1012)], 5)
        assert [bar.time for bar in bars] == [93_500_000, 101_500_000]

    def test_final_partial_bar_is_flushed(self):
        bars = resample([_minute(1452)], 5)
        assert len(bars) == 1
        assert bars[0].time == 145_500_000

    def test_empty_input(self):
        assert resample([], 5) == []

    def test_resampling_bars_again_is_stable(self):
        records = [_minute(hhmm) for hhmm in (931, 932, 934, 935, 936, 941, 959, 1000)]
        bars = resample(records, 5)
        lines = [format_bar(bar) for bar in bars]

        again = resample([parse_record(text) for text in lines], 5)

        assert [format_bar(bar) for bar in again] == lines


class TestBarAggregator:
    """测试聚合器状态"""

    def test_feed_returns_completed_bar(self):
        aggregator = BarAggregator(5)
        assert aggregator.feed(_minute(931)) is None
        completed = aggregator.feed(_minute(936))
        assert completed is not None
        assert completed.time == 93_500_000
        assert aggregator.flush().time == 94_000_000
        assert aggregator.flush() is None

    def test_rejects_non_positive_width(self):
        with pytest.raises(ValueError):
            BarAggregator(0)
