"""Chunk loader tests for every policy variant."""

import pytest

from mdpack.core.policies import ColumnPolicy, DayPolicy, MinutePolicy, ResamplingPolicy, WeightPolicy, scan_date_run
from mdpack.core.models import ResourceType
from mdpack.core.records import parse_record


def _drain(policy, buffer):
    chunks = []
    offset = 0
    while True:
        chunk = policy.load_next(buffer, offset)
        if not chunk:
            break
        chunks.append(chunk)
        offset += chunk.consumed
    return chunks, offset


class TestScanDateRun:
    def test_stops_before_next_date(self, line):
        buffer = (line(20240101) + line(20240101) + line(20240102)).encode()

        lines, run_date, consumed = scan_date_run(buffer, 0, lambda _: True)

        assert run_date == 20240101
        assert len(lines) == 2
        assert consumed == len(line(20240101)) * 2

    def test_appends_missing_terminator(self, line):
        buffer = line(20240101).rstrip("\n").encode()

        lines, _, consumed = scan_date_run(buffer, 0, lambda _: True)

        assert lines == [buffer + b"\n"]
        assert consumed == len(buffer)

    def test_rejected_lines_do_not_end_run(self, line):
        buffer = (line(20240101) + line(20231231) + line(20240101)).encode()

        lines, _, consumed = scan_date_run(buffer, 0, lambda d: d != 20231231)

        assert len(lines) == 2
        assert consumed == len(buffer)


class TestDayPolicyLoader:
    def test_single_date_buffer_is_one_chunk(self, clock, line):
        buffer = (line(20240105, 0) * 3).encode()
        policy = DayPolicy("sse.d1", clock=clock)

        chunk = policy.load_next(buffer)

        assert chunk.data == buffer
        assert chunk.date == 20240105
        assert chunk.consumed == len(buffer)

    def test_no_line_lost_between_chunks(self, clock, line):
        buffer = (line(20240105) + line(20240105) + line(20240108) + line(20240109)).encode()
        policy = DayPolicy("sse.d1", clock=clock)

        chunks, offset = _drain(policy, buffer)

        assert [chunk.date for chunk in chunks] == [20240105, 20240108, 20240109]
        assert b"".join(chunk.data for chunk in chunks) == buffer
        assert offset == len(buffer)

    def test_malformed_lines_are_skipped(self, clock, line):
        buffer = ("date,time,open\n\n" + line(20240105) + "garbage\n").encode()
        policy = DayPolicy("sse.d1", clock=clock)

        chunks, offset = _drain(policy, buffer)

        assert len(chunks) == 1
        assert chunks[0].data == line(20240105).encode()
        assert offset == len(buffer)

    def test_empty_buffer(self, clock):
        chunk = DayPolicy("sse.d1", clock=clock).load_next(b"")
        assert not chunk
        assert chunk.consumed == 0


class TestMinutePolicyLoader:
    def test_drops_lines_beyond_horizon(self, clock, line):
        # today is 2024-03-20, the 1-minute horizon is 14 days
        buffer = (line(20240301) + line(20240305) + line(20240306) + line(20240319)).encode()
        policy = MinutePolicy("sse.m1", clock=clock)

        chunks, offset = _drain(policy, buffer)

        assert [chunk.date for chunk in chunks] == [20240306, 20240319]
        assert offset == len(buffer)

    def test_real_time_keeps_today_only(self, clock, line):
        buffer = (line(20240319) + line(20240320, 931) + line(20240320, 932)).encode()
        policy = MinutePolicy("sse.rm1", clock=clock, today_only=True)

        chunks, _ = _drain(policy, buffer)

        assert len(chunks) == 1
        assert chunks[0].date == 20240320
        assert chunks[0].data == (line(20240320, 931) + line(20240320, 932)).encode()
        assert policy.resource_type is ResourceType.REAL_MINUTE_1


class TestResamplingPolicyLoader:
    def test_chunks_are_resampled_per_date(self, clock, line):
        minutes = [931, 932, 933, 934, 935, 936]
        buffer = "".join(line(20240318, m) for m in minutes) + "".join(line(20240319, m) for m in minutes)
        policy = ResamplingPolicy("sse.m5", clock=clock, width=5)

        chunks, offset = _drain(policy, buffer.encode())

        assert [chunk.date for chunk in chunks] == [20240318, 20240319]
        assert offset == len(buffer)
        bars = [parse_record(text) for text in chunks[0].data.decode().splitlines()]
        assert [bar.time for bar in bars] == [93_500_000, 94_000_000]
        assert bars[0].volume == 500

    def test_skips_dates_without_bars(self, clock, line):
        buffer = ("20240318,not,a,record\n" + line(20240319)).encode()
        policy = ResamplingPolicy("sse.m60", clock=clock, width=60)

        chunk = policy.load_next(buffer)

        assert chunk.date == 20240319
        assert chunk.consumed == len(buffer)
        assert parse_record(chunk.data).time == 100_000_000

    def test_drops_lines_older_than_a_year(self, clock, line):
        buffer = (line(20230301) + line(20240105)).encode()
        policy = ResamplingPolicy("sse.m5", clock=clock, width=5)

        chunks, _ = _drain(policy, buffer)

        assert [chunk.date for chunk in chunks] == [20240105]

    def test_unsupported_width(self, clock):
        with pytest.raises(ValueError):
            ResamplingPolicy("sse.m5", clock=clock, width=15)


class TestWholeFileLoaders:
    def test_weight_is_one_chunk_dated_zero(self, clock):
        buffer = b"600000,20240101,0.5\n600000,20240301,0.2\n"
        policy = WeightPolicy("sse.wt", clock=clock)

        chunk = policy.load_next(buffer)

        assert chunk.data == buffer
        assert chunk.date == 0
        assert not policy.load_next(buffer, chunk.consumed)

    def test_column_table_uses_fixed_date(self, clock):
        buffer = b"[block]\nname=foo\n"
        policy = ColumnPolicy("sse.dy", clock=clock, resource_type=ResourceType.COLUMN_DY)

        chunk = policy.load_next(buffer)

        assert chunk.date == 20120609
        assert chunk.consumed == len(buffer)
