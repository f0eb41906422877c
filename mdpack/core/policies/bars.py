"""Price/volume bar policies: daily, 1-minute and resampled minute bars."""

from __future__ import annotations

import os
import re

from mdpack.core.archive import BucketCollapse
from mdpack.core.exceptions import FormatError
from mdpack.core.logging import logger
from mdpack.core.models import Chunk, CompressionLevel, RawRecord, ResourceType
from mdpack.core.policies.base import Clock, CodeFilter, ResourcePolicy, scan_date_run
from mdpack.core.records import format_bar, parse_record, resample

# MIN600000_2024.csv -> code 600000, year 2024
_MINUTE_FILE_NAME = re.compile(r"(?P<code>\d+)\D(?P<year>\d{4})\.[^.]*$")
# DAY600000.csv -> code 600000
_DAY_FILE_NAME = re.compile(r"(?P<code>\d+)\.[^.]*$")


class DayPolicy(ResourcePolicy):
    """Daily bars, passed through one chunk per trading date."""

    resource_type = ResourceType.DAY_1
    target_prefix = "DAY/DAY."
    bucket_collapse = BucketCollapse.MONTH

    def compression_level(self) -> CompressionLevel:
        # daily archives are rebuilt on every run
        return CompressionLevel.FASTEST

    def qualifies(self, file_name: str) -> bool:
        if self.code_filter is None:
            return True
        match = _DAY_FILE_NAME.search(os.path.basename(file_name))
        if match is None:
            logger.bind(resource=self.data_type).warning(f"DayPolicy.qualifies: no instrument code in {file_name}")
            return False
        return self.code_filter(match.group("code"))

    def load_next(self, buffer: bytes, offset: int = 0) -> Chunk:
        lines, run_date, consumed = scan_date_run(buffer, offset, lambda _: True)
        return Chunk(b"".join(lines), run_date, consumed)


def _minute_file_qualifies(policy: ResourcePolicy, file_name: str, max_age_years: int) -> bool:
    match = _MINUTE_FILE_NAME.search(os.path.basename(file_name))
    if match is None:
        logger.bind(resource=policy.data_type).warning(
            f"{type(policy).__name__}.qualifies: year in file name is not numeric: {file_name}"
        )
        return False
    if policy.today().year - int(match.group("year")) > max_age_years:
        return False
    if policy.code_filter is None:
        return True
    return policy.code_filter(match.group("code"))


class MinutePolicy(ResourcePolicy):
    """1-minute bars passed through unchanged, limited to a recent horizon.

    With ``today_only`` only lines dated today are kept (real-time feed).
    """

    target_prefix = "MIN/MIN."

    def __init__(
        self,
        data_type: str,
        code_filter: CodeFilter | None = None,
        clock: Clock | None = None,
        *,
        horizon_days: int = 14,
        today_only: bool = False,
    ) -> None:
        super().__init__(data_type, code_filter, clock)
        self.horizon_days = horizon_days
        self.today_only = today_only
        self.resource_type = ResourceType.REAL_MINUTE_1 if today_only else ResourceType.MINUTE_1

    def qualifies(self, file_name: str) -> bool:
        return _minute_file_qualifies(self, file_name, max_age_years=0)

    def _accepts(self, record_date: int) -> bool:
        age = self.age_in_days(record_date)
        if self.today_only:
            return age == 0
        return age <= self.horizon_days

    def load_next(self, buffer: bytes, offset: int = 0) -> Chunk:
        lines, run_date, consumed = scan_date_run(buffer, offset, self._accepts)
        return Chunk(b"".join(lines), run_date, consumed)


class ResamplingPolicy(ResourcePolicy):
    """1-minute source files folded into ``width``-minute bars.

    Output goes to a sibling directory of the 1-minute tree (``MIN/`` is
    rewritten to ``MIN5/`` or ``MIN60/``).
    """

    def __init__(
        self,
        data_type: str,
        code_filter: CodeFilter | None = None,
        clock: Clock | None = None,
        *,
        width: int,
        horizon_days: int = 366,
    ) -> None:
        super().__init__(data_type, code_filter, clock)
        if width not in (5, 60):
            raise ValueError(f"unsupported resample width: {width}")
        self.width = width
        self.horizon_days = horizon_days
        self.resource_type = ResourceType.MINUTE_5 if width == 5 else ResourceType.MINUTE_60
        self.target_prefix = f"MIN{width}/MIN{width}."

    def qualifies(self, file_name: str) -> bool:
        return _minute_file_qualifies(self, file_name, max_age_years=1)

    def rewrite_path(self, path: str) -> str:
        return path.replace("MIN/", f"MIN{self.width}/", 1)

    def _accepts(self, record_date: int) -> bool:
        return self.age_in_days(record_date) <= self.horizon_days

    def load_next(self, buffer: bytes, offset: int = 0) -> Chunk:
        position = offset
        while True:
            lines, run_date, consumed = scan_date_run(buffer, position, self._accepts)
            position += consumed
            if not lines:
                return Chunk(b"", 0, position - offset)
            bars = resample(self._parse(lines), self.width)
            if bars:
                payload = "".join(format_bar(bar) for bar in bars).encode("ascii")
                return Chunk(payload, run_date, position - offset)

    @staticmethod
    def _parse(lines: list[bytes]) -> list[RawRecord]:
        records: list[RawRecord] = []
        for line in lines:
            try:
                records.append(parse_record(line))
            except FormatError:
                continue
        return records


__all__ = ["DayPolicy", "MinutePolicy", "ResamplingPolicy"]
