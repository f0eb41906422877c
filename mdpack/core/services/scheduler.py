"""Daily build trigger for the configured resources."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from datetime import date, datetime
from typing import TYPE_CHECKING

from mdpack.core.exceptions import UnsupportedResourceError
from mdpack.core.logging import log_context, logger
from mdpack.core.models import CompressionResult
from mdpack.core.services.code_range import CodeRangeFilter
from mdpack.core.services.compressor import Compressor

if TYPE_CHECKING:
    from mdpack.core.config.settings import MdPackConfig
    from mdpack.core.policies import Clock


class BuildScheduler:
    """Runs every configured source once per day after ``build_time``."""

    def __init__(
        self,
        config: MdPackConfig,
        compressor: Compressor | None = None,
        clock: Clock | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.clock = clock or datetime.now
        self.compressor = compressor or Compressor(config.target_folder, clock=self.clock)
        self.sleep = sleep
        self.last_build: date | None = None

    def build_time_on(self, day: date) -> datetime:
        build_time = self.config.build_time
        return datetime(day.year, day.month, day.day, build_time // 10000, build_time // 100 % 100, build_time % 100)

    def is_due(self, now: datetime | None = None) -> bool:
        """True once per calendar day, as soon as the build time has passed."""

        now = now or self.clock()
        if self.last_build == now.date():
            return False
        return now >= self.build_time_on(now.date())

    def code_filter(self) -> CodeRangeFilter | None:
        if not self.config.filter.code_ranges:
            return None
        return CodeRangeFilter.from_strings(self.config.filter.code_ranges)

    def run_once(self, resource_keys: Iterable[str] | None = None) -> list[CompressionResult]:
        """Compress every configured source (or only ``resource_keys``)."""

        selected = {key.lower() for key in resource_keys} if resource_keys else None
        code_filter = self.code_filter()
        results: list[CompressionResult] = []

        with log_context():
            for key, folder in sorted(self.config.sources.items()):
                if selected is not None and key not in selected:
                    continue
                try:
                    results.append(self.compressor.compress(key, folder, code_filter))
                except UnsupportedResourceError as exc:
                    logger.bind(resource=key, error_code=exc.error_code).error(f"BuildScheduler: {exc.message}")
                    results.append(CompressionResult(resource_key=key, failures=[exc.message]))

            if selected is not None:
                for key in sorted(selected - set(self.config.sources)):
                    message = f"resource {key} is not configured"
                    logger.bind(resource=key, error_code="UNSUPPORTED_RESOURCE").error(f"BuildScheduler: {message}")
                    results.append(CompressionResult(resource_key=key, failures=[message]))

        logger.info(f"BuildScheduler.run_once: {len(results)} resources built")
        return results

    def tick(self, now: datetime | None = None) -> list[CompressionResult] | None:
        """Build if due; returns ``None`` when nothing ran."""

        now = now or self.clock()
        if not self.is_due(now):
            return None
        self.last_build = now.date()
        logger.info(f"BuildScheduler.tick: building sync resources (build time {self.build_time_on(now.date())})")
        return self.run_once()

    def run_forever(
        self,
        poll_seconds: float = 60.0,
        max_runs: int | None = None,
        on_results: Callable[[list[CompressionResult]], None] | None = None,
    ) -> int:
        """Poll :meth:`tick` until ``max_runs`` builds have happened."""

        runs = 0
        while max_runs is None or runs < max_runs:
            results = self.tick()
            if results is not None:
                runs += 1
                if on_results is not None:
                    on_results(results)
                continue
            self.sleep(poll_seconds)
        return runs


__all__ = ["BuildScheduler"]
