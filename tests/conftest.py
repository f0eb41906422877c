"""Shared fixtures for the mdpack test suite."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import pytest

FIXED_NOW = datetime(2024, 3, 20, 10, 0, 0)


def make_line(
    date: int,
    hhmm: int = 931,
    *,
    open: float = 10.0,
    high: float = 10.5,
    low: float = 9.5,
    close: float = 10.2,
    settle: float = 10.1,
    amount: float = 1000.0,
    volume: int = 100,
    open_interest: int = 0,
    trade_count: int = 5,
    misc: float = 0.0,
) -> str:
    """Build one 12-field record line; ``hhmm`` becomes an ``HHMMSSmmm`` time code."""

    time_code = (hhmm // 100) * 10_000_000 + (hhmm % 100) * 100_000
    return (
        f"{date},{time_code},{open},{high},{low},{close},{settle},"
        f"{amount},{volume},{open_interest},{trade_count},{misc}\n"
    )


@pytest.fixture()
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture()
def line() -> Callable[..., str]:
    return make_line
