"""Policy selection by resource key (``<market>.<type>``)."""

from __future__ import annotations

from mdpack.core.exceptions import UnsupportedResourceError
from mdpack.core.models import MarketType, ResourceType
from mdpack.core.policies.bars import DayPolicy, MinutePolicy, ResamplingPolicy
from mdpack.core.policies.base import Clock, CodeFilter, ResourcePolicy
from mdpack.core.policies.static import COLUMN_TABLES, ColumnPolicy, WeightPolicy


def parse_resource_key(resource_key: str) -> tuple[MarketType, ResourceType]:
    """Split ``sse.m5`` into its market and resource type.

    Raises:
        UnsupportedResourceError: for an unknown market or type.
    """

    market, sep, kind = resource_key.strip().lower().partition(".")
    if not sep:
        raise UnsupportedResourceError(f"resource key must be <market>.<type>: {resource_key!r}", resource_key)
    try:
        market_type = MarketType(market)
    except ValueError as exc:
        raise UnsupportedResourceError(f"invalid exchange code: {market!r}", resource_key) from exc
    try:
        resource_type = ResourceType(kind)
    except ValueError as exc:
        raise UnsupportedResourceError(f"invalid data type: {kind!r}", resource_key) from exc
    return market_type, resource_type


def create_policy(
    resource_key: str,
    code_filter: CodeFilter | None = None,
    clock: Clock | None = None,
) -> ResourcePolicy:
    """Instantiate the policy variant for ``resource_key``."""

    _, resource_type = parse_resource_key(resource_key)
    data_type = resource_key.strip().lower()

    if resource_type is ResourceType.DAY_1:
        return DayPolicy(data_type, code_filter, clock)
    if resource_type is ResourceType.MINUTE_1:
        return MinutePolicy(data_type, code_filter, clock)
    if resource_type is ResourceType.REAL_MINUTE_1:
        return MinutePolicy(data_type, code_filter, clock, today_only=True)
    if resource_type is ResourceType.MINUTE_5:
        return ResamplingPolicy(data_type, code_filter, clock, width=5)
    if resource_type is ResourceType.MINUTE_60:
        return ResamplingPolicy(data_type, code_filter, clock, width=60)
    if resource_type is ResourceType.WEIGHT:
        return WeightPolicy(data_type, code_filter, clock)
    if resource_type in COLUMN_TABLES:
        return ColumnPolicy(data_type, code_filter, clock, resource_type=resource_type)
    raise UnsupportedResourceError(f"no policy for data type {resource_type.value!r}", resource_key)


__all__ = ["create_policy", "parse_resource_key"]
