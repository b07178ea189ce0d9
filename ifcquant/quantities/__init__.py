"""Quantity aggregation by type, level, and pivot fields."""

from ifcquant.quantities.aggregator import (
    aggregate,
    build_hierarchy,
    build_pivot,
    by_level,
    by_type,
)

__all__ = [
    "aggregate",
    "build_hierarchy",
    "build_pivot",
    "by_level",
    "by_type",
]
