"""Statistics over catalog items."""

from .engine import (
    AGGREGATE_OPERATIONS,
    aggregate_by_field,
    aggregate_stats,
    base_stats,
    catalog_stats,
    group_stats,
    numeric_summary,
    stats_per_group,
)
from .models import (
    AggregateStatistics,
    BaseStatistics,
    CatalogStatistics,
    DateRange,
    GroupStatistics,
    NumericSummary,
)

__all__ = [
    "AGGREGATE_OPERATIONS",
    "base_stats",
    "group_stats",
    "stats_per_group",
    "catalog_stats",
    "aggregate_stats",
    "numeric_summary",
    "aggregate_by_field",
    "DateRange",
    "BaseStatistics",
    "GroupStatistics",
    "CatalogStatistics",
    "AggregateStatistics",
    "NumericSummary",
]
