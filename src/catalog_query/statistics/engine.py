"""Statistics engine.

Pure functions from item lists to the models in ``statistics.models``. The
value field is summed over items holding a number (booleans are not
numbers); every item counts toward ``count`` whether or not it has a value,
so ``average_value`` is ``total_value / count``.

The date range works on datetimes, or on plain numbers when the date field
holds years. With a schema the field's declared type picks the mode;
without one the first valid value does, and values of the other kind are
ignored.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Union

from ..core.coercion import value_kind
from ..core.enums import FieldType
from ..core.items import CatalogItem, read_field
from ..core.query.grouping import GroupKey, group_by
from ..core.query.keys import flatten_key
from ..core.query.values import count_by_field
from ..core.schemas import CatalogSchema
from .models import (
    AggregateStatistics,
    BaseStatistics,
    CatalogStatistics,
    DateRange,
    GroupStatistics,
    NumericSummary,
)

Number = Union[int, float]

AGGREGATE_OPERATIONS = ("sum", "avg", "min", "max", "count")


def _number_or_none(value: object) -> Optional[Number]:
    if value_kind(value) is FieldType.NUMBER:
        return value  # type: ignore[return-value]
    return None


def _date_mode(schema: Optional[CatalogSchema], date_field: str) -> Optional[FieldType]:
    if schema is None:
        return None
    declared = schema.get_field(date_field)
    if declared is None:
        return None
    if declared.type in (FieldType.NUMBER, FieldType.DATE):
        return declared.type
    return None


def _date_bound(value: object, mode: Optional[FieldType]) -> Optional[Union[Number, datetime]]:
    kind = value_kind(value)
    if kind not in (FieldType.NUMBER, FieldType.DATE):
        return None
    if mode is not None and kind is not mode:
        return None
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value  # type: ignore[return-value]


def _scan(
    items: Iterable[CatalogItem],
    value_field: str,
    date_field: str,
    schema: Optional[CatalogSchema],
):
    """Single pass collecting count, total, date range and validity counters."""
    mode = _date_mode(schema, date_field)
    count = 0
    total: Number = 0
    valid_values = 0
    valid_dates = 0
    low = high = None

    for item in items:
        count += 1
        number = _number_or_none(read_field(item, value_field, schema))
        if number is not None:
            total += number
            valid_values += 1

        when = _date_bound(read_field(item, date_field, schema), mode)
        if when is None:
            continue
        if mode is None:
            mode = value_kind(when)
        valid_dates += 1
        if low is None or when < low:
            low = when
        if high is None or when > high:
            high = when

    average = total / count if count else 0
    return count, total, average, DateRange(low, high), valid_values, valid_dates


def base_stats(
    items: Iterable[CatalogItem],
    value_field: str,
    date_field: str,
    schema: Optional[CatalogSchema] = None,
) -> BaseStatistics:
    """Count, total/average of ``value_field`` and the range of ``date_field``.

    Examples:
        >>> base_stats([], "words", "year")
        BaseStatistics(count=0, total_value=0, average_value=0, date_range=DateRange(min=None, max=None))
    """
    count, total, average, date_range, _, _ = _scan(items, value_field, date_field, schema)
    return BaseStatistics(count=count, total_value=total, average_value=average, date_range=date_range)


def group_stats(
    items: Iterable[CatalogItem],
    value_field: str,
    date_field: str,
    schema: Optional[CatalogSchema] = None,
) -> GroupStatistics:
    count, total, average, date_range, _, _ = _scan(items, value_field, date_field, schema)
    return GroupStatistics(count=count, total_value=total, average_value=average, date_range=date_range)


def stats_per_group(
    groups: Dict[GroupKey, List[CatalogItem]],
    value_field: str,
    date_field: str,
    schema: Optional[CatalogSchema] = None,
) -> Dict[GroupKey, GroupStatistics]:
    """``group_stats`` for every group, keyed like the input."""
    return {key: group_stats(members, value_field, date_field, schema) for key, members in groups.items()}


def catalog_stats(
    items: Iterable[CatalogItem],
    value_field: str,
    date_field: str,
    distribution_fields: Sequence[str] = (),
    schema: Optional[CatalogSchema] = None,
) -> CatalogStatistics:
    """Base statistics plus a count distribution for each named field.

    Args:
        items: Items to summarize.
        value_field: Numeric field to total and average.
        date_field: Date (or year) field for the range.
        distribution_fields: Fields to count items by, e.g. status or authors.
        schema: Optional schema; undeclared keys read as missing.

    Returns:
        CatalogStatistics whose ``distributions`` map each field to
        ``{display value: count}``, with the unset group as ``(unset)``.
    """
    items = list(items)
    count, total, average, date_range, _, _ = _scan(items, value_field, date_field, schema)
    distributions = {key: count_by_field(items, key, schema) for key in distribution_fields}
    return CatalogStatistics(
        count=count,
        total_value=total,
        average_value=average,
        date_range=date_range,
        distributions=distributions,
    )


def aggregate_stats(
    items: Iterable[CatalogItem],
    value_field: str,
    date_field: str,
    schema: Optional[CatalogSchema] = None,
) -> AggregateStatistics:
    """Base statistics plus counts of items with a valid value and a valid date."""
    count, total, average, date_range, valid_values, valid_dates = _scan(items, value_field, date_field, schema)
    return AggregateStatistics(
        count=count,
        total_value=total,
        average_value=average,
        date_range=date_range,
        valid_value_count=valid_values,
        valid_date_count=valid_dates,
    )


def numeric_summary(
    items: Iterable[CatalogItem], field_key: str, schema: Optional[CatalogSchema] = None
) -> NumericSummary:
    """Count, sum, average, min and max over items holding a number."""
    values = [
        number
        for number in (_number_or_none(read_field(item, field_key, schema)) for item in items)
        if number is not None
    ]
    if not values:
        return NumericSummary()
    total = sum(values)
    return NumericSummary(count=len(values), sum=total, avg=total / len(values), min=min(values), max=max(values))


def aggregate_by_field(
    items: Iterable[CatalogItem],
    group_field: str,
    value_field: str,
    operation: str = "sum",
    schema: Optional[CatalogSchema] = None,
) -> Dict[str, Number]:
    """Aggregate a numeric field per group of ``group_field``.

    Args:
        items: Items to aggregate.
        group_field: Field to group by; array fields fan out.
        value_field: Numeric field to aggregate.
        operation: One of ``sum``, ``avg``, ``min``, ``max``, ``count``.
            Groups without numbers yield 0.
        schema: Optional schema.

    Returns:
        Mapping of group display key to the aggregated number.

    Raises:
        ValueError: If ``operation`` is not a known aggregation.
    """
    if operation not in AGGREGATE_OPERATIONS:
        raise ValueError(f"Unknown aggregation {operation!r}. Expected one of {', '.join(AGGREGATE_OPERATIONS)}.")

    results: Dict[str, Number] = {}
    for key, members in group_by(items, group_field, schema).items():
        summary = numeric_summary(members, value_field, schema)
        label = flatten_key(key)
        if operation == "count":
            results[label] = summary.count
        else:
            results[label] = getattr(summary, operation)
    return results


__all__ = [
    "AGGREGATE_OPERATIONS",
    "base_stats",
    "group_stats",
    "stats_per_group",
    "catalog_stats",
    "aggregate_stats",
    "numeric_summary",
    "aggregate_by_field",
]
