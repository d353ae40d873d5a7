"""Filtering of catalog items by criteria.

A criteria mapping names one criterion per field. Criteria combine with AND
across fields; the values inside one membership criterion combine with OR.

Criterion forms:

- list / tuple / set: membership, the item value (or any array element)
  equals one of the listed values
- ``RangeCriterion`` or a mapping with ``min`` / ``max``: inclusive range on
  number or date values; a ``None`` bound is open
- ``str``: case-insensitive substring match
- any other scalar: single-value membership
- ``None``: ignored

An item without a value for the field never satisfies a criterion on it.
Filtering keeps the input order.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional, Sequence

from ..coercion import coerce_date, coerce_number, value_kind
from ..enums import FieldType
from ..items import CatalogItem, read_field
from ..schemas import CatalogSchema
from .keys import SEQUENCE_TYPES, flatten_key

Predicate = Callable[[CatalogItem], bool]


@dataclass(frozen=True)
class RangeCriterion:
    """Inclusive ``[min, max]`` range. Bounds may be numbers, dates or date strings."""

    min: Any = None
    max: Any = None


def _range_bounds(criterion: Any) -> Optional[RangeCriterion]:
    if isinstance(criterion, RangeCriterion):
        return criterion
    if isinstance(criterion, Mapping) and ("min" in criterion or "max" in criterion):
        return RangeCriterion(criterion.get("min"), criterion.get("max"))
    return None


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def in_range(value: Any, low: Any, high: Any) -> bool:
    """True when a number or date value lies within ``[low, high]``.

    Bounds are coerced to the value's kind; a bound that cannot be coerced
    makes the check fail.
    """
    kind = value_kind(value)
    if kind is FieldType.NUMBER:
        coerce = coerce_number
        subject = value
    elif kind is FieldType.DATE:
        coerce = coerce_date
        subject = _aware(value)
    else:
        return False

    if low is not None:
        lower = coerce(low)
        if lower is None or subject < lower:
            return False
    if high is not None:
        upper = coerce(high)
        if upper is None or subject > upper:
            return False
    return True


def _value_matches(candidate: Any, wanted: Any) -> bool:
    # True == 1 in Python; booleans only match by display string
    if isinstance(candidate, bool) or isinstance(wanted, bool):
        return flatten_key(candidate) == flatten_key(wanted)
    if candidate == wanted:
        return True
    if isinstance(candidate, datetime):
        wanted_date = coerce_date(wanted)
        return wanted_date is not None and _aware(candidate) == wanted_date
    return flatten_key(candidate) == flatten_key(wanted)


def matches_any(value: Any, allowed: Iterable[Any]) -> bool:
    """Membership: the value, or any element of an array value, is in ``allowed``."""
    if value is None:
        return False
    wanted = [a for a in allowed if a is not None]
    candidates = value if isinstance(value, SEQUENCE_TYPES) else [value]
    return any(_value_matches(c, w) for c in candidates for w in wanted)


def contains_text(value: Any, text: str) -> bool:
    """Case-insensitive substring match against strings, scalars and array elements."""
    if value is None:
        return False
    needle = text.casefold()
    if isinstance(value, SEQUENCE_TYPES):
        return any(contains_text(v, text) for v in value)
    if isinstance(value, Mapping):
        return False
    haystack = value if isinstance(value, str) else flatten_key(value)
    return needle in haystack.casefold()


def matches_criterion(value: Any, criterion: Any) -> bool:
    """Apply one criterion to one field value. See the module docstring for forms."""
    if criterion is None:
        return True
    if value is None:
        return False
    bounds = _range_bounds(criterion)
    if bounds is not None:
        return in_range(value, bounds.min, bounds.max)
    if isinstance(criterion, str):
        return contains_text(value, criterion)
    if isinstance(criterion, SEQUENCE_TYPES):
        return matches_any(value, criterion)
    if isinstance(criterion, Mapping):
        return False
    return matches_any(value, [criterion])


def filter_items(
    items: Iterable[CatalogItem],
    criteria: Optional[Mapping[str, Any]],
    schema: Optional[CatalogSchema] = None,
) -> List[CatalogItem]:
    """Return the items satisfying every criterion, in input order.

    Args:
        items: Items to filter.
        criteria: Field key to criterion. Empty or None keeps every item.
        schema: When given, keys the schema does not declare read as missing.

    Examples:
        >>> a, b = CatalogItem("a"), CatalogItem("b")
        >>> a.set("status", "draft"); b.set("status", "final")
        >>> [i.id for i in filter_items([a, b], {"status": ["draft"]})]
        ['a']
    """
    if not isinstance(criteria, Mapping):
        return list(items)
    active = [(key, criterion) for key, criterion in criteria.items() if criterion is not None]
    if not active:
        return list(items)
    return [
        item
        for item in items
        if all(matches_criterion(read_field(item, key, schema), criterion) for key, criterion in active)
    ]


def filter_by_field(
    items: Iterable[CatalogItem], field: str, value: Any, schema: Optional[CatalogSchema] = None
) -> List[CatalogItem]:
    """Exact equality on a field; booleans never equal numbers."""
    return [
        item
        for item in items
        if (v := read_field(item, field, schema)) is not None
        and isinstance(v, bool) == isinstance(value, bool)
        and v == value
    ]


def filter_by_values(
    items: Iterable[CatalogItem], field: str, values: Sequence[Any], schema: Optional[CatalogSchema] = None
) -> List[CatalogItem]:
    return [item for item in items if matches_any(read_field(item, field, schema), values)]


def filter_by_range(
    items: Iterable[CatalogItem],
    field: str,
    low: Any,
    high: Any,
    schema: Optional[CatalogSchema] = None,
) -> List[CatalogItem]:
    return [item for item in items if in_range(read_field(item, field, schema), low, high)]


def filter_by_date_range(
    items: Iterable[CatalogItem],
    field: str,
    start: Any,
    end: Any,
    schema: Optional[CatalogSchema] = None,
) -> List[CatalogItem]:
    """Inclusive date range. Unparsable bounds match nothing."""
    start_date, end_date = coerce_date(start), coerce_date(end)
    if start_date is None or end_date is None:
        return []
    return filter_by_range(items, field, start_date, end_date, schema)


def filter_by_text(
    items: Iterable[CatalogItem], field: str, text: str, schema: Optional[CatalogSchema] = None
) -> List[CatalogItem]:
    return [item for item in items if contains_text(read_field(item, field, schema), text)]


def filter_by_status(items: Iterable[CatalogItem], status: Any, schema: CatalogSchema) -> List[CatalogItem]:
    """Items whose status field equals ``status``; empty when the schema has no status field."""
    status_field = schema.core_fields.status_field
    if not status_field:
        return []
    return filter_by_field(items, status_field, status, schema)


def filter_where(items: Iterable[CatalogItem], predicate: Predicate) -> List[CatalogItem]:
    return [item for item in items if predicate(item)]


def exclude_where(items: Iterable[CatalogItem], predicate: Predicate) -> List[CatalogItem]:
    return [item for item in items if not predicate(item)]


def apply_filters(
    items: Iterable[CatalogItem], filters: Sequence[Callable[[List[CatalogItem]], List[CatalogItem]]]
) -> List[CatalogItem]:
    """Chain list-to-list filters left to right."""
    result = list(items)
    for step in filters:
        result = step(result)
    return result


__all__ = [
    "RangeCriterion",
    "in_range",
    "matches_any",
    "contains_text",
    "matches_criterion",
    "filter_items",
    "filter_by_field",
    "filter_by_values",
    "filter_by_range",
    "filter_by_date_range",
    "filter_by_text",
    "filter_by_status",
    "filter_where",
    "exclude_where",
    "apply_filters",
]
