"""Type-aware sorting of catalog items.

Every sort path goes through ``compare_values``, so missing-value placement
is the same everywhere: in ascending order a missing value sorts after all
present values; ``descending`` reverses the whole order, which moves missing
values to the front.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from functools import cmp_to_key
from typing import Any, Iterable, List, Optional, Sequence

from ..coercion import value_kind
from ..enums import FieldType
from ..items import CatalogItem, read_field
from ..schemas import CatalogSchema
from .keys import flatten_key, text_sort_key

# Rank of each value kind when two present values of different kinds meet.
_KIND_RANK = {
    FieldType.NUMBER: 0,
    FieldType.DATE: 1,
    FieldType.STRING: 2,
    FieldType.BOOLEAN: 3,
    FieldType.ARRAY: 4,
    FieldType.OBJECT: 5,
    None: 6,
}


@dataclass(frozen=True)
class SortSpec:
    """One sort key: field plus direction."""

    field: str
    descending: bool = False


def _sign(a: Any, b: Any) -> int:
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _text_tuple(value: Any) -> tuple:
    text = value if isinstance(value, str) else flatten_key(value)
    return (text_sort_key(text), text)


def compare_values(a: Any, b: Any) -> int:
    """Ascending three-way comparison of two stored values.

    - Both missing: equal. One missing: the missing one is greater.
    - Numbers and dates compare by value.
    - Strings compare by a case/accent-insensitive key, then by raw text.
    - Booleans, arrays and objects compare by their string form.
    - Values of different kinds are ordered by kind.
    """
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1

    kind_a, kind_b = value_kind(a), value_kind(b)
    if kind_a != kind_b:
        return _sign(_KIND_RANK[kind_a], _KIND_RANK[kind_b])
    if kind_a is FieldType.NUMBER:
        return _sign(a, b)
    if kind_a is FieldType.DATE:
        return _sign(_aware(a), _aware(b))
    return _sign(_text_tuple(a), _text_tuple(b))


def sort_items(
    items: Iterable[CatalogItem],
    field: str,
    descending: bool = False,
    schema: Optional[CatalogSchema] = None,
) -> List[CatalogItem]:
    """Return a new list of items ordered by ``field``. Input is not mutated.

    The sort is stable. With a schema, undeclared keys read as missing for
    every item, which leaves the order unchanged.

    Examples:
        >>> a, b, c = CatalogItem("a"), CatalogItem("b"), CatalogItem("c")
        >>> a.set("words", 1000); b.set("words", 2000)
        >>> [i.id for i in sort_items([c, a, b], "words")]
        ['a', 'b', 'c']
        >>> [i.id for i in sort_items([c, a, b], "words", descending=True)]
        ['c', 'b', 'a']
    """

    def compare(left: CatalogItem, right: CatalogItem) -> int:
        return compare_values(read_field(left, field, schema), read_field(right, field, schema))

    return sorted(items, key=cmp_to_key(compare), reverse=descending)


def sort_by_multiple(
    items: Iterable[CatalogItem],
    sorts: Sequence[SortSpec],
    schema: Optional[CatalogSchema] = None,
) -> List[CatalogItem]:
    """Sort by several keys; the first SortSpec is the primary key."""
    result = list(items)
    for sort_spec in reversed(sorts):
        result = sort_items(result, sort_spec.field, sort_spec.descending, schema)
    return result


__all__ = ["SortSpec", "compare_values", "sort_items", "sort_by_multiple"]
