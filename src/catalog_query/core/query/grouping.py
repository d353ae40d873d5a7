"""Grouping of catalog items by field value.

Array values fan out: an item joins one group per array element. Items
without a value land in the unset group keyed by ``None``. Group keys keep
their stored type (numbers stay numbers) so callers can order groups
numerically; ``flatten_key`` turns a key into a display string.
"""

from __future__ import annotations

import numbers
from collections.abc import Mapping
from datetime import datetime
from functools import cmp_to_key
from typing import Callable, Dict, Hashable, Iterable, Iterator, List, Optional, Tuple, TypeVar, Union

from ..coercion import coerce_date, is_missing
from ..items import CatalogItem, read_field
from ..schemas import CatalogSchema
from .keys import SEQUENCE_TYPES, UNSET_LABEL, flatten_key, text_sort_key
from .sorting import compare_values

GroupKey = Optional[Union[str, int, float, datetime]]
Groups = Dict[GroupKey, List[CatalogItem]]

K = TypeVar("K", bound=Hashable)

GROUP_ORDERS = ("alphabetical", "count-desc", "count-asc")


def _hashable_key(value: object) -> GroupKey:
    # True == 1 as dict keys, so booleans key on their display string
    if isinstance(value, bool):
        return flatten_key(value)
    if isinstance(value, (str, numbers.Real, datetime)):
        return value  # type: ignore[return-value]
    return flatten_key(value)


def _keys_for(value: object) -> List[GroupKey]:
    if is_missing(value):
        return [None]
    if isinstance(value, SEQUENCE_TYPES):
        keys = [_hashable_key(v) for v in value if not is_missing(v)]
        return keys or [None]
    return [_hashable_key(value)]


def group_by(
    items: Iterable[CatalogItem], field: str, schema: Optional[CatalogSchema] = None
) -> Groups:
    """Group items by the value of ``field``.

    Args:
        items: Items to group.
        field: Field key to group on.
        schema: When given, keys the schema does not declare read as unset.

    Returns:
        Mapping of group key to member items, in first-seen key order. Empty
        arrays and missing values share the ``None`` (unset) group.
        Booleans are keyed as ``"true"`` and ``"false"``.
    """
    groups: Groups = {}
    for item in items:
        for key in _keys_for(read_field(item, field, schema)):
            groups.setdefault(key, []).append(item)
    return groups


def group_by_status(items: Iterable[CatalogItem], schema: CatalogSchema) -> Groups:
    """Group by the schema's status field; empty when the schema has none."""
    status_field = schema.core_fields.status_field
    if not status_field:
        return {}
    return group_by(items, status_field, schema)


def group_by_custom(
    items: Iterable[CatalogItem], key_fn: Callable[[CatalogItem], Optional[K]]
) -> Dict[Optional[K], List[CatalogItem]]:
    groups: Dict[Optional[K], List[CatalogItem]] = {}
    for item in items:
        groups.setdefault(key_fn(item), []).append(item)
    return groups


def group_by_date_month(
    items: Iterable[CatalogItem], field: str, schema: Optional[CatalogSchema] = None
) -> Dict[Optional[str], List[CatalogItem]]:
    """Group by ``YYYY-MM`` of a date field, newest month first, unset group last."""
    buckets: Dict[Optional[str], List[CatalogItem]] = {}
    for item in items:
        value = read_field(item, field, schema)
        when = value if isinstance(value, datetime) else coerce_date(value)
        key = when.strftime("%Y-%m") if when is not None else None
        buckets.setdefault(key, []).append(item)

    ordered: Dict[Optional[str], List[CatalogItem]] = {}
    for key in sorted((k for k in buckets if k is not None), reverse=True):
        ordered[key] = buckets[key]
    if None in buckets:
        ordered[None] = buckets[None]
    return ordered


def flatten_groups(groups: Mapping[GroupKey, List[CatalogItem]]) -> List[CatalogItem]:
    """Concatenate group members in group order (fanned-out items repeat)."""
    result: List[CatalogItem] = []
    for members in groups.values():
        result.extend(members)
    return result


def iter_group_pairs(
    groups: Mapping[GroupKey, List[CatalogItem]],
) -> Iterator[Tuple[GroupKey, CatalogItem]]:
    """Yield every ``(key, item)`` membership pair."""
    for key, members in groups.items():
        for item in members:
            yield key, item


def flatten_group_keys(
    groups: Mapping[GroupKey, List[CatalogItem]], unset_label: str = UNSET_LABEL
) -> Dict[str, List[CatalogItem]]:
    """Re-key groups by display string; keys that flatten alike are merged."""
    flat: Dict[str, List[CatalogItem]] = {}
    for key, members in groups.items():
        flat.setdefault(flatten_key(key, unset_label), []).extend(members)
    return flat


def get_group_keys(groups: Mapping[GroupKey, List[CatalogItem]], descending: bool = False) -> List[GroupKey]:
    """Return group keys in value order; the unset key sorts like a missing value."""
    return sorted(groups.keys(), key=cmp_to_key(compare_values), reverse=descending)


def sort_groups(
    groups: Mapping[GroupKey, List[CatalogItem]], order: str = "count-desc"
) -> List[Tuple[GroupKey, List[CatalogItem]]]:
    """Order groups for display.

    Args:
        groups: Output of ``group_by``.
        order: ``alphabetical`` (unset last), ``count-desc`` or ``count-asc``.
            Unknown orders keep insertion order.
    """
    entries = list(groups.items())
    if order == "alphabetical":
        entries.sort(key=lambda entry: (entry[0] is None, text_sort_key(flatten_key(entry[0]))))
    elif order == "count-desc":
        entries.sort(key=lambda entry: len(entry[1]), reverse=True)
    elif order == "count-asc":
        entries.sort(key=lambda entry: len(entry[1]))
    return entries


__all__ = [
    "GroupKey",
    "Groups",
    "UNSET_LABEL",
    "GROUP_ORDERS",
    "flatten_key",
    "group_by",
    "group_by_status",
    "group_by_custom",
    "group_by_date_month",
    "flatten_groups",
    "iter_group_pairs",
    "flatten_group_keys",
    "get_group_keys",
    "sort_groups",
]
