"""Value-level helpers: distinct values, counts and pagination."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Dict, Generic, Iterable, List, Optional, Sequence, TypeVar

from ..items import CatalogItem
from ..schemas import CatalogSchema
from .grouping import GroupKey, flatten_group_keys, group_by
from .keys import UNSET_LABEL
from .sorting import compare_values

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of a result list. ``current_page`` is zero-based."""

    items: List[T] = field(default_factory=list)
    total_pages: int = 0
    current_page: int = 0
    total_items: int = 0


def unique_values(
    items: Iterable[CatalogItem], field_key: str, schema: Optional[CatalogSchema] = None
) -> List[GroupKey]:
    """Distinct present values of a field, array elements expanded, in sort order.

    Examples:
        >>> a, b = CatalogItem("a"), CatalogItem("b")
        >>> a.set("authors", ["Smith", "Lovecraft"]); b.set("authors", ["Lovecraft"])
        >>> unique_values([a, b], "authors")
        ['Lovecraft', 'Smith']
    """
    keys = [key for key in group_by(items, field_key, schema) if key is not None]
    return sorted(keys, key=cmp_to_key(compare_values))


def count_by_field(
    items: Iterable[CatalogItem],
    field_key: str,
    schema: Optional[CatalogSchema] = None,
    unset_label: str = UNSET_LABEL,
) -> Dict[str, int]:
    """Count items per display value; array fields count once per element."""
    groups = flatten_group_keys(group_by(items, field_key, schema), unset_label)
    return {key: len(members) for key, members in groups.items()}


def most_common(
    items: Iterable[CatalogItem], field_key: str, schema: Optional[CatalogSchema] = None
) -> Optional[GroupKey]:
    """The present value shared by the most items; ties go to the first seen. None if no item has one."""
    best: Optional[GroupKey] = None
    best_count = 0
    for key, members in group_by(items, field_key, schema).items():
        if key is not None and len(members) > best_count:
            best, best_count = key, len(members)
    return best


def paginate(items: Sequence[T], page: int, per_page: int) -> Page[T]:
    """Slice out one zero-based page; out-of-range page numbers are clamped.

    A non-positive ``per_page`` puts everything on a single page.

    Examples:
        >>> p = paginate(list(range(5)), 7, 2)
        >>> (p.items, p.current_page, p.total_pages)
        ([4], 2, 3)
    """
    total = len(items)
    if per_page <= 0:
        return Page(items=list(items), total_pages=1 if total else 0, current_page=0, total_items=total)
    total_pages = -(-total // per_page)
    current = max(0, min(page, total_pages - 1))
    start = current * per_page
    return Page(
        items=list(items[start : start + per_page]),
        total_pages=total_pages,
        current_page=current,
        total_items=total,
    )


__all__ = ["Page", "unique_values", "count_by_field", "most_common", "paginate"]
