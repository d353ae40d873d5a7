"""Query engine public API.

Filtering, sorting, grouping and value helpers over lists of
``CatalogItem``. Every function takes the schema explicitly (optional for
most) and returns new lists; inputs are never mutated.
"""

from .filters import (
    RangeCriterion,
    apply_filters,
    exclude_where,
    filter_by_date_range,
    filter_by_field,
    filter_by_range,
    filter_by_status,
    filter_by_text,
    filter_by_values,
    filter_items,
    filter_where,
    matches_criterion,
)
from .grouping import (
    GROUP_ORDERS,
    flatten_group_keys,
    flatten_groups,
    get_group_keys,
    group_by,
    group_by_custom,
    group_by_date_month,
    group_by_status,
    iter_group_pairs,
    sort_groups,
)
from .keys import UNSET_LABEL, flatten_key, text_sort_key
from .sorting import SortSpec, compare_values, sort_by_multiple, sort_items
from .values import Page, count_by_field, most_common, paginate, unique_values

__all__ = [
    "RangeCriterion",
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
    "SortSpec",
    "compare_values",
    "sort_items",
    "sort_by_multiple",
    "UNSET_LABEL",
    "GROUP_ORDERS",
    "flatten_key",
    "text_sort_key",
    "group_by",
    "group_by_status",
    "group_by_custom",
    "group_by_date_month",
    "flatten_groups",
    "flatten_group_keys",
    "iter_group_pairs",
    "get_group_keys",
    "sort_groups",
    "Page",
    "unique_values",
    "count_by_field",
    "most_common",
    "paginate",
]
