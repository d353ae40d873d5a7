"""Tests for type-aware sorting."""

from datetime import datetime, timezone
from functools import cmp_to_key

from catalog_query.core.items import CatalogItem
from catalog_query.core.query import SortSpec, compare_values, sort_by_multiple, sort_items


def _ids(items):
    return [item.id for item in items]


def test_missing_values_sort_last_ascending(scenario_items):
    """Ascending puts the item without words after present values."""
    assert _ids(sort_items(scenario_items, "words")) == ["r1", "r2", "r3"]
    shuffled = [scenario_items[2], scenario_items[1], scenario_items[0]]
    assert _ids(sort_items(shuffled, "words")) == ["r1", "r2", "r3"]


def test_descending_reverses_whole_order(scenario_items):
    """Descending is the exact reverse, so missing values come first."""
    assert _ids(sort_items(scenario_items, "words", descending=True)) == ["r3", "r2", "r1"]


def test_sort_does_not_mutate(scenario_items):
    """The input list keeps its order."""
    shuffled = [scenario_items[2], scenario_items[0], scenario_items[1]]
    sort_items(shuffled, "words")
    assert _ids(shuffled) == ["r3", "r1", "r2"]


def test_unknown_field_keeps_order(scenario_items, sample_schema):
    """Sorting by an undeclared key compares everything equal."""
    shuffled = [scenario_items[1], scenario_items[2], scenario_items[0]]
    assert _ids(sort_items(shuffled, "nope", schema=sample_schema)) == ["r2", "r3", "r1"]


def test_strings_ignore_case_and_accents():
    """String order is case- and accent-insensitive."""
    items = []
    for i, title in enumerate(["beta", "Alpha", "Éclair", "delta"]):
        item = CatalogItem(str(i))
        item.set("title", title)
        items.append(item)
    assert [i.get("title") for i in sort_items(items, "title")] == ["Alpha", "beta", "delta", "Éclair"]


def test_dates_sort_chronologically():
    """Datetimes compare by value."""
    a, b = CatalogItem("a"), CatalogItem("b")
    a.set("d", datetime(2024, 1, 2, tzinfo=timezone.utc))
    b.set("d", datetime(2023, 12, 31, tzinfo=timezone.utc))
    assert _ids(sort_items([a, b], "d")) == ["b", "a"]


def test_arrays_and_booleans_fall_back_to_strings():
    """Nominally unsortable kinds sort by their string form without raising."""
    a, b, c = CatalogItem("a"), CatalogItem("b"), CatalogItem("c")
    a.set("tags", ["zeta"])
    b.set("tags", ["alpha", "beta"])
    assert _ids(sort_items([a, b, c], "tags")) == ["b", "a", "c"]
    a.set("flag", True)
    b.set("flag", False)
    assert _ids(sort_items([a, b], "flag")) == ["b", "a"]


def test_compare_values_is_total_over_mixed_kinds():
    """Mixed kinds sort deterministically with missing values last."""
    values = ["x", None, 3, True, datetime(2020, 1, 1, tzinfo=timezone.utc), 1.5, ["a"], None]
    ordered = sorted(values, key=cmp_to_key(compare_values))
    assert ordered[:2] == [1.5, 3]
    assert ordered[-2:] == [None, None]
    assert sorted(reversed(values), key=cmp_to_key(compare_values)) == ordered


def test_sort_by_multiple(sample_items):
    """The first sort key is primary; later keys break ties."""
    result = sort_by_multiple(sample_items, [SortSpec("status"), SortSpec("year", descending=True)])
    assert _ids(result) == ["the-dunwich-horror", "the-call-of-cthulhu", "the-colour-out-of-space"]
