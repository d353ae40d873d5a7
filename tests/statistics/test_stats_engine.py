"""Tests for the statistics engine."""

import json
from datetime import datetime, timezone

import pytest

from catalog_query.core.items import CatalogItem
from catalog_query.core.query import group_by
from catalog_query.statistics import (
    AggregateStatistics,
    DateRange,
    aggregate_by_field,
    aggregate_stats,
    base_stats,
    catalog_stats,
    group_stats,
    numeric_summary,
    stats_per_group,
)


def test_base_stats_empty():
    """An empty input gives zeros and an open date range, never NaN."""
    stats = base_stats([], "words", "year")
    assert stats.count == 0
    assert stats.total_value == 0
    assert stats.average_value == 0
    assert stats.date_range == DateRange(None, None)


def test_group_stats_per_status(scenario_items):
    """Draft averages over both items; final has no words and averages to zero."""
    groups = group_by(scenario_items, "status")
    draft = group_stats(groups["draft"], "words", "year")
    final = group_stats(groups["final"], "words", "year")
    assert (draft.count, draft.total_value, draft.average_value) == (2, 3000, 1500)
    assert (final.count, final.total_value, final.average_value) == (1, 0, 0)


def test_items_without_value_still_count(scenario_items):
    """The average divides by every item, not just those with a value."""
    stats = base_stats(scenario_items, "words", "year")
    assert stats.count == 3
    assert stats.total_value == 3000
    assert stats.average_value == pytest.approx(1000)


def test_numeric_date_range(sample_items, sample_schema):
    """A numeric year field gives a numeric range."""
    stats = base_stats(sample_items, "words", "year", sample_schema)
    assert stats.date_range == DateRange(1927, 1929)


def test_datetime_date_range(sample_items, sample_schema):
    """A date field gives a datetime range over items with a valid date."""
    stats = base_stats(sample_items, "words", "published", sample_schema)
    assert stats.date_range.min == datetime(1928, 2, 1, tzinfo=timezone.utc)
    assert stats.date_range.max == datetime(1929, 4, 1, tzinfo=timezone.utc)
    assert stats.to_dict()["date_range"] == {
        "min": "1928-02-01T00:00:00+00:00",
        "max": "1929-04-01T00:00:00+00:00",
    }


def test_booleans_are_not_summed():
    """True is not the number 1 for statistics."""
    item = CatalogItem("a")
    item.set("words", True)
    assert base_stats([item], "words", "year").total_value == 0


def test_stats_per_group(scenario_items):
    """One GroupStatistics per group key."""
    per_group = stats_per_group(group_by(scenario_items, "status"), "words", "year")
    assert per_group["draft"].total_value == 3000
    assert per_group["final"].count == 1


def test_catalog_stats_distributions(sample_items, sample_schema):
    """Distributions count items per display value, fanning out arrays."""
    stats = catalog_stats(sample_items, "words", "year", ["status", "authors"], sample_schema)
    assert stats.distributions["status"] == {"draft": 2, "final": 1}
    assert stats.distributions["authors"] == {
        "[[Lovecraft, H. P.]]": 2,
        "[[Smith, Clark Ashton]]": 1,
        "(unset)": 1,
    }
    assert json.loads(json.dumps(stats.to_dict()))["count"] == 3


def test_aggregate_stats_counters(sample_items, sample_schema):
    """Validity counters count items with a usable value and date."""
    stats = aggregate_stats(sample_items, "words", "published", sample_schema)
    assert isinstance(stats, AggregateStatistics)
    assert stats.valid_value_count == 2
    assert stats.valid_date_count == 2
    assert stats.value_completeness() == pytest.approx(2 / 3)
    assert stats.to_dict()["valid_date_count"] == 2


def test_numeric_summary(scenario_items):
    """Summary over present numbers only."""
    summary = numeric_summary(scenario_items, "words")
    assert summary.to_dict() == {"count": 2, "sum": 3000, "avg": 1500, "min": 1000, "max": 2000}
    assert numeric_summary(scenario_items, "nope").count == 0


def test_aggregate_by_field(sample_items):
    """Aggregation per group of another field."""
    sums = aggregate_by_field(sample_items, "authors", "words", "sum")
    assert sums == {"[[Lovecraft, H. P.]]": 3000, "[[Smith, Clark Ashton]]": 2000, "(unset)": 0}
    counts = aggregate_by_field(sample_items, "status", "words", "count")
    assert counts == {"draft": 2, "final": 0}


def test_aggregate_by_field_rejects_unknown_operation(sample_items):
    """Unknown operations raise ValueError."""
    with pytest.raises(ValueError, match="Unknown aggregation"):
        aggregate_by_field(sample_items, "status", "words", "median")
