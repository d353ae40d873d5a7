"""Statistics data models.

Plain dataclasses returned by the statistics engine:
- DateRange: min/max over valid dates (or numeric years)
- BaseStatistics: count, total, average and date range
- GroupStatistics: base statistics for one group
- CatalogStatistics: base statistics plus named distributions
- AggregateStatistics: base statistics plus data-completeness counters
- NumericSummary: count/sum/avg/min/max over one numeric field

Every model has ``to_dict()`` returning JSON-ready data; datetimes become
ISO-8601 strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Union

RangeBound = Optional[Union[int, float, datetime]]


def _bound_to_json(value: RangeBound) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of the date field. Both bounds are None when no item has a valid date."""

    min: RangeBound = None
    max: RangeBound = None

    def to_dict(self) -> Dict[str, Any]:
        return {"min": _bound_to_json(self.min), "max": _bound_to_json(self.max)}


@dataclass(frozen=True)
class BaseStatistics:
    """Count, total and average of a value field plus the date range.

    Attributes:
        count: Number of items, including those without a value.
        total_value: Sum of present numeric values.
        average_value: ``total_value / count``, or 0 for an empty input.
        date_range: Range over items with a valid date.
    """

    count: int = 0
    total_value: Union[int, float] = 0
    average_value: float = 0
    date_range: DateRange = field(default_factory=DateRange)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "total_value": self.total_value,
            "average_value": self.average_value,
            "date_range": self.date_range.to_dict(),
        }


@dataclass(frozen=True)
class GroupStatistics(BaseStatistics):
    pass


@dataclass(frozen=True)
class CatalogStatistics(BaseStatistics):
    """Base statistics plus per-field distributions.

    ``distributions`` maps a field key to ``{display value: item count}``;
    array fields count each element.
    """

    distributions: Dict[str, Dict[str, int]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["distributions"] = {key: dict(counts) for key, counts in self.distributions.items()}
        return data


@dataclass(frozen=True)
class AggregateStatistics(BaseStatistics):
    """Base statistics plus how many items had a valid value and date."""

    valid_value_count: int = 0
    valid_date_count: int = 0

    def value_completeness(self) -> float:
        """Share of items with a valid value, 0 for an empty input."""
        return self.valid_value_count / self.count if self.count else 0.0

    def date_completeness(self) -> float:
        return self.valid_date_count / self.count if self.count else 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["valid_value_count"] = self.valid_value_count
        data["valid_date_count"] = self.valid_date_count
        return data


@dataclass(frozen=True)
class NumericSummary:
    """Summary of present numeric values. All zeros when there are none."""

    count: int = 0
    sum: Union[int, float] = 0
    avg: float = 0
    min: Union[int, float] = 0
    max: Union[int, float] = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"count": self.count, "sum": self.sum, "avg": self.avg, "min": self.min, "max": self.max}


__all__ = [
    "DateRange",
    "BaseStatistics",
    "GroupStatistics",
    "CatalogStatistics",
    "AggregateStatistics",
    "NumericSummary",
]
