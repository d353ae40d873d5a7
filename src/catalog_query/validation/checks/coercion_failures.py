"""Coercion failures validation check.

A raw value that is present but cannot be converted to its field's declared
type leaves the field unset on the built item. The build stays silent about
it; this check reports each such value so the source document can be fixed.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence

from catalog_query.core.coercion import is_missing
from catalog_query.core.items import CatalogItem
from catalog_query.core.schemas import CatalogSchema
from ..models import CheckResult
from . import build_result


def _preview(value: Any, limit: int = 40) -> str:
    text = repr(value)
    return text if len(text) <= limit else text[: limit - 3] + "..."


class CoercionFailuresCheck:
    """Validate that every present raw value survived coercion."""

    def validate(
        self,
        items: Sequence[CatalogItem],
        raw_rows: Optional[Sequence[Mapping[str, Any]]],
        schema: CatalogSchema,
    ) -> List[CheckResult]:
        """Compare raw rows with the items built from them.

        Returns:
            Empty list without raw rows; otherwise a single CheckResult with
            one failure per dropped value.
        """
        if raw_rows is None:
            return []

        messages = []
        for item, raw in zip(items, raw_rows):
            if not isinstance(raw, Mapping):
                continue
            for field in schema.fields:
                value = raw.get(field.key)
                if is_missing(value) or item.has(field.key):
                    continue
                messages.append(
                    f"{item.source_ref or item.id}: '{field.key}' is not a valid "
                    f"{field.type.value} ({_preview(value)})"
                )
        return [build_result("coercion_failures", messages)]

    def applies_to_schema(self, schema: CatalogSchema) -> bool:
        """Check applies to all schemas."""
        return True
