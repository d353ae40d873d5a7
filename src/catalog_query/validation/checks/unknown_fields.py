"""Unknown fields validation check.

Raw keys the schema does not declare are ignored when items are built. A
key that shows up across many records usually means the schema is missing
a field.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, List, Mapping, Optional, Sequence

from catalog_query.core.items import CatalogItem
from catalog_query.core.schemas import CatalogSchema
from ..models import CheckResult
from . import build_result


class UnknownFieldsCheck:
    """Report raw keys that no schema field declares."""

    def validate(
        self,
        items: Sequence[CatalogItem],
        raw_rows: Optional[Sequence[Mapping[str, Any]]],
        schema: CatalogSchema,
    ) -> List[CheckResult]:
        """Count undeclared keys across raw rows; one failure per distinct key."""
        if raw_rows is None:
            return []

        declared = set(schema.field_keys())
        seen: Counter = Counter()
        for raw in raw_rows:
            if isinstance(raw, Mapping):
                seen.update(str(key) for key in raw if key not in declared)

        messages = [
            f"Undeclared key '{key}' in {count} record{'s' if count != 1 else ''}"
            for key, count in sorted(seen.items(), key=lambda kv: (-kv[1], kv[0]))
        ]
        return [build_result("unknown_fields", messages)]

    def applies_to_schema(self, schema: CatalogSchema) -> bool:
        """Check applies to all schemas."""
        return True
