"""Missing title validation check.

The schema's title field is what every view shows first; an item without
one is displayed by its source reference.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence

from catalog_query.core.items import CatalogItem
from catalog_query.core.schemas import CatalogSchema
from ..models import CheckResult
from . import build_result


class MissingTitleCheck:
    """Validate that every item has a non-blank title."""

    def validate(
        self,
        items: Sequence[CatalogItem],
        raw_rows: Optional[Sequence[Mapping[str, Any]]],
        schema: CatalogSchema,
    ) -> List[CheckResult]:
        title_field = schema.core_fields.title_field
        messages = []
        for item in items:
            title = item.get(title_field)
            if title is None or (isinstance(title, str) and not title.strip()):
                messages.append(f"{item.source_ref or item.id}: '{title_field}' is empty")
        return [build_result("missing_title", messages)]

    def applies_to_schema(self, schema: CatalogSchema) -> bool:
        """Check applies to all schemas."""
        return True
