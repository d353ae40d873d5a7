"""Required fields validation check.

Every field the schema flags ``required`` must hold a value on every item.
``False``, ``0`` and empty strings count as values.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence

from catalog_query.core.items import CatalogItem
from catalog_query.core.schemas import CatalogSchema, get_required_fields
from ..models import CheckResult
from . import build_result


class RequiredFieldsCheck:
    """Validate that required fields are set."""

    def validate(
        self,
        items: Sequence[CatalogItem],
        raw_rows: Optional[Sequence[Mapping[str, Any]]],
        schema: CatalogSchema,
    ) -> List[CheckResult]:
        """Check every item for unset required fields.

        Returns:
            List containing single CheckResult; one failure per (item, field) pair.
        """
        required = get_required_fields(schema)
        messages = []
        for item in items:
            missing = [f.key for f in required if not item.has(f.key)]
            if missing:
                messages.extend(f"{item.source_ref or item.id}: missing '{key}'" for key in missing)
        return [build_result("required_fields", messages)]

    def applies_to_schema(self, schema: CatalogSchema) -> bool:
        """Only schemas that declare required fields."""
        return bool(get_required_fields(schema))
