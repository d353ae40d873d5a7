"""Validation checks base interface.

This module defines the protocol (interface) that all validation checks must implement.
Each check looks at one data-quality aspect of a built catalog (required fields,
titles, values that failed coercion, undeclared raw keys).

To implement a new validation check:

1. Create a new file in this directory (e.g., `my_check.py`)
2. Define a class that implements the ValidationCheck protocol
3. Implement the required methods: `validate()` and `applies_to_schema()`
4. Add the check to the ALL_CHECKS list in registry.py

Example:
    ```python
    # checks/my_check.py
    from typing import List, Mapping, Optional, Sequence
    from catalog_query.core.items import CatalogItem
    from catalog_query.core.schemas import CatalogSchema
    from ..models import CheckResult
    from . import build_result

    class MyCheck:
        def validate(
            self,
            items: Sequence[CatalogItem],
            raw_rows: Optional[Sequence[Mapping]],
            schema: CatalogSchema,
        ) -> List[CheckResult]:
            messages = [...]
            return [build_result("my_check", messages)]

        def applies_to_schema(self, schema: CatalogSchema) -> bool:
            return True
    ```
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Protocol, Sequence

from catalog_query.core.items import CatalogItem
from catalog_query.core.schemas import CatalogSchema
from ..config import MAX_MESSAGES_PER_CHECK, get_severity
from ..models import CheckResult


class ValidationCheck(Protocol):
    """Protocol defining the interface for validation checks.

    Use duck typing (Protocol) - no need to inherit from a base class.
    """

    def validate(
        self,
        items: Sequence[CatalogItem],
        raw_rows: Optional[Sequence[Mapping[str, Any]]],
        schema: CatalogSchema,
    ) -> List[CheckResult]:
        """Run the validation check.

        Args:
            items: Built items.
            raw_rows: Untyped records the items were built from, index-aligned
                with ``items``. None when only built items are available.
            schema: Schema the items were built with.

        Returns:
            List of CheckResult objects. Empty when the check has nothing to
            look at (e.g. raw rows are needed but not given).
        """
        ...

    def applies_to_schema(self, schema: CatalogSchema) -> bool:
        """Return True if the check should run for this schema."""
        ...


def build_result(check_id: str, messages: List[str], fail_count: Optional[int] = None) -> CheckResult:
    """Build a pass/fail CheckResult from failure messages.

    ``fail_count`` defaults to the number of messages; the stored messages
    are capped at ``MAX_MESSAGES_PER_CHECK``.
    """
    count = len(messages) if fail_count is None else fail_count
    return CheckResult(
        check_id=check_id,
        severity=get_severity(check_id),
        passed=count == 0,
        fail_count=count,
        messages=messages[:MAX_MESSAGES_PER_CHECK],
    )


__all__ = ["ValidationCheck", "build_result"]
