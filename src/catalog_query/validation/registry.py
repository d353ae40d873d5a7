"""Validation check registry and runner.

This module orchestrates validation checks:
- ALL_CHECKS: List of all available validation check instances
- run_validation(): Executes applicable checks and returns ValidationReport
- print_report(): Displays validation results to console
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

from catalog_query.core.items import CatalogItem
from catalog_query.core.schemas import CatalogSchema
from .checks.coercion_failures import CoercionFailuresCheck
from .checks.missing_title import MissingTitleCheck
from .checks.required_fields import RequiredFieldsCheck
from .checks.unknown_fields import UnknownFieldsCheck
from .models import CheckResult, ValidationReport

logger = logging.getLogger(__name__)

# Registry of all available validation checks
ALL_CHECKS = [
    RequiredFieldsCheck(),
    MissingTitleCheck(),
    CoercionFailuresCheck(),
    UnknownFieldsCheck(),
]


def run_validation(
    items: Sequence[CatalogItem],
    schema: CatalogSchema,
    raw_rows: Optional[Sequence[Mapping[str, Any]]] = None,
    records_path: Optional[Path] = None,
) -> ValidationReport:
    """Run all applicable validation checks on a built catalog.

    Args:
        items: Items built with ``schema``.
        schema: The catalog schema.
        raw_rows: Raw records the items were built from, in the same order.
            Checks that compare raw and built data are skipped without them.
        records_path: Source file, shown in the report.

    Returns:
        ValidationReport containing aggregated results from all applicable checks.

    Raises:
        ValueError: If ``raw_rows`` and ``items`` differ in length.

    Examples:
        >>> report = run_validation(items, schema, raw_rows)  # doctest: +SKIP
        >>> print(report.summary())  # doctest: +SKIP
    """
    if raw_rows is not None and len(raw_rows) != len(items):
        raise ValueError(
            f"raw_rows has {len(raw_rows)} entries but {len(items)} items were given; "
            f"they must be index-aligned"
        )

    all_results: List[CheckResult] = []
    for check in ALL_CHECKS:
        if not check.applies_to_schema(schema):
            logger.debug("Skipping %s: not applicable to %s", type(check).__name__, schema.catalog_name)
            continue
        results = check.validate(items, raw_rows, schema)
        for result in results:
            logger.debug("%s: passed=%s fail_count=%d", result.check_id, result.passed, result.fail_count)
        all_results.extend(results)

    return ValidationReport(
        results=all_results,
        catalog_name=schema.catalog_name,
        item_count=len(items),
        records_path=records_path,
    )


def print_report(report: ValidationReport) -> None:
    """Print validation report to console.

    Displays a summary followed by details of all failed checks.
    """
    print(report.summary())
    print()

    failed = report.get_failed_checks()

    if not failed:
        print("✅ All validation checks passed!")
        return

    print("Failed Checks:")
    for result in failed:
        icon = "❌" if result.severity == "error" else "⚠️"
        print(f"{icon} {result.check_id} ({result.severity}): {result.fail_count} failures")

        for msg in result.messages:
            print(f"   - {msg}")
        if result.fail_count > len(result.messages):
            print(f"   ... and {result.fail_count - len(result.messages)} more")
