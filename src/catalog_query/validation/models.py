"""Validation data models.

This module defines core data structures for validation results:
- CheckResult: Outcome of a single validation check
- ValidationReport: Aggregated results from all checks over one catalog
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class CheckResult:
    """Result of a single validation check.

    Attributes:
        check_id: Unique identifier for the check (e.g., "required_fields").
        severity: Severity level - "error" for critical issues, "warning" for review items.
        passed: True if check passed without issues, False otherwise.
        fail_count: Number of failures detected (0 if passed).
        messages: Detailed failure messages naming the offending items.

    Examples:
        >>> CheckResult(
        ...     check_id="missing_title",
        ...     severity="warning",
        ...     passed=False,
        ...     fail_count=1,
        ...     messages=["works/untitled.md: title is empty"]
        ... )  # doctest: +ELLIPSIS
        CheckResult(check_id='missing_title', ...)
    """

    check_id: str
    severity: str  # "error" | "warning"
    passed: bool
    fail_count: int
    messages: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.severity not in ("error", "warning"):
            raise ValueError(f"Invalid severity: {self.severity}. Must be 'error' or 'warning'.")
        if self.passed and self.fail_count != 0:
            raise ValueError("passed=True requires fail_count=0")
        if not self.passed and self.fail_count == 0:
            raise ValueError("passed=False requires fail_count > 0")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "check_id": self.check_id,
            "severity": self.severity,
            "passed": self.passed,
            "fail_count": self.fail_count,
            "messages": list(self.messages),
        }


@dataclass
class ValidationReport:
    """Aggregated validation results for one catalog.

    Attributes:
        results: List of check results (one per validation check).
        catalog_name: Name of the schema's catalog.
        item_count: Number of items validated.
        records_path: File the raw records came from, when known.
    """

    results: List[CheckResult]
    catalog_name: str
    item_count: int = 0
    records_path: Optional[Path] = None

    def has_errors(self, strict: bool = False) -> bool:
        """Check if validation failed.

        Args:
            strict: If True, treat warnings as errors. Default False.

        Returns:
            True if any errors found (or warnings in strict mode), False otherwise.
        """
        for result in self.results:
            if result.passed:
                continue
            if result.severity == "error" or strict:
                return True
        return False

    def get_error_count(self) -> int:
        return sum(r.fail_count for r in self.results if r.severity == "error" and not r.passed)

    def get_warning_count(self) -> int:
        return sum(r.fail_count for r in self.results if r.severity == "warning" and not r.passed)

    def get_failed_checks(self, severity: Optional[str] = None) -> List[CheckResult]:
        """Get all failed checks, optionally filtered by severity ("error" or "warning")."""
        return [
            r for r in self.results if not r.passed and (severity is None or r.severity == severity)
        ]

    def summary(self) -> str:
        """Generate a concise text summary of validation results.

        Examples:
            >>> print(report.summary())  # doctest: +SKIP
            Validation Summary:
              Catalog: Library (records.yaml, 12 items)
              Checks: 4 executed (3 passed, 1 warnings, 0 failed)
              Issues: 0 errors, 2 warnings
        """
        total = len(self.results)
        passed = sum(1 for r in self.results if r.passed)
        warning_checks = len(self.get_failed_checks("warning"))
        failed_checks = len(self.get_failed_checks("error"))
        source = f"{self.records_path.name}, " if self.records_path else ""

        return (
            f"Validation Summary:\n"
            f"  Catalog: {self.catalog_name} ({source}{self.item_count} items)\n"
            f"  Checks: {total} executed ({passed} passed, {warning_checks} warnings, "
            f"{failed_checks} failed)\n"
            f"  Issues: {self.get_error_count()} errors, {self.get_warning_count()} warnings"
        )

    def to_json(self) -> str:
        """Generate detailed JSON validation report."""
        report_data = {
            "metadata": {
                "catalog_name": self.catalog_name,
                "records_path": self.records_path.name if self.records_path else None,
                "item_count": self.item_count,
                "generated_at": datetime.now().isoformat(),
            },
            "summary": {
                "total_rules": len(self.results),
                "passed": sum(1 for r in self.results if r.passed),
                "with_warnings": len(self.get_failed_checks("warning")),
                "with_errors": len(self.get_failed_checks("error")),
                "errors": self.get_error_count(),
                "warnings": self.get_warning_count(),
            },
            "results": [r.to_dict() for r in sorted(self.results, key=lambda r: r.check_id)],
        }
        return json.dumps(report_data, indent=2, ensure_ascii=False)

    def to_console_summary(self) -> str:
        """Summary plus one line (and the first message) per failed check."""
        lines = [self.summary(), ""]

        failed_checks = self.get_failed_checks()

        if not failed_checks:
            lines.append("✅ All validation checks passed!")
        else:
            lines.append("Check Details:")
            for result in failed_checks:
                icon = "❌" if result.severity == "error" else "⚠️"
                lines.append(
                    f"{icon} {result.check_id} ({result.severity}): {result.fail_count} failures"
                )
                if result.messages:
                    lines.append(f"   - {result.messages[0]}")

        return "\n".join(lines)
