"""Data-quality validation for built catalogs.

- **Models**: CheckResult, ValidationReport - validation result data structures
- **Checks**: Individual validation check implementations (see validation/checks/)
- **Config**: Severity rules (import from .config)
- **Registry**: run_validation(), print_report() - check orchestration and execution

Usage:
    >>> from catalog_query.validation import run_validation, print_report
    >>> report = run_validation(items, schema, raw_rows)  # doctest: +SKIP
    >>> print_report(report)  # doctest: +SKIP

The core never reports coercion problems itself; running these checks is
how a caller finds out which raw values were dropped.
"""

from __future__ import annotations

from .models import CheckResult, ValidationReport
from .registry import ALL_CHECKS, print_report, run_validation

__all__ = [
    # Data models
    "CheckResult",
    "ValidationReport",
    # Runner functions
    "ALL_CHECKS",
    "run_validation",
    "print_report",
]
