"""Validation severity rules.

Severity Levels:
    - "error": The item cannot be used as intended (e.g. a required field is unset)
    - "warning": Worth a look but the item is still usable
"""

from __future__ import annotations

# ============================================================================
# SEVERITY RULES
# ============================================================================

# Required fields unset - error; the schema says the catalog depends on them
REQUIRED_FIELDS_SEVERITY = "error"

# Empty title - warning; ensure_title can fall back to the source reference
MISSING_TITLE_SEVERITY = "warning"

# Raw value present but not convertible to the declared type
COERCION_FAILURES_SEVERITY = "warning"

# Raw keys the schema does not declare - warning; they are ignored on build
UNKNOWN_FIELDS_SEVERITY = "warning"

_SEVERITY_MAP = {
    "required_fields": REQUIRED_FIELDS_SEVERITY,
    "missing_title": MISSING_TITLE_SEVERITY,
    "coercion_failures": COERCION_FAILURES_SEVERITY,
    "unknown_fields": UNKNOWN_FIELDS_SEVERITY,
}

# Per-check cap on detail messages; fail_count still reports the full total
MAX_MESSAGES_PER_CHECK = 50


def get_severity(check_id: str) -> str:
    """Get severity level for a check.

    Raises:
        ValueError: If check_id is unknown.

    Examples:
        >>> get_severity("required_fields")
        'error'
        >>> get_severity("unknown_fields")
        'warning'
    """
    if check_id not in _SEVERITY_MAP:
        raise ValueError(f"Unknown check_id: {check_id}")
    return _SEVERITY_MAP[check_id]
