"""Display formatting for field values.

Purely presentational: turns a stored value into a display string for a
table cell or label. Parsing lives in ``coercion``; nothing here feeds back
into stored values.
"""

from __future__ import annotations

import math
import numbers
import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Optional

from .coercion import is_missing, parse_date
from .enums import ArrayItemType, FieldType
from .schemas import SchemaField

EMPTY_DISPLAY = "-"

_WIKILINK_RE = re.compile(r"\[\[(.*?)\]\]")


def format_date(value: Any) -> str:
    """Format as ``YYYY-MM-DD``; unparsable strings are shown as-is."""
    if is_missing(value):
        return EMPTY_DISPLAY
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, str):
        parsed = parse_date(value)
        return parsed.strftime("%Y-%m-%d") if parsed else value
    return EMPTY_DISPLAY


def format_number(value: Any, *, use_grouping: bool = True) -> str:
    """Format a number, optionally with thousands separators.

    Examples:
        >>> format_number(15000)
        '15,000'
        >>> format_number("12.5", use_grouping=False)
        '12.5'
    """
    if is_missing(value) or isinstance(value, bool):
        return EMPTY_DISPLAY
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return EMPTY_DISPLAY
    if not isinstance(value, numbers.Real):
        return EMPTY_DISPLAY
    if isinstance(value, float):
        if not math.isfinite(value):
            return EMPTY_DISPLAY
        if value.is_integer():
            value = int(value)
    return f"{value:,}" if use_grouping else str(value)


def format_boolean(value: Any) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes"):
            return "Yes"
        if lowered in ("false", "0", "no"):
            return "No"
    return EMPTY_DISPLAY


def format_array(value: Any, max_items: Optional[int] = None) -> str:
    """Join array items with ``, ``; truncated lists end with ``...``."""
    if not isinstance(value, (list, tuple)) or not value:
        return EMPTY_DISPLAY
    items = [str(v) for v in value]
    if max_items is not None and len(items) > max_items:
        return ", ".join(items[:max_items]) + ", ..."
    return ", ".join(items)


def wikilink_label(link: str) -> str:
    """Return the text inside ``[[...]]``, or the input when it is not a link."""
    match = _WIKILINK_RE.search(link)
    return match.group(1) if match else link


def format_wikilink_array(value: Any, max_items: Optional[int] = None) -> str:
    if not isinstance(value, (list, tuple)) or not value:
        return EMPTY_DISPLAY
    labels = [wikilink_label(v) if isinstance(v, str) else str(v) for v in value]
    return format_array([label for label in labels if label], max_items)


def format_object(value: Any) -> str:
    if is_missing(value):
        return EMPTY_DISPLAY
    if isinstance(value, Mapping):
        if not value:
            return "[Object]"
        return f"[Object: {', '.join(str(k) for k in value)}]"
    return str(value)


def format_field_value(
    value: Any, field: SchemaField, max_items: Optional[int] = None, *, use_grouping: bool = True
) -> str:
    """Format ``value`` for display according to the field's declared type.

    Args:
        value: Stored value.
        field: Declaration whose type selects the formatter.
        max_items: Truncate arrays after this many elements.
        use_grouping: Thousands separators for numbers. Exports turn this off.
    """
    if is_missing(value):
        return EMPTY_DISPLAY
    if field.type is FieldType.DATE:
        return format_date(value)
    if field.type is FieldType.NUMBER:
        return format_number(value, use_grouping=use_grouping)
    if field.type is FieldType.BOOLEAN:
        return format_boolean(value)
    if field.type is FieldType.ARRAY:
        if field.array_item_type is ArrayItemType.WIKILINK:
            return format_wikilink_array(value, max_items)
        return format_array(value, max_items)
    if field.type is FieldType.OBJECT:
        return format_object(value)
    return str(value)


__all__ = [
    "EMPTY_DISPLAY",
    "format_date",
    "format_number",
    "format_boolean",
    "format_array",
    "wikilink_label",
    "format_wikilink_array",
    "format_object",
    "format_field_value",
]
