"""Type coercion engine.

The single point where untyped raw values become typed field values. Every
function here is total: a value that cannot be converted to the declared
type comes back as ``None`` (absent), never as an exception, a log line, or a
type-specific zero value.

Stored value kinds form a closed set (see ``FieldValue``):

- ``str`` for ``string`` fields
- ``int`` / ``float`` (finite) for ``number`` fields
- ``bool`` for ``boolean`` fields
- timezone-aware UTC ``datetime`` for ``date`` fields
- ``list[str]`` for ``array`` fields
- ``dict`` for ``object`` fields
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Union, assert_never

import pandas as pd

from .enums import FieldType
from .schemas import SchemaField

FieldValue = Union[str, int, float, bool, datetime, List[str], Dict[str, Any]]

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def is_missing(value: Any) -> bool:
    """True for None, NaN floats (numpy included), ``pd.NaT`` and ``pd.NA``."""
    if value is None or value is pd.NaT or value is pd.NA:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return False


def value_kind(value: Any) -> Optional[FieldType]:
    """Classify a stored value into its field type, or None if it is not one.

    ``bool`` is checked before numbers since it is an ``int`` subclass.
    """
    if is_missing(value):
        return None
    if isinstance(value, str):
        return FieldType.STRING
    if isinstance(value, bool):
        return FieldType.BOOLEAN
    if isinstance(value, numbers.Real):
        return FieldType.NUMBER
    if isinstance(value, datetime):
        return FieldType.DATE
    if isinstance(value, _SEQUENCE_TYPES):
        return FieldType.ARRAY
    if isinstance(value, Mapping):
        return FieldType.OBJECT
    return None


def _number_to_string(value: numbers.Real) -> str:
    if isinstance(value, numbers.Integral):
        return str(int(value))
    number = float(value)
    if math.isfinite(number) and number.is_integer():
        return str(int(number))
    return str(number)


def coerce_string(raw: Any) -> Optional[str]:
    """Strings pass, numbers/booleans/dates stringify, containers are absent.

    Examples:
        >>> coerce_string(12.0)
        '12'
        >>> coerce_string(True)
        'true'
        >>> coerce_string({"a": 1}) is None
        True
    """
    if is_missing(raw):
        return None
    if isinstance(raw, str):
        return raw
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, numbers.Real):
        return _number_to_string(raw)
    if isinstance(raw, (datetime, date)):
        return raw.isoformat()
    return None


def parse_number(text: str) -> Optional[Union[int, float]]:
    """Parse a numeric literal; integer literals stay ``int``.

    Empty strings, underscores, NaN and infinities are rejected.
    """
    s = text.strip()
    if not s or "_" in s:
        return None
    try:
        return int(s)
    except ValueError:
        pass
    try:
        number = float(s)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def coerce_number(raw: Any) -> Optional[Union[int, float]]:
    """Numbers pass (never NaN/inf), strings are parsed, anything else is absent."""
    if is_missing(raw) or isinstance(raw, bool):
        return None
    if isinstance(raw, numbers.Integral):
        return int(raw)
    if isinstance(raw, numbers.Real):
        number = float(raw)
        return number if math.isfinite(number) else None
    if isinstance(raw, str):
        return parse_number(raw)
    return None


def coerce_boolean(raw: Any) -> Optional[bool]:
    """Booleans pass, only the string ``"true"`` (any case) is true, others use truthiness."""
    if is_missing(raw):
        return None
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        return raw.strip().lower() == "true"
    try:
        return bool(raw)
    except (TypeError, ValueError):
        # Objects whose truth value is ambiguous (e.g. multi-element arrays)
        return None


def _to_utc(value: datetime) -> datetime:
    if isinstance(value, pd.Timestamp):
        value = value.to_pydatetime()
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_date(text: str) -> Optional[datetime]:
    """Parse a date string into an aware UTC datetime, or None if invalid.

    ISO-8601 is tried first; other layouts fall back to ``pandas.to_datetime``.

    Examples:
        >>> parse_date("2024-13-40") is None
        True
        >>> parse_date("2024-02-01").isoformat()
        '2024-02-01T00:00:00+00:00'
    """
    s = text.strip()
    if not s:
        return None
    try:
        return _to_utc(datetime.fromisoformat(s))
    except ValueError:
        pass
    try:
        parsed = pd.to_datetime(s, errors="coerce", utc=True)
    except (ValueError, TypeError, OverflowError):
        return None
    if parsed is None or pd.isna(parsed):
        return None
    return _to_utc(parsed)


def coerce_date(raw: Any) -> Optional[datetime]:
    """Dates pass; strings and numbers are parsed as date text.

    A number is read through its string form, so ``2024`` and ``"2024"``
    give the same date.

    Invalid results are absent rather than an invalid date value.
    """
    if is_missing(raw) or isinstance(raw, bool):
        return None
    if isinstance(raw, datetime):
        try:
            return _to_utc(raw)
        except (ValueError, OverflowError):
            return None
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day, tzinfo=timezone.utc)
    if isinstance(raw, numbers.Real):
        if not math.isfinite(float(raw)):
            return None
        return parse_date(_number_to_string(raw))
    if isinstance(raw, str):
        return parse_date(raw)
    return None


def coerce_string_array(raw: Any) -> Optional[List[str]]:
    """Sequences map element-wise through ``coerce_string``; scalars are wrapped.

    Elements that are not primitives (mappings, nested sequences, nulls) are
    dropped rather than stringified. A mapping input is absent.
    """
    if is_missing(raw) or isinstance(raw, Mapping):
        return None
    if isinstance(raw, _SEQUENCE_TYPES):
        out: List[str] = []
        for element in raw:
            text = coerce_string(element)
            if text is not None:
                out.append(text)
        return out
    text = coerce_string(raw)
    return [text] if text is not None else None


def coerce_object(raw: Any) -> Optional[Dict[str, Any]]:
    """Only genuine mappings pass."""
    if isinstance(raw, Mapping):
        return dict(raw)
    return None


def coerce_value(raw: Any, field: SchemaField) -> Optional[FieldValue]:
    """Convert ``raw`` to the type declared by ``field``.

    Args:
        raw: Untyped value from the data-access layer.
        field: Field declaration supplying the target type.

    Returns:
        The typed value, or None when ``raw`` is null or cannot be converted.

    Examples:
        >>> from catalog_query.core.schemas import SchemaField
        >>> coerce_value("456", SchemaField("words", "Words", FieldType.NUMBER))
        456
        >>> coerce_value("2024-13-40", SchemaField("d", "D", FieldType.DATE)) is None
        True
    """
    if is_missing(raw):
        return None

    field_type = field.type
    if field_type is FieldType.STRING:
        return coerce_string(raw)
    elif field_type is FieldType.NUMBER:
        return coerce_number(raw)
    elif field_type is FieldType.BOOLEAN:
        return coerce_boolean(raw)
    elif field_type is FieldType.DATE:
        return coerce_date(raw)
    elif field_type is FieldType.ARRAY:
        return coerce_string_array(raw)
    elif field_type is FieldType.OBJECT:
        return coerce_object(raw)
    else:
        assert_never(field_type)


__all__ = [
    "FieldValue",
    "is_missing",
    "value_kind",
    "coerce_string",
    "coerce_number",
    "coerce_boolean",
    "coerce_date",
    "coerce_string_array",
    "coerce_object",
    "coerce_value",
    "parse_number",
    "parse_date",
]
