"""Key normalization shared by sorting, grouping and filtering."""

from __future__ import annotations

import json
import unicodedata
from collections.abc import Mapping

from ..coercion import coerce_string, is_missing

UNSET_LABEL = "(unset)"

SEQUENCE_TYPES = (list, tuple, set, frozenset)


def flatten_key(value: object, unset_label: str = UNSET_LABEL) -> str:
    """Normalize a group key (or any stored value) to a display string.

    Examples:
        >>> flatten_key(None)
        '(unset)'
        >>> flatten_key(1925.0)
        '1925'
        >>> flatten_key(["a", "b"])
        'a, b'
    """
    if is_missing(value):
        return unset_label
    if isinstance(value, SEQUENCE_TYPES):
        return ", ".join(flatten_key(v, unset_label) for v in value)
    if isinstance(value, Mapping):
        try:
            return json.dumps(value, sort_keys=True, default=str, ensure_ascii=False)
        except (TypeError, ValueError):
            return str(dict(value))
    text = coerce_string(value)
    return text if text is not None else str(value)


def text_sort_key(text: str) -> str:
    """Case- and accent-insensitive collation key.

    - Unicode NFKD decomposition
    - Drop combining marks
    - Casefold
    """
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


__all__ = ["UNSET_LABEL", "SEQUENCE_TYPES", "flatten_key", "text_sort_key"]
