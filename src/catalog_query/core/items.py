"""Catalog item store.

A ``CatalogItem`` is one catalog entry: an id, an opaque source reference,
and a mapping from field key to an already-typed value. Values enter through
``build_item`` (which runs the coercion engine once per schema field) or
through ``CatalogItem.set`` for callers that already hold typed values.

Absence is the only "no value" state: a key is either present with a typed
value or not in the mapping at all. Accessors never raise.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from .coercion import FieldValue, coerce_string, coerce_value, is_missing
from .schemas import CatalogSchema

_WHITESPACE_RE = re.compile(r"\s+")

# Identity keys written ahead of the fields by every serializer
RESERVED_KEYS = ("id", "source_ref")


class CatalogItem:
    """One catalog entry with dynamic, schema-keyed field storage.

    Examples:
        >>> item = CatalogItem("work-001", "works/story.md")
        >>> item.set("title", "The Cosmic Horror")
        >>> item.get("title")
        'The Cosmic Horror'
        >>> item.get("year") is None
        True
    """

    def __init__(self, item_id: str, source_ref: str = "") -> None:
        self.id = item_id
        self.source_ref = source_ref
        self._fields: Dict[str, FieldValue] = {}

    def __repr__(self) -> str:
        return f"CatalogItem(id={self.id!r}, source_ref={self.source_ref!r}, fields={len(self._fields)})"

    def get(self, key: str) -> Optional[FieldValue]:
        """Return the stored value, or None when the field is unset.

        No schema check happens here; see ``get_typed``.
        """
        value = self._fields.get(key)
        if is_missing(value):
            return None
        return value

    def get_typed(self, key: str, schema: CatalogSchema) -> Optional[FieldValue]:
        """Like ``get`` but returns None for keys the schema does not declare."""
        if not schema.has_field(key):
            return None
        return self.get(key)

    def set(self, key: str, value: Any) -> None:
        """Overwrite a field without coercion. Setting None removes the field."""
        if is_missing(value):
            self._fields.pop(key, None)
            return
        self._fields[key] = value

    def has(self, key: str) -> bool:
        """True iff the field holds a value. ``False``, ``0`` and ``""`` count as present."""
        return self.get(key) is not None

    def remove(self, key: str) -> None:
        self._fields.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._fields)

    def get_all_fields(self) -> Dict[str, FieldValue]:
        """Return a shallow copy of the field mapping."""
        return dict(self._fields)

    def clear_fields(self) -> None:
        self._fields = {}

    def clone(self) -> "CatalogItem":
        """Copy with the same id and source_ref and an independent top-level mapping.

        Array and object values are shared by reference with the original.
        """
        cloned = CatalogItem(self.id, self.source_ref)
        cloned._fields = dict(self._fields)
        return cloned

    def to_dict(self, *, json_safe: bool = False) -> Dict[str, Any]:
        """Sparse serialization: id, source_ref and only the fields that are set.

        A field stored under ``id`` or ``source_ref`` never replaces the identity.
        """
        out: Dict[str, Any] = {"id": self.id, "source_ref": self.source_ref}
        for key, value in self._fields.items():
            if key in RESERVED_KEYS:
                continue
            out[key] = to_json_value(value) if json_safe else value
        return out

    def to_full_object(self, schema: CatalogSchema, *, json_safe: bool = False) -> Dict[str, Any]:
        """Fixed-shape serialization: every schema field, None where unset.

        Examples:
            >>> from catalog_query.core.enums import FieldType
            >>> from catalog_query.core.schemas import SchemaField
            >>> schema = CatalogSchema(fields=(
            ...     SchemaField("title", "Title", FieldType.STRING),
            ...     SchemaField("year", "Year", FieldType.NUMBER),
            ... ))
            >>> item = CatalogItem("a", "a.md")
            >>> item.set("title", "Story")
            >>> item.to_full_object(schema)
            {'id': 'a', 'source_ref': 'a.md', 'title': 'Story', 'year': None}
        """
        out: Dict[str, Any] = {"id": self.id, "source_ref": self.source_ref}
        for field in schema.fields:
            if field.key in RESERVED_KEYS:
                continue
            value = self.get(field.key)
            out[field.key] = to_json_value(value) if json_safe else value
        return out


def read_field(item: CatalogItem, key: str, schema: Optional[CatalogSchema] = None) -> Optional[FieldValue]:
    """Read a field, schema-checked when a schema is given."""
    if schema is None:
        return item.get(key)
    return item.get_typed(key, schema)


def to_json_value(value: Any) -> Any:
    """Convert a stored value into JSON-serializable data (dates become ISO-8601)."""
    if is_missing(value):
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_json_value(v) for v in value]
    if isinstance(value, Mapping):
        return {str(k): to_json_value(v) for k, v in value.items()}
    return value


def build_item(
    raw_data: Mapping[str, Any], item_id: str, source_ref: str, schema: CatalogSchema
) -> CatalogItem:
    """Build an item from untyped raw data, coercing each schema field.

    Only schema-declared keys are read; raw keys outside the schema are
    ignored. Fields whose coercion fails are left unset.

    Args:
        raw_data: Untyped key/value map for one document.
        item_id: Identifier for the new item.
        source_ref: Opaque reference to the originating document.
        schema: Schema supplying field declarations.

    Returns:
        A new CatalogItem.
    """
    item = CatalogItem(item_id, source_ref)
    if not isinstance(raw_data, Mapping):
        return item
    for field in schema.fields:
        typed = coerce_value(raw_data.get(field.key), field)
        if typed is not None:
            item._fields[field.key] = typed
    return item


def derive_item_id(raw_data: Mapping[str, Any], source_ref: str, schema: CatalogSchema) -> str:
    """Derive an id from the id field (or title field), falling back to source_ref.

    The value is lowercased and whitespace runs become ``-``.

    Examples:
        >>> schema = CatalogSchema(fields=())
        >>> derive_item_id({"title": "The Call of Cthulhu"}, "x.md", schema)
        'the-call-of-cthulhu'
    """
    core = schema.core_fields
    id_field = core.id_field or core.title_field
    text = None
    if isinstance(raw_data, Mapping):
        text = coerce_string(raw_data.get(id_field))
    if text is None:
        text = str(source_ref)
    return _WHITESPACE_RE.sub("-", text.lower())


def build_item_with_derived_id(
    raw_data: Mapping[str, Any], source_ref: str, schema: CatalogSchema
) -> CatalogItem:
    return build_item(raw_data, derive_item_id(raw_data, source_ref, schema), source_ref, schema)


def build_items(
    rows: Iterable[Tuple[Mapping[str, Any], str]], schema: CatalogSchema
) -> List[CatalogItem]:
    """Batch-build items from ``(raw_data, source_ref)`` pairs with derived ids."""
    return [build_item_with_derived_id(raw, source_ref, schema) for raw, source_ref in rows]


def ensure_title(item: CatalogItem, schema: CatalogSchema, fallback: Optional[str] = None) -> None:
    """Set the title field to ``fallback`` (or the source_ref) when it is empty."""
    title_field = schema.core_fields.title_field
    title = item.get(title_field)
    if title is None or title == "":
        item.set(title_field, fallback if fallback is not None else item.source_ref)


def merge_items(*items: CatalogItem) -> CatalogItem:
    """Merge items left to right; later present values win. Identity comes from the first."""
    if not items:
        return CatalogItem("", "")
    merged = items[0].clone()
    for other in items[1:]:
        for key, value in other.get_all_fields().items():
            if not is_missing(value):
                merged.set(key, value)
    return merged


def items_to_frame(items: Iterable[CatalogItem], schema: CatalogSchema) -> pd.DataFrame:
    """Tabular export: one full-object row per item, columns in schema order."""
    columns = list(RESERVED_KEYS) + [key for key in schema.field_keys() if key not in RESERVED_KEYS]
    rows = [item.to_full_object(schema) for item in items]
    return pd.DataFrame(rows, columns=columns)


__all__ = [
    "RESERVED_KEYS",
    "CatalogItem",
    "read_field",
    "to_json_value",
    "build_item",
    "derive_item_id",
    "build_item_with_derived_id",
    "build_items",
    "ensure_title",
    "merge_items",
    "items_to_frame",
]
