"""Schema and record loading.

Schemas live in YAML files shaped like::

    catalog_name: Pulp Fiction Library
    core_fields:
      title_field: title
      status_field: catalog-status
    fields:
      - key: title
        label: Title
        type: string
        required: true
      - key: authors
        type: wikilink-array
        sortable: false

This is the only place a schema is checked for structural problems; the
core trusts whatever ``CatalogSchema`` it is handed.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from catalog_query.core.enums import ArrayItemType, FieldCategory, FieldType
from catalog_query.core.items import RESERVED_KEYS
from catalog_query.core.schemas import CatalogSchema, CoreFields, SchemaField

logger = logging.getLogger(__name__)

RawRecord = Tuple[Dict[str, Any], str]


def _parse_enum(enum_cls, value: Any, what: str, key: str):
    try:
        if enum_cls is FieldType:
            return FieldType.parse(value)
        return enum_cls(str(value).strip().lower())
    except ValueError as e:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"Field '{key}': unknown {what} {value!r} (expected one of: {allowed})") from e


def _parse_sort_order(value: Any, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Field '{key}': sort_order must be an integer, got {value!r}") from e


def _field_from_dict(entry: Any, position: int) -> SchemaField:
    if not isinstance(entry, Mapping):
        raise ValueError(f"Field #{position + 1} must be a mapping, got {type(entry).__name__}")
    key = entry.get("key")
    if not isinstance(key, str) or not key.strip():
        raise ValueError(f"Field #{position + 1} has no 'key'")
    key = key.strip()
    if key in RESERVED_KEYS:
        raise ValueError(f"Field key '{key}' is reserved for item identity")
    if "type" not in entry:
        raise ValueError(f"Field '{key}' has no 'type'")

    raw_type = str(entry["type"]).strip().lower()
    field_type = _parse_enum(FieldType, raw_type, "type", key)
    if "array_item_type" in entry:
        item_type = _parse_enum(ArrayItemType, entry["array_item_type"], "array item type", key)
    elif raw_type == "wikilink-array":
        item_type = ArrayItemType.WIKILINK
    else:
        item_type = ArrayItemType.STRING

    return SchemaField(
        key=key,
        label=str(entry.get("label") or key),
        type=field_type,
        category=_parse_enum(FieldCategory, entry.get("category", "metadata"), "category", key),
        visible=bool(entry.get("visible", True)),
        filterable=bool(entry.get("filterable", True)),
        sortable=bool(entry.get("sortable", True)),
        array_item_type=item_type,
        sort_order=_parse_sort_order(entry.get("sort_order", position), key),
        required=bool(entry.get("required", False)),
        description=str(entry.get("description") or ""),
    )


def schema_from_dict(data: Any) -> CatalogSchema:
    """Build and structurally validate a schema from plain data.

    Args:
        data: Mapping with ``fields`` and optional ``catalog_name`` and
            ``core_fields``.

    Returns:
        The validated CatalogSchema.

    Raises:
        ValueError: On a malformed document, duplicate field keys, unknown
            type or category names, or core fields naming undeclared keys.

    Examples:
        >>> schema = schema_from_dict({"fields": [{"key": "title", "type": "string"}]})
        >>> schema.field_keys()
        ['title']
    """
    if not isinstance(data, Mapping):
        raise ValueError("Schema document must be a mapping")
    entries = data.get("fields")
    if not isinstance(entries, list):
        raise ValueError("Schema document needs a 'fields' list")

    fields: List[SchemaField] = []
    seen = set()
    for position, entry in enumerate(entries):
        field = _field_from_dict(entry, position)
        if field.key in seen:
            raise ValueError(f"Duplicate field key: {field.key}")
        seen.add(field.key)
        fields.append(field)

    core = data.get("core_fields") or {}
    if not isinstance(core, Mapping):
        raise ValueError("'core_fields' must be a mapping")
    core_fields = CoreFields(
        title_field=str(core.get("title_field") or "title"),
        id_field=core.get("id_field") or None,
        status_field=core.get("status_field") or None,
    )
    for role in ("title_field", "id_field", "status_field"):
        key = getattr(core_fields, role)
        if key is not None and key not in seen:
            raise ValueError(f"core_fields.{role} names undeclared field '{key}'")

    return CatalogSchema(
        fields=tuple(fields),
        core_fields=core_fields,
        catalog_name=str(data.get("catalog_name") or "Catalog"),
    )


def schema_to_dict(schema: CatalogSchema) -> Dict[str, Any]:
    """Plain-data form of a schema, accepted back by ``schema_from_dict``."""
    core: Dict[str, Any] = {"title_field": schema.core_fields.title_field}
    if schema.core_fields.id_field:
        core["id_field"] = schema.core_fields.id_field
    if schema.core_fields.status_field:
        core["status_field"] = schema.core_fields.status_field
    return {
        "catalog_name": schema.catalog_name,
        "core_fields": core,
        "fields": [
            {
                "key": f.key,
                "label": f.label,
                "type": f.type.value,
                "category": f.category.value,
                "visible": f.visible,
                "filterable": f.filterable,
                "sortable": f.sortable,
                "array_item_type": f.array_item_type.value,
                "sort_order": f.sort_order,
                "required": f.required,
                "description": f.description,
            }
            for f in schema.fields
        ],
    }


def _read_document(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Failed to read {path}: {e}") from e


def load_schema(path: Path) -> CatalogSchema:
    """Load a schema from a YAML (or JSON) file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file cannot be parsed or the schema is malformed.
    """
    path = Path(path)
    data = _read_document(path)
    try:
        schema = schema_from_dict(data or {})
    except ValueError as e:
        raise ValueError(f"Invalid schema in {path}: {e}") from e
    logger.debug("Loaded schema %r with %d fields from %s", schema.catalog_name, len(schema.fields), path)
    return schema


def load_raw_records(path: Path, records_key: Optional[str] = "records") -> List[RawRecord]:
    """Load untyped records from a YAML or JSON file.

    The document is either a list of mappings or a mapping holding that list
    under ``records_key``. Each record's source reference is
    ``<file name>:<1-based position>``. Entries that are not mappings are
    skipped with a warning.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file cannot be parsed or holds no record list.
    """
    path = Path(path)
    data = _read_document(path)
    if isinstance(data, Mapping) and records_key and records_key in data:
        data = data[records_key]
    if data is None:
        data = []
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of records")

    rows: List[RawRecord] = []
    for position, entry in enumerate(data, start=1):
        if not isinstance(entry, Mapping):
            logger.warning("Skipping record %d in %s: not a mapping", position, path.name)
            continue
        rows.append((dict(entry), f"{path.name}:{position}"))
    logger.info("Loaded %d records from %s", len(rows), path)
    return rows


__all__ = ["RawRecord", "schema_from_dict", "schema_to_dict", "load_schema", "load_raw_records"]
