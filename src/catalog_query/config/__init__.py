"""Configuration layer: schema files, record files and built-in presets."""

from .loader import RawRecord, load_raw_records, load_schema, schema_from_dict, schema_to_dict
from .presets import DEFAULT_LIBRARY_SCHEMA, PRESETS, get_preset, list_presets

__all__ = [
    "RawRecord",
    "schema_from_dict",
    "schema_to_dict",
    "load_schema",
    "load_raw_records",
    "DEFAULT_LIBRARY_SCHEMA",
    "PRESETS",
    "get_preset",
    "list_presets",
]
