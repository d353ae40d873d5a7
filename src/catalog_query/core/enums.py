"""Core enumerations used across the package."""

from __future__ import annotations

from enum import Enum


class FieldType(str, Enum):
    """Declared value type of a schema field.

    Values are strings to ease serialization and YAML interchange.
    """

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    OBJECT = "object"

    @classmethod
    def parse(cls, value: str) -> "FieldType":
        """Resolve a type name, accepting the array spellings used in schema files.

        Raises:
            ValueError: If the name is not a known field type.
        """
        name = str(value).strip().lower()
        if name in _ARRAY_ALIASES:
            return cls.ARRAY
        return cls(name)


_ARRAY_ALIASES = {"array-of-string", "wikilink-array", "string-array"}


class ArrayItemType(str, Enum):
    """Item type for array fields."""

    STRING = "string"
    WIKILINK = "wikilink"


class FieldCategory(str, Enum):
    """Organizational tag for a field. Has no behavioral effect."""

    METADATA = "metadata"
    STATUS = "status"
    WORKFLOW = "workflow"
    CONTENT = "content"
    CUSTOM = "custom"


__all__ = ["FieldType", "ArrayItemType", "FieldCategory"]
