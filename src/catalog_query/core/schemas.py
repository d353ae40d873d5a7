"""Schema model: field declarations for one catalog.

A schema is pure data. It is produced (and structurally validated) by the
configuration layer and passed explicitly to every core operation; nothing
here keeps ambient schema state, so several catalogs can coexist.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .enums import ArrayItemType, FieldCategory, FieldType


@dataclass(frozen=True)
class SchemaField:
    """Declaration of one catalog field.

    Attributes:
        key: Stable identifier, matches the raw document key.
        label: Display name. Not used by core logic.
        type: Declared value type.
        category: Organizational tag. Not used by core logic.
        visible: Shown in default table views.
        filterable: Offered as a filter.
        sortable: Offered as a sort column.
        array_item_type: Item type for array fields.
        sort_order: Position among sortable fields (lower first).
        required: Reported by the ``required_fields`` validation check when unset.
        description: Free text for settings screens.
    """

    key: str
    label: str
    type: FieldType
    category: FieldCategory = FieldCategory.METADATA
    visible: bool = True
    filterable: bool = True
    sortable: bool = True
    array_item_type: ArrayItemType = ArrayItemType.STRING
    sort_order: int = 0
    required: bool = False
    description: str = ""


@dataclass(frozen=True)
class CoreFields:
    """Which fields play the title, id and status roles."""

    title_field: str = "title"
    id_field: Optional[str] = None
    status_field: Optional[str] = None


@dataclass(frozen=True)
class CatalogSchema:
    """Ordered field declarations plus core field roles.

    Field keys are expected to be unique; the configuration layer checks this
    before a schema reaches the core.
    """

    fields: Tuple[SchemaField, ...]
    core_fields: CoreFields = field(default_factory=CoreFields)
    catalog_name: str = "Catalog"

    def get_field(self, key: str) -> Optional[SchemaField]:
        """Return the declaration for ``key``, or None if the schema lacks it."""
        for f in self.fields:
            if f.key == key:
                return f
        return None

    def has_field(self, key: str) -> bool:
        return self.get_field(key) is not None

    def field_keys(self) -> List[str]:
        """Return field keys in declaration order."""
        return [f.key for f in self.fields]


def get_visible_fields(schema: CatalogSchema) -> List[SchemaField]:
    return [f for f in schema.fields if f.visible]


def get_filterable_fields(schema: CatalogSchema) -> List[SchemaField]:
    return [f for f in schema.fields if f.filterable]


def get_sortable_fields(schema: CatalogSchema) -> List[SchemaField]:
    """Return sortable fields ordered by ``sort_order`` (stable for ties)."""
    return sorted((f for f in schema.fields if f.sortable), key=lambda f: f.sort_order)


def get_fields_by_category(schema: CatalogSchema, category: FieldCategory) -> List[SchemaField]:
    return [f for f in schema.fields if f.category == category]


def get_required_fields(schema: CatalogSchema) -> List[SchemaField]:
    """Return fields flagged ``required``.

    Examples:
        >>> schema = CatalogSchema(fields=(SchemaField("title", "Title", FieldType.STRING, required=True),))
        >>> [f.key for f in get_required_fields(schema)]
        ['title']
    """
    return [f for f in schema.fields if f.required]


__all__ = [
    "SchemaField",
    "CoreFields",
    "CatalogSchema",
    "get_visible_fields",
    "get_filterable_fields",
    "get_sortable_fields",
    "get_fields_by_category",
    "get_required_fields",
]
