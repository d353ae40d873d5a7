"""Shared pytest fixtures: a small catalog schema, raw records and built items."""

from typing import Any, Dict, List, Tuple

import pytest

from catalog_query.core.enums import ArrayItemType, FieldCategory, FieldType
from catalog_query.core.items import CatalogItem, build_items
from catalog_query.core.schemas import CatalogSchema, CoreFields, SchemaField


@pytest.fixture
def sample_schema() -> CatalogSchema:
    """Schema covering every field type, with title and status roles."""
    return CatalogSchema(
        fields=(
            SchemaField("title", "Title", FieldType.STRING, required=True),
            SchemaField("status", "Status", FieldType.STRING, category=FieldCategory.STATUS),
            SchemaField("words", "Word Count", FieldType.NUMBER),
            SchemaField(
                "authors",
                "Authors",
                FieldType.ARRAY,
                sortable=False,
                array_item_type=ArrayItemType.WIKILINK,
            ),
            SchemaField("published", "Published", FieldType.DATE),
            SchemaField("year", "Year", FieldType.NUMBER),
            SchemaField("candidate", "Candidate", FieldType.BOOLEAN, category=FieldCategory.WORKFLOW),
            SchemaField("meta", "Metadata", FieldType.OBJECT, visible=False),
        ),
        core_fields=CoreFields(title_field="title", status_field="status"),
        catalog_name="Pulp Fiction",
    )


@pytest.fixture
def raw_rows() -> List[Tuple[Dict[str, Any], str]]:
    """Three untyped records: two drafts with word counts and one final without."""
    return [
        (
            {
                "title": "The Call of Cthulhu",
                "status": "draft",
                "words": 1000,
                "authors": ["[[Lovecraft, H. P.]]"],
                "published": "1928-02-01",
                "year": 1928,
                "candidate": True,
            },
            "works/call-of-cthulhu.md",
        ),
        (
            {
                "title": "The Dunwich Horror",
                "status": "draft",
                "words": "2000",
                "authors": ["[[Lovecraft, H. P.]]", "[[Smith, Clark Ashton]]"],
                "published": "1929-04-01",
                "year": "1929",
                "candidate": False,
            },
            "works/dunwich-horror.md",
        ),
        (
            {
                "title": "The Colour Out of Space",
                "status": "final",
                "authors": [],
                "year": 1927,
            },
            "works/colour-out-of-space.md",
        ),
    ]


@pytest.fixture
def sample_items(raw_rows, sample_schema) -> List[CatalogItem]:
    """Items built from ``raw_rows`` with derived ids."""
    return build_items(raw_rows, sample_schema)


@pytest.fixture
def scenario_items() -> List[CatalogItem]:
    """The three-record draft/final scenario, built by hand."""
    r1, r2, r3 = CatalogItem("r1"), CatalogItem("r2"), CatalogItem("r3")
    r1.set("status", "draft")
    r1.set("words", 1000)
    r2.set("status", "draft")
    r2.set("words", 2000)
    r3.set("status", "final")
    return [r1, r2, r3]
