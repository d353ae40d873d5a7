"""Built-in catalog schemas.

Presets are written as the same plain data a schema YAML file holds and go
through ``schema_from_dict``, so they are validated like any user schema.
"""

from __future__ import annotations

from typing import Any, Dict, List

from catalog_query.core.schemas import CatalogSchema
from .loader import schema_from_dict


def _field(key: str, label: str, type_: str, category: str = "metadata", **options: Any) -> Dict[str, Any]:
    return {"key": key, "label": label, "type": type_, "category": category, **options}


_HIDDEN = {"visible": False, "filterable": False, "sortable": False}

DEFAULT_LIBRARY = {
    "catalog_name": "Default Library",
    "core_fields": {"title_field": "title", "status_field": "catalog-status"},
    "fields": [
        _field("class", "Class", "string", description='Primary categorization (e.g., "story", "article")'),
        _field("category", "Category", "string", description='Secondary classification (e.g., "short story")'),
        _field("title", "Title", "string", filterable=False, required=True, description="Full title of the work"),
        _field("authors", "Authors", "wikilink-array", sortable=False, description="Author(s) as wikilinks"),
        _field("year", "Year", "number", description="Original publication year"),
        _field("volume", "Volume", "number", description="Publication volume number"),
        _field("issue", "Issue", "number", description="Publication issue number"),
        _field("publications", "Publications", "wikilink-array", sortable=False,
               description="Source publication references"),
        _field("citation", "Citation", "string", **_HIDDEN, description="Formal bibliographic citation"),
        _field("wikisource", "Wikisource", "string", **_HIDDEN, description="Link to full text source (URL)"),
        _field("backstage-draft", "Backstage Draft", "string", **_HIDDEN,
               description="Link to editorial draft document (URL)"),
        _field("synopsis", "Synopsis", "string", "content", **_HIDDEN,
               description="Brief plot summary for discovery and reference"),
        _field("catalog-status", "Catalog Status", "string", "status",
               description="Pipeline stage: raw | reviewed | approved | published"),
        _field("bp-candidate", "Backstage Candidate", "boolean", "workflow",
               description="Recommended for editorial pipeline"),
        _field("bp-approved", "Backstage Approved", "boolean", "workflow",
               description="Approved for editorial pipeline"),
        _field("date-read", "Date Read", "date", "workflow", visible=False),
        _field("date-cataloged", "Date Cataloged", "date", "workflow", visible=False),
        _field("date-reviewed", "Date Reviewed", "date", "workflow", visible=False),
        _field("date-approved", "Date Approved", "date", "workflow", visible=False),
        _field("created", "Created", "date", visible=False, filterable=False),
        _field("updated", "Updated", "date", visible=False, filterable=False),
        _field("word-count", "Word Count", "number", description="Length of the work in words"),
        _field("keywords", "Keywords", "array", visible=False, sortable=False),
        _field("tags", "Tags", "array", visible=False, sortable=False),
        _field("content-warnings", "Content Warnings", "array", visible=False, sortable=False),
        _field("content-metadata", "Content Metadata", "object", **_HIDDEN),
    ],
}

GENERAL_LIBRARY = {
    "catalog_name": "General Library",
    "core_fields": {"title_field": "title", "status_field": "status"},
    "fields": [
        _field("title", "Title", "string", required=True),
        _field("author", "Author", "string"),
        _field("genre", "Genre", "string"),
        _field("status", "Status", "string", "status"),
        _field("year", "Year", "number"),
        _field("rating", "Rating", "number", "content"),
    ],
}

MANUSCRIPTS = {
    "catalog_name": "Manuscript Tracker",
    "core_fields": {"title_field": "title", "status_field": "status"},
    "fields": [
        _field("title", "Title", "string", required=True),
        _field("author", "Author", "string"),
        _field("genre", "Genre", "string"),
        _field("status", "Status", "string", "status"),
        _field("word-count", "Word Count", "number"),
        _field("draft-date", "Draft Date", "date", "workflow"),
        _field("query-date", "Query Date", "date", "workflow"),
        _field("agent", "Agent", "string", "workflow"),
        _field("publisher", "Publisher", "string", "workflow"),
    ],
}

CUSTOM = {
    "catalog_name": "Custom Catalog",
    "core_fields": {"title_field": "title"},
    "fields": [_field("title", "Title", "string")],
}

PRESETS: Dict[str, Dict[str, Any]] = {
    "default-library": DEFAULT_LIBRARY,
    "general-library": GENERAL_LIBRARY,
    "manuscripts": MANUSCRIPTS,
    "custom": CUSTOM,
}

DEFAULT_LIBRARY_SCHEMA: CatalogSchema = schema_from_dict(DEFAULT_LIBRARY)


def list_presets() -> List[str]:
    return sorted(PRESETS)


def get_preset(name: str) -> CatalogSchema:
    """Return the preset schema called ``name``.

    Raises:
        ValueError: If no preset has that name.

    Examples:
        >>> get_preset("manuscripts").core_fields.status_field
        'status'
    """
    if name not in PRESETS:
        raise ValueError(f"Unknown preset: {name} (available: {', '.join(list_presets())})")
    return schema_from_dict(PRESETS[name])


__all__ = ["PRESETS", "DEFAULT_LIBRARY_SCHEMA", "list_presets", "get_preset"]
