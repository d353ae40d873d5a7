"""Core data model: schema, coercion, items, formatting and queries."""
