"""Catalog Query: schema-driven catalog records, queries and statistics.

Untyped key/value data plus a runtime schema go in; typed items, filtered,
sorted and grouped collections, and plain statistics objects come out.
"""

__all__ = [
    "__version__",
]

__version__ = "0.1.0"
