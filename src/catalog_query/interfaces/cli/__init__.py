"""Command-line interface (``catalog-query``)."""
