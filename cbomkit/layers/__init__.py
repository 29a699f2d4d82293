"""Processing layers: indexing and scanning."""
