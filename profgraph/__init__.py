"""Call-graph nodes, unit-aware value formatting, source lookup and annotated listings."""

__version__ = "0.1.0"

__all__ = ["listing", "measurement", "nodes", "sourcefiles"]