"""Bakehouse: a static site generator built around a DuckDB content store."""

__version__ = "0.3.0"

__all__ = ["__version__"]
