"""Ingestion layer.

This package contains the loaders that turn fetched CSV text and TopoJSON
documents into typed records and geometry features.
"""

__all__: list[str] = []
