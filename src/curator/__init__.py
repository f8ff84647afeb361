"""Subgraph Curator - subgraph discovery and multi-source query execution."""

__version__ = "0.1.0"
