"""Incremental duplicate-file finder backed by a DuckDB catalog."""

__version__ = "0.3.0"
