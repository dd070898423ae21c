"""Dataclass models for Iceberg table metadata JSON, format version 2: tables, schemas, partition specs, sort orders and snapshots."""

__version__ = "0.1.0"

__all__ = ["partition", "schema", "snapshot", "sort", "table"]