"""Exceptions raised by the Hospital Quality Lakehouse."""


class LakehouseError(Exception):
    """Base class for lakehouse pipeline errors."""


class LoadError(LakehouseError):
    """Raised when the source file cannot be loaded into the Bronze layer.

    Covers a missing or unreadable file, a failed download and rows whose
    field count does not match the raw schema. Nothing is materialized when
    this is raised.
    """


class TableNotFoundError(LakehouseError):
    """Raised when reading a table that has not been written yet."""
