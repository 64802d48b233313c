"""Bronze layer for the Hospital Quality Lakehouse.

The Bronze layer loads the raw Timely and Effective Care file,
storing every row as text with columns renamed and nothing else changed.
"""

from hospital_lakehouse.bronze.loader import LoadResult, RawLoader
from hospital_lakehouse.bronze.schemas import (
    BRONZE_SCHEMA,
    RAW_COLUMNS,
    RAW_SCHEMA,
)

__all__ = [
    "BRONZE_SCHEMA",
    "LoadResult",
    "RAW_COLUMNS",
    "RAW_SCHEMA",
    "RawLoader",
]
