"""Silver layer for the Hospital Quality Lakehouse.

The Silver layer trims and casts Bronze records, drops rows without a
facility identifier and stores the result partitioned by region.
"""

from hospital_lakehouse.silver.cleaner import Cleaner, CleaningResult
from hospital_lakehouse.silver.schemas import SILVER_SCHEMA

__all__ = [
    "Cleaner",
    "CleaningResult",
    "SILVER_SCHEMA",
]
