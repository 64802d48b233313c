"""Table storage for the Hospital Quality Lakehouse.

Tables are stored as partitioned Parquet directories written by Spark and
replaced atomically, one schema at a time.
"""

from hospital_lakehouse.storage.table_store import SUCCESS_MARKER, TableStore

__all__ = [
    "SUCCESS_MARKER",
    "TableStore",
]
