"""Schema definitions for Silver layer tables."""

from pyspark.sql.types import (
    DateType,
    IntegerType,
    LongType,
    StringType,
    StructField,
    StructType,
)

from hospital_lakehouse.bronze.schemas import (
    RAW_COLUMNS,
    ROW_ID_COLUMN,
    SOURCE_FILE_COLUMN,
)

# Silver columns that are cast away from text
INTEGER_COLUMNS: tuple[str, ...] = ("score", "sample")
DATE_COLUMNS: tuple[str, ...] = ("start_date", "end_date")

STRING_COLUMNS: tuple[str, ...] = tuple(
    column
    for column in RAW_COLUMNS
    if column not in INTEGER_COLUMNS and column not in DATE_COLUMNS
)


def _silver_field(column: str) -> StructField:
    if column in INTEGER_COLUMNS:
        return StructField(column, IntegerType(), nullable=True)
    if column in DATE_COLUMNS:
        return StructField(column, DateType(), nullable=True)
    return StructField(column, StringType(), nullable=column != "facility_id")


# Source column order is kept; lineage columns follow
SILVER_SCHEMA = StructType(
    [_silver_field(column) for column in RAW_COLUMNS]
    + [
        StructField(SOURCE_FILE_COLUMN, StringType(), nullable=True),
        StructField(ROW_ID_COLUMN, LongType(), nullable=True),
    ]
)
