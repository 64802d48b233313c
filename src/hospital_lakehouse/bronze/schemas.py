"""Schema definitions for Bronze layer tables.

This module defines:
- The positional column layout of the source file
- The Spark read schema and the Bronze table schema
"""

from pyspark.sql.types import LongType, StringType, StructField, StructType

# Column names in source file order. The source header uses display names
# ("Facility ID", "City/Town", ...); columns are renamed positionally.
RAW_COLUMNS: tuple[str, ...] = (
    "facility_id",
    "facility_name",
    "address",
    "city_town",
    "state",
    "zip_code",
    "county_parish",
    "telephone_number",
    "condition",
    "measure_id",
    "measure_name",
    "score",
    "sample",
    "footnote",
    "start_date",
    "end_date",
)

RAW_COLUMN_COUNT = len(RAW_COLUMNS)

# Lineage columns added at ingestion
SOURCE_FILE_COLUMN = "_source_file"
ROW_ID_COLUMN = "_row_id"

# Every source field is read as text, so no row is rejected for its values
RAW_SCHEMA = StructType(
    [StructField(column, StringType(), nullable=True) for column in RAW_COLUMNS]
)

BRONZE_SCHEMA = StructType(
    RAW_SCHEMA.fields
    + [
        StructField(SOURCE_FILE_COLUMN, StringType(), nullable=False),
        StructField(ROW_ID_COLUMN, LongType(), nullable=False),
    ]
)
