"""Silver layer cleaning for raw care measure records.

This module provides the Cleaner class, which trims text fields, casts
numeric and date fields with null-on-failure semantics and drops rows
without a facility identifier.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from pyspark.sql import Column, DataFrame
from pyspark.sql import functions as F

from hospital_lakehouse.bronze.schemas import (
    RAW_COLUMNS,
    ROW_ID_COLUMN,
    SOURCE_FILE_COLUMN,
)
from hospital_lakehouse.silver.casts import cast_int, parse_date, trim_whitespace
from hospital_lakehouse.silver.schemas import DATE_COLUMNS, INTEGER_COLUMNS

logger = logging.getLogger(__name__)

TYPED_COLUMNS: tuple[str, ...] = INTEGER_COLUMNS + DATE_COLUMNS
LINEAGE_COLUMNS: tuple[str, ...] = (SOURCE_FILE_COLUMN, ROW_ID_COLUMN)


def _text_column(column: str) -> str:
    return f"_text_{column}"


def _cast_failed(column: str) -> Column:
    text = F.coalesce(F.col(_text_column(column)).cast("string"), F.lit(""))
    return F.col(column).isNull() & (text != "")


@dataclass
class CleaningResult:
    """Result of a Silver cleaning operation.

    Attributes:
        dataframe: Cleaned rows (lazy), ordered by row id.
        rows_read: Number of Bronze rows consumed.
        rows_dropped: Rows dropped for a missing facility identifier.
        started_at: Timestamp when cleaning started.
        completed_at: Timestamp when cleaning completed.
        cast_failures: Per-column count of non-empty values that
            degraded to null.
    """

    dataframe: DataFrame
    rows_read: int
    rows_dropped: int
    started_at: datetime
    completed_at: datetime
    cast_failures: dict[str, int] = field(default_factory=dict)

    @property
    def rows_written(self) -> int:
        """Number of cleaned rows produced.

        Returns:
            int: Row count.
        """
        return self.rows_read - self.rows_dropped

    @property
    def duration_seconds(self) -> float:
        """Calculate cleaning duration in seconds.

        Returns:
            float: Duration in seconds.
        """
        return (self.completed_at - self.started_at).total_seconds()


class Cleaner:
    """Transforms the Bronze DataFrame into the Silver DataFrame.

    Output is a pure function of input. Bad numeric or date values never
    fail the run; they become null and are only counted.
    """

    def typed(self, raw: DataFrame) -> DataFrame:
        """Trim and cast every source column.

        The trimmed text of each cast column is kept in a ``_text_<column>``
        helper column so failures can be counted.

        Args:
            raw: Bronze DataFrame.

        Returns:
            DataFrame: Trimmed and typed rows, including dropped ones.
        """
        trimmed = raw.select(
            *[trim_whitespace(raw, column).alias(column) for column in RAW_COLUMNS],
            *LINEAGE_COLUMNS,
        )

        casts: dict[str, Column] = {
            column: cast_int(trimmed, column) for column in INTEGER_COLUMNS
        }
        casts.update({column: parse_date(trimmed, column) for column in DATE_COLUMNS})

        return trimmed.select(
            *[casts.get(column, F.col(column)).alias(column) for column in RAW_COLUMNS],
            *LINEAGE_COLUMNS,
            *[F.col(column).alias(_text_column(column)) for column in TYPED_COLUMNS],
        )

    @staticmethod
    def has_facility_id() -> Column:
        """Condition for rows that are kept.

        Returns:
            Column: True when the trimmed facility_id is non-empty.
        """
        return F.col("facility_id").isNotNull() & (F.col("facility_id") != "")

    def clean(self, raw: DataFrame) -> CleaningResult:
        """Clean a full Bronze DataFrame.

        Args:
            raw: Bronze rows.

        Returns:
            CleaningResult: Cleaned rows and data quality counts.
        """
        started_at = datetime.now(timezone.utc)
        typed = self.typed(raw)
        kept = self.has_facility_id()

        stats = typed.agg(
            F.count(F.lit(1)).alias("rows_read"),
            F.sum(F.when(kept, 0).otherwise(1)).alias("rows_dropped"),
            *[
                F.sum(F.when(kept & _cast_failed(column), 1).otherwise(0)).alias(column)
                for column in TYPED_COLUMNS
            ],
        ).first()

        cleaned = (
            typed.where(kept)
            .select(*RAW_COLUMNS, *LINEAGE_COLUMNS)
            .orderBy(ROW_ID_COLUMN)
        )

        result = CleaningResult(
            dataframe=cleaned,
            rows_read=stats["rows_read"],
            rows_dropped=stats["rows_dropped"] or 0,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
            cast_failures={column: stats[column] or 0 for column in TYPED_COLUMNS},
        )

        logger.info(
            f"Cleaned {result.rows_read:,} raw records: "
            f"{result.rows_written:,} kept, "
            f"{result.rows_dropped:,} dropped for missing facility_id"
        )
        for column, count in result.cast_failures.items():
            if count:
                logger.info(f"{count:,} values of {column} could not be cast and were set to null")

        return result
