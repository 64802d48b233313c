"""Bronze layer raw loader for the Timely and Effective Care file.

This module provides the RawLoader class for reading the delimited
source file into a Spark DataFrame for the Bronze table.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from py4j.protocol import Py4JJavaError
from pyspark.errors import PySparkException
from pyspark.sql import DataFrame, SparkSession
from pyspark.sql import functions as F

from hospital_lakehouse.bronze.schemas import (
    RAW_SCHEMA,
    ROW_ID_COLUMN,
    SOURCE_FILE_COLUMN,
)
from hospital_lakehouse.config import SourceConfig
from hospital_lakehouse.exceptions import LoadError

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Result of a Bronze load operation.

    Attributes:
        dataframe: Loaded rows in source order.
        record_count: Number of rows loaded.
        source_file: Name of the source file loaded.
        started_at: Timestamp when loading started.
        completed_at: Timestamp when loading completed.
    """

    dataframe: DataFrame
    record_count: int
    source_file: str
    started_at: datetime
    completed_at: datetime

    @property
    def duration_seconds(self) -> float:
        """Calculate load duration in seconds.

        Returns:
            float: Duration in seconds.
        """
        return (self.completed_at - self.started_at).total_seconds()


class RawLoader:
    """Loads the positional source file into a Bronze DataFrame.

    Rows are kept in source order with no filtering or deduplication.
    Loading is all-or-nothing: a row without exactly 16 fields raises
    LoadError and nothing is returned.

    Attributes:
        spark: Spark session used for reading.
        config: Source file configuration.
    """

    def __init__(self, spark: SparkSession, config: SourceConfig) -> None:
        """Initialize the raw loader.

        Args:
            spark: Active Spark session.
            config: Source configuration instance.
        """
        self.spark = spark
        self.config = config

    def get_csv_read_options(self) -> dict[str, str]:
        """Get Spark CSV reader options for the source file.

        Returns:
            dict: Options for spark.read.options(**options).
        """
        return {
            "header": str(self.config.has_header).lower(),
            "sep": self.config.delimiter,
            "encoding": self.config.encoding,
            "mode": "FAILFAST",
        }

    def read(self, path: Path) -> DataFrame:
        """Build the (lazy) Bronze DataFrame for a source file.

        Columns are renamed positionally to RAW_COLUMNS. The source file
        name and a row id increasing in source order are added as lineage
        columns.

        Args:
            path: Source file to read.

        Returns:
            DataFrame: Unevaluated Bronze rows.
        """
        return (
            self.spark.read.options(**self.get_csv_read_options())
            .schema(RAW_SCHEMA)
            .csv(str(path))
            .withColumn(SOURCE_FILE_COLUMN, F.lit(path.name))
            .withColumn(ROW_ID_COLUMN, F.monotonically_increasing_id())
        )

    def load(self, path: Path | None = None) -> LoadResult:
        """Load and validate the source file.

        Args:
            path: File to load (uses config input_path if None).

        Returns:
            LoadResult: Loaded rows and timings.

        Raises:
            LoadError: If the file is missing or any row is structurally
                invalid.
        """
        if path is None:
            path = self.config.input_path

        started_at = datetime.now(timezone.utc)
        logger.info(f"Loading raw records from {path}")

        if not path.is_file():
            raise LoadError(f"Source file not found: {path}")

        dataframe = self.read(path)
        try:
            # Forces a full parse; FAILFAST raises on the first bad row
            record_count = dataframe.count()
        except (PySparkException, Py4JJavaError) as e:
            logger.error(f"Malformed source file {path}: {e}")
            raise LoadError(f"Malformed source file {path}: {e}") from e

        result = LoadResult(
            dataframe=dataframe,
            record_count=record_count,
            source_file=path.name,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
        )
        logger.info(
            f"Loaded {result.record_count:,} raw records from {result.source_file} "
            f"in {result.duration_seconds:.2f}s"
        )
        return result
