"""Atomic, partitioned Parquet table storage for the lakehouse layers.

Each table is a Spark Parquet directory under
``<root>/<schema_name>/<table_name>``, partitioned with
``DataFrameWriter.partitionBy``. Spark writes the ``_SUCCESS`` marker, and
a table is only readable once the marker exists.

Spark's overwrite mode deletes the old files before writing the new ones.
Writes here are staged instead: every table of one write lands in a hidden
copy of the schema directory, which is swapped into place with
``os.replace`` once all of them succeeded. A reader sees either the
previous version of every table in the write or the complete new one.
"""

import logging
import os
import shutil
import uuid
from collections.abc import Sequence
from pathlib import Path

from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.types import StructType

from hospital_lakehouse.config import TableConfig
from hospital_lakehouse.exceptions import TableNotFoundError

logger = logging.getLogger(__name__)

SUCCESS_MARKER = "_SUCCESS"


class TableStore:
    """Reads and writes lakehouse tables on the local filesystem.

    Attributes:
        spark: Spark session used for reads and writes.
        root: Root directory holding one subdirectory per schema.
    """

    def __init__(self, spark: SparkSession, root: Path | str) -> None:
        """Initialize the store.

        Args:
            spark: Active Spark session.
            root: Root directory for all tables.
        """
        self.spark = spark
        self.root = Path(root)

    def table_path(self, table: TableConfig) -> Path:
        """Get the storage directory of a table.

        Args:
            table: Table configuration.

        Returns:
            Path: Table directory.
        """
        return self.root / table.schema_name / table.table_name

    def exists(self, table: TableConfig) -> bool:
        """Check whether a complete version of the table exists.

        Args:
            table: Table configuration.

        Returns:
            bool: True if the table has a success marker.
        """
        return (self.table_path(table) / SUCCESS_MARKER).is_file()

    def write_table(self, table: TableConfig, df: DataFrame) -> int:
        """Replace a single table.

        Args:
            table: Table configuration (partition columns are honoured).
            df: Rows to write.

        Returns:
            int: Number of rows written.
        """
        return self.write_tables([(table, df)])[table.full_table_name]

    def write_tables(
        self,
        tables: Sequence[tuple[TableConfig, DataFrame]],
    ) -> dict[str, int]:
        """Replace several tables of one schema together.

        Tables of the schema that are not part of the write are carried
        over unchanged.

        Args:
            tables: (table configuration, rows) pairs.

        Returns:
            dict: Rows written per fully qualified table name.

        Raises:
            ValueError: If the tables span more than one schema.
            Exception: Any Spark or filesystem error. No table of the
                schema is changed in that case.
        """
        schema_names = {table.schema_name for table, _ in tables}
        if len(schema_names) != 1:
            raise ValueError(
                f"Tables written together must share one schema, got {sorted(schema_names)}"
            )

        schema_dir = self.root / schema_names.pop()
        staging = self.root / f".{schema_dir.name}.staging-{uuid.uuid4().hex}"
        written = {table.table_name for table, _ in tables}
        counts: dict[str, int] = {}

        try:
            staging.mkdir(parents=True)
            if schema_dir.exists():
                for existing in schema_dir.iterdir():
                    if existing.is_dir() and existing.name not in written:
                        shutil.copytree(existing, staging / existing.name)

            for table, df in tables:
                counts[table.full_table_name] = df.count()
                self._write_dataframe(
                    df, staging / table.table_name, table.partition_columns
                )

            self._swap(staging, schema_dir)
        except Exception:
            shutil.rmtree(staging, ignore_errors=True)
            raise

        for name, count in counts.items():
            logger.info(f"Wrote {count:,} rows to {name}")
        return counts

    def read_table(self, table: TableConfig, schema: StructType) -> DataFrame:
        """Read a table.

        Args:
            table: Table configuration.
            schema: Expected table schema; columns come back in its order.

        Returns:
            DataFrame: Rows of the table (lazy).

        Raises:
            TableNotFoundError: If the table has not been written.
        """
        path = self.table_path(table)
        if not self.exists(table):
            raise TableNotFoundError(
                f"Table {table.full_table_name} not found at {path}"
            )
        return (
            self.spark.read.schema(schema)
            .parquet(str(path))
            .select(*schema.fieldNames())
        )

    def list_partitions(self, table: TableConfig) -> list[str]:
        """List the partition directories of a table.

        Args:
            table: Table configuration.

        Returns:
            list: Relative partition paths (e.g. ``state=NY``), empty for
            unpartitioned tables.

        Raises:
            TableNotFoundError: If the table has not been written.
        """
        path = self.table_path(table)
        if not self.exists(table):
            raise TableNotFoundError(
                f"Table {table.full_table_name} not found at {path}"
            )
        if not table.partition_columns:
            return []
        pattern = "/".join(f"{column}=*" for column in table.partition_columns)
        return sorted(
            p.relative_to(path).as_posix() for p in path.glob(pattern) if p.is_dir()
        )

    def drop_table(self, table: TableConfig) -> bool:
        """Drop a table if it exists.

        Args:
            table: Table configuration.

        Returns:
            bool: True if a table directory was removed.
        """
        path = self.table_path(table)
        if not path.exists():
            return False
        shutil.rmtree(path)
        logger.info(f"Dropped {table.full_table_name}")
        return True

    def _write_dataframe(
        self,
        df: DataFrame,
        path: Path,
        partition_columns: list[str],
    ) -> None:
        writer = df.write.mode("errorifexists")
        if partition_columns:
            writer = writer.partitionBy(*partition_columns)
        writer.parquet(str(path))

    def _swap(self, staging: Path, target: Path) -> None:
        if not target.exists():
            os.replace(staging, target)
            return

        backup = target.parent / f".{target.name}.previous-{uuid.uuid4().hex}"
        os.replace(target, backup)
        try:
            os.replace(staging, target)
        except OSError:
            os.replace(backup, target)
            raise
        shutil.rmtree(backup, ignore_errors=True)
