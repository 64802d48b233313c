"""Batch orchestration of the Bronze, Silver and Gold stages.

Stages run synchronously in a fixed order. Each stage reads the previous
stage's table from the store and fully replaces its own output, so any
stage can be re-run safely.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

import requests
from pyspark.sql import SparkSession

from hospital_lakehouse.bronze.loader import RawLoader
from hospital_lakehouse.bronze.schemas import BRONZE_SCHEMA
from hospital_lakehouse.config import LakehouseConfig
from hospital_lakehouse.exceptions import LoadError
from hospital_lakehouse.gold.aggregator import (
    GoldReports,
    GoldViews,
    build_views,
    collect_reports,
)
from hospital_lakehouse.gold.schemas import (
    BOTTOM_FACILITIES_SCHEMA,
    CONDITION_COMPARISON_SCHEMA,
    FACILITY_SUMMARY_SCHEMA,
    REGION_COMPARISON_SCHEMA,
    TOP_FACILITIES_SCHEMA,
)
from hospital_lakehouse.ingestion.downloader import SourceDownloader
from hospital_lakehouse.silver.cleaner import Cleaner
from hospital_lakehouse.silver.schemas import SILVER_SCHEMA
from hospital_lakehouse.spark import get_spark
from hospital_lakehouse.storage.table_store import TableStore

logger = logging.getLogger(__name__)


@dataclass
class StageResult:
    """Result of one pipeline stage.

    Attributes:
        stage: Stage name (bronze, silver, gold).
        tables: Fully qualified names of the tables written.
        rows_in: Number of rows read by the stage.
        rows_out: Number of rows written to the stage's main table.
        started_at: Timestamp when the stage started.
        completed_at: Timestamp when the stage completed.
    """

    stage: str
    tables: list[str]
    rows_in: int
    rows_out: int
    started_at: datetime
    completed_at: datetime

    @property
    def duration_seconds(self) -> float:
        """Calculate stage duration in seconds.

        Returns:
            float: Duration in seconds.
        """
        return (self.completed_at - self.started_at).total_seconds()


@dataclass
class PipelineResult:
    """Results of a full pipeline run."""

    bronze: StageResult
    silver: StageResult
    gold: StageResult

    @property
    def stages(self) -> list[StageResult]:
        """Stage results in execution order.

        Returns:
            list: Bronze, Silver and Gold results.
        """
        return [self.bronze, self.silver, self.gold]

    @property
    def duration_seconds(self) -> float:
        """Total duration of the run in seconds.

        Returns:
            float: Duration in seconds.
        """
        return (self.gold.completed_at - self.bronze.started_at).total_seconds()


class LakehousePipeline:
    """Runs the Bronze -> Silver -> Gold pipeline on a local Spark session.

    Attributes:
        config: Lakehouse configuration.
        spark: Spark session shared by every stage.
        store: Table store for all layers.
    """

    def __init__(
        self,
        config: LakehouseConfig,
        spark: SparkSession | None = None,
        store: TableStore | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Lakehouse configuration instance.
            spark: Spark session (defaults to one built from config.spark).
            store: Table store (defaults to one rooted at config.storage_root).
        """
        self.config = config
        self.spark = spark or get_spark(config.spark)
        self.store = store or TableStore(self.spark, config.storage_root)
        self.loader = RawLoader(self.spark, config.source)
        self.cleaner = Cleaner()

    def ensure_source(self) -> None:
        """Download the source file if it is missing and a URL is configured.

        Raises:
            LoadError: If the download fails.
        """
        source = self.config.source
        if source.input_path.exists() or not source.url:
            return

        downloader = SourceDownloader(source)
        try:
            downloader.download()
        except requests.RequestException as e:
            logger.error(f"Failed to download {source.url}: {e}")
            raise LoadError(f"Failed to download {source.url}: {e}") from e

    def run_bronze(self) -> StageResult:
        """Load the source file into the Bronze raw table.

        Returns:
            StageResult: Bronze stage result.

        Raises:
            LoadError: If the source cannot be loaded. The Bronze table is
                left as it was.
        """
        started_at = datetime.now(timezone.utc)
        table = self.config.bronze.raw_table

        self.ensure_source()
        loaded = self.loader.load()
        rows_out = self.store.write_table(table, loaded.dataframe)

        return self._finish(
            "bronze", [table.full_table_name], loaded.record_count, rows_out, started_at
        )

    def run_silver(self) -> StageResult:
        """Clean the Bronze table into the Silver table.

        Returns:
            StageResult: Silver stage result.

        Raises:
            TableNotFoundError: If the Bronze table has not been built.
        """
        started_at = datetime.now(timezone.utc)
        table = self.config.silver.cleaned_table

        raw = self.store.read_table(self.config.bronze.raw_table, BRONZE_SCHEMA)
        result = self.cleaner.clean(raw)
        rows_out = self.store.write_table(table, result.dataframe)

        return self._finish(
            "silver", [table.full_table_name], result.rows_read, rows_out, started_at
        )

    def run_gold(self) -> StageResult:
        """Aggregate the Silver table into the Gold tables.

        The facility summary and the four views are replaced together:
        if any of them fails to write, every Gold table keeps its
        previous version.

        Returns:
            StageResult: Gold stage result (rows_out counts facility
            summaries).

        Raises:
            TableNotFoundError: If the Silver table has not been built.
        """
        started_at = datetime.now(timezone.utc)
        gold = self.config.gold

        silver = self.store.read_table(self.config.silver.cleaned_table, SILVER_SCHEMA)
        rows_in = silver.count()
        views = build_views(silver, self.config.reporting)

        outputs = [
            (gold.facility_summary_table, views.facility_summaries),
            (gold.top_facilities_table, views.top_facilities),
            (gold.bottom_facilities_table, views.bottom_facilities),
            (gold.region_comparison_table, views.region_comparison),
            (gold.condition_comparison_table, views.condition_comparison),
        ]
        counts = self.store.write_tables(outputs)

        return self._finish(
            "gold",
            [table.full_table_name for table, _ in outputs],
            rows_in,
            counts[gold.facility_summary_table.full_table_name],
            started_at,
        )

    def read_views(self) -> GoldViews:
        """Read the materialized Gold tables as DataFrames.

        Returns:
            GoldViews: Gold tables as last written.

        Raises:
            TableNotFoundError: If the Gold stage has not run.
        """
        gold = self.config.gold
        return GoldViews(
            facility_summaries=self.store.read_table(
                gold.facility_summary_table, FACILITY_SUMMARY_SCHEMA
            ),
            top_facilities=self.store.read_table(
                gold.top_facilities_table, TOP_FACILITIES_SCHEMA
            ),
            bottom_facilities=self.store.read_table(
                gold.bottom_facilities_table, BOTTOM_FACILITIES_SCHEMA
            ),
            region_comparison=self.store.read_table(
                gold.region_comparison_table, REGION_COMPARISON_SCHEMA
            ),
            condition_comparison=self.store.read_table(
                gold.condition_comparison_table, CONDITION_COMPARISON_SCHEMA
            ),
        )

    def read_reports(self) -> GoldReports:
        """Read the materialized Gold tables in report order.

        Returns:
            GoldReports: Gold rows as last written.

        Raises:
            TableNotFoundError: If the Gold stage has not run.
        """
        return collect_reports(self.read_views())

    def run(self) -> PipelineResult:
        """Run all stages in order.

        Returns:
            PipelineResult: Per-stage results.

        Raises:
            LoadError: If the source cannot be loaded; later stages do not run.
        """
        logger.info(f"Starting pipeline for {self.config.source.input_path}")
        result = PipelineResult(
            bronze=self.run_bronze(),
            silver=self.run_silver(),
            gold=self.run_gold(),
        )
        logger.info(f"Pipeline completed in {result.duration_seconds:.2f}s")
        return result

    def _finish(
        self,
        stage: str,
        tables: list[str],
        rows_in: int,
        rows_out: int,
        started_at: datetime,
    ) -> StageResult:
        result = StageResult(
            stage=stage,
            tables=tables,
            rows_in=rows_in,
            rows_out=rows_out,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
        )
        logger.info(
            f"Stage {stage} finished: {rows_in:,} rows in, {rows_out:,} rows out, "
            f"{result.duration_seconds:.2f}s"
        )
        return result
