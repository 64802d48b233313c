"""Shared pytest fixtures for the Hospital Quality Lakehouse tests."""

import csv
import io
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path

import pytest
from pyspark.sql import DataFrame, SparkSession
from pyspark.sql import functions as F

from hospital_lakehouse.bronze.schemas import (
    RAW_COLUMNS,
    RAW_SCHEMA,
    ROW_ID_COLUMN,
    SOURCE_FILE_COLUMN,
)
from hospital_lakehouse.config import LakehouseConfig, SourceConfig, SparkConfig
from hospital_lakehouse.spark import get_spark

SOURCE_HEADER = [
    "Facility ID",
    "Facility Name",
    "Address",
    "City/Town",
    "State",
    "ZIP Code",
    "County/Parish",
    "Telephone Number",
    "Condition",
    "Measure ID",
    "Measure Name",
    "Score",
    "Sample",
    "Footnote",
    "Start Date",
    "End Date",
]


@pytest.fixture(scope="session")
def spark() -> Iterator[SparkSession]:
    """Local SparkSession shared by all tests."""
    session = get_spark(
        SparkConfig(app_name="hospital_lakehouse_tests", master="local[2]", shuffle_partitions=2)
    )
    yield session
    session.stop()


@pytest.fixture
def sample_row() -> list[str]:
    """A well-formed source row.

    Returns:
        list: 16 field values in source column order.
    """
    return [
        "F1",
        "General Hosp",
        "1 Main St",
        "Anytown",
        "NY",
        "10001",
        "County",
        "555-1234",
        "Sepsis",
        "M1",
        "Measure One",
        "85",
        "120",
        "",
        "01/01/2023",
        "01/31/2023",
    ]


@pytest.fixture
def make_row(sample_row: list[str]) -> Callable[..., list[str]]:
    """Factory for source rows with selected fields overridden.

    Args:
        sample_row: Base row fixture.

    Returns:
        Callable: ``make_row(facility_id="F2", score="90")`` style factory.
    """

    def _make_row(**overrides: str | None) -> list[str | None]:
        row = dict(zip(RAW_COLUMNS, sample_row))
        row.update(overrides)
        return [row[column] for column in RAW_COLUMNS]

    return _make_row


@pytest.fixture
def to_csv() -> Callable[..., str]:
    """Render rows as CSV text with the source header.

    Returns:
        Callable: Function taking rows and returning CSV content.
    """

    def _to_csv(rows: Sequence[Sequence[str]], header: bool = True) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        if header:
            writer.writerow(SOURCE_HEADER)
        writer.writerows(rows)
        return buffer.getvalue()

    return _to_csv


@pytest.fixture
def raw_frame(spark: SparkSession) -> Callable[..., DataFrame]:
    """Build a Bronze-shaped DataFrame from source rows.

    Args:
        spark: Spark session fixture.

    Returns:
        Callable: Function taking rows and returning a DataFrame with the
        Bronze lineage columns.
    """

    def _raw_frame(rows: Sequence[Sequence[str | None]]) -> DataFrame:
        return (
            spark.createDataFrame([tuple(row) for row in rows], RAW_SCHEMA)
            .withColumn(SOURCE_FILE_COLUMN, F.lit("timely_effective_care.csv"))
            .withColumn(ROW_ID_COLUMN, F.monotonically_increasing_id())
        )

    return _raw_frame


@pytest.fixture
def source_rows(make_row: Callable[..., list[str]]) -> list[list[str]]:
    """A small multi-region dataset.

    Two NY facilities average 90 and 80 for Sepsis, one NJ facility has
    a non-numeric score, and one row has a blank facility identifier.

    Returns:
        list: Source rows.
    """
    return [
        make_row(facility_id="F1", facility_name="General Hosp", score="95"),
        make_row(facility_id="F1", facility_name="General Hosp", score="85"),
        make_row(facility_id="F2", facility_name="County Medical", score="80"),
        make_row(
            facility_id="F3",
            facility_name="Shore Clinic",
            state="NJ",
            score="70",
            condition="Emergency Department",
        ),
        make_row(
            facility_id="F3",
            facility_name="Shore Clinic",
            state="NJ",
            score="N/A",
            condition="Emergency Department",
        ),
        make_row(facility_id="   ", facility_name="Ghost Hosp", score="100"),
    ]


@pytest.fixture
def lakehouse_config(
    tmp_path: Path,
    source_rows: list[list[str]],
    to_csv: Callable[..., str],
) -> LakehouseConfig:
    """Configuration pointing at a temporary source file and storage root.

    Returns:
        LakehouseConfig: Test configuration.
    """
    input_path = tmp_path / "landing" / "timely_effective_care.csv"
    input_path.parent.mkdir(parents=True)
    input_path.write_text(to_csv(source_rows), encoding="utf-8")

    return LakehouseConfig(
        source=SourceConfig(input_path=input_path),
        storage_root=tmp_path / "lakehouse",
    )
