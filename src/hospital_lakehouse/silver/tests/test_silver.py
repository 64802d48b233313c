"""Unit tests for Silver layer casts and cleaning."""

from collections.abc import Callable
from datetime import date

import pytest
from pyspark.sql import DataFrame, SparkSession
from pyspark.sql.types import StringType, StructField, StructType

from hospital_lakehouse.bronze.schemas import ROW_ID_COLUMN
from hospital_lakehouse.silver.casts import cast_int, parse_date, trim_whitespace
from hospital_lakehouse.silver.cleaner import Cleaner, CleaningResult
from hospital_lakehouse.silver.schemas import SILVER_SCHEMA, STRING_COLUMNS

VALUE_SCHEMA = StructType([StructField("value", StringType())])


def apply(spark: SparkSession, cast, values: list[str | None]) -> list:
    """Apply a column cast to single-column rows and collect the results."""
    df = spark.createDataFrame([(v,) for v in values], VALUE_SCHEMA)
    return [row["value"] for row in df.select(cast(df, "value").alias("value")).collect()]


def apply_twice(spark: SparkSession, cast, values: list[str | None]) -> tuple[list, list]:
    """Apply a cast once and then again to its own output."""
    df = spark.createDataFrame([(v,) for v in values], VALUE_SCHEMA)
    once = df.select(cast(df, "value").alias("value"))
    twice = once.select(cast(once, "value").alias("value"))
    return (
        [row["value"] for row in once.collect()],
        [row["value"] for row in twice.collect()],
    )


class TestTrimWhitespace:
    """Tests for trim_whitespace."""

    def test_strips_surrounding_whitespace(self, spark: SparkSession) -> None:
        """Test spaces, tabs and line breaks are removed at both ends."""
        assert apply(spark, trim_whitespace, ["  General Hosp \t", "\nNY\r\n"]) == [
            "General Hosp",
            "NY",
        ]

    def test_keeps_inner_whitespace(self, spark: SparkSession) -> None:
        """Test inner spaces are preserved."""
        assert apply(spark, trim_whitespace, [" 1 Main St "]) == ["1 Main St"]

    def test_null_passes_through(self, spark: SparkSession) -> None:
        """Test null stays null."""
        assert apply(spark, trim_whitespace, [None]) == [None]


class TestCastInt:
    """Tests for cast_int."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("85", 85),
            (" 120 ", 120),
            ("-3", -3),
            ("+7", 7),
            ("85.0", 85),
            ("85.7", 85),
            ("-1.5", -1),
            ("N/A", None),
            ("Not Available", None),
            ("", None),
            ("1e3", None),
            ("99999999999", None),
            (None, None),
        ],
    )
    def test_cast(self, spark: SparkSession, value: str | None, expected: int | None) -> None:
        """Test text casts with null on failure."""
        assert apply(spark, cast_int, [value]) == [expected]

    def test_very_long_digit_string_is_null(self, spark: SparkSession) -> None:
        """Test thousands of digits degrade to null instead of failing."""
        assert apply(spark, cast_int, ["9" * 5000, "1" + "0" * 4400]) == [None, None]

    @pytest.mark.parametrize("value", ["٣", "٤٢", "１２", "४"])
    def test_non_ascii_digits_are_null(self, spark: SparkSession, value: str) -> None:
        """Test only ASCII digits count as numeric text."""
        assert apply(spark, cast_int, [value]) == [None]

    def test_cast_is_idempotent(self, spark: SparkSession) -> None:
        """Test casting an already-cast column returns it unchanged."""
        once, twice = apply_twice(spark, cast_int, ["85", "N/A", " 42.9 ", None])

        assert once == [85, None, 42, None]
        assert twice == once


class TestParseDate:
    """Tests for parse_date."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("01/01/2023", date(2023, 1, 1)),
            ("01/31/2023", date(2023, 1, 31)),
            ("12/31/2022", date(2022, 12, 31)),
            ("2023-01-01", None),
            ("13/01/2023", None),
            ("02/30/2023", None),
            ("1/1/2023", None),
            ("", None),
            ("N/A", None),
            (None, None),
        ],
    )
    def test_parse(self, spark: SparkSession, value: str | None, expected: date | None) -> None:
        """Test MM/dd/yyyy parsing with null on failure."""
        assert apply(spark, parse_date, [value]) == [expected]

    def test_parse_is_idempotent(self, spark: SparkSession) -> None:
        """Test parsing an already-parsed column returns it unchanged."""
        once, twice = apply_twice(spark, parse_date, ["01/01/2023", "garbage", None])

        assert once == [date(2023, 1, 1), None, None]
        assert twice == once


class TestCleaner:
    """Tests for Cleaner."""

    @pytest.fixture
    def cleaner(self) -> Cleaner:
        """Create test cleaner."""
        return Cleaner()

    @pytest.fixture
    def cleaned(
        self,
        cleaner: Cleaner,
        raw_frame: Callable[..., DataFrame],
        source_rows: list[list[str]],
    ) -> CleaningResult:
        """Cleaning result for the shared source rows."""
        return cleaner.clean(raw_frame(source_rows))

    def test_clean_scenario_row(
        self,
        cleaner: Cleaner,
        raw_frame: Callable[..., DataFrame],
        sample_row: list[str],
    ) -> None:
        """Test the reference row casts every typed field."""
        row = cleaner.clean(raw_frame([sample_row])).dataframe.first()

        assert row["facility_id"] == "F1"
        assert row["score"] == 85
        assert row["sample"] == 120
        assert row["start_date"] == date(2023, 1, 1)
        assert row["end_date"] == date(2023, 1, 31)
        assert row["footnote"] == ""

    def test_clean_output_schema(self, cleaned: CleaningResult) -> None:
        """Test the Silver columns and types."""
        assert [(f.name, f.dataType) for f in cleaned.dataframe.schema.fields] == [
            (f.name, f.dataType) for f in SILVER_SCHEMA.fields
        ]

    def test_clean_trims_all_strings(
        self,
        cleaner: Cleaner,
        raw_frame: Callable[..., DataFrame],
        make_row: Callable[..., list[str]],
    ) -> None:
        """Test no string field keeps surrounding whitespace."""
        padded = {column: f"  value {column}\t" for column in STRING_COLUMNS}

        row = cleaner.clean(raw_frame([make_row(**padded)])).dataframe.first()

        for column in STRING_COLUMNS:
            assert row[column] == f"value {column}"

    def test_clean_non_numeric_score_is_null(
        self,
        cleaner: Cleaner,
        raw_frame: Callable[..., DataFrame],
        make_row: Callable[..., list[str]],
    ) -> None:
        """Test a non-numeric score degrades to null and keeps the row."""
        result = cleaner.clean(raw_frame([make_row(score="N/A")]))

        row = result.dataframe.first()
        assert result.rows_written == 1
        assert row["score"] is None
        assert row["sample"] == 120

    def test_clean_bad_date_is_null(
        self,
        cleaner: Cleaner,
        raw_frame: Callable[..., DataFrame],
        make_row: Callable[..., list[str]],
    ) -> None:
        """Test an unparseable date degrades to null and keeps the row."""
        row = cleaner.clean(raw_frame([make_row(start_date="2023-01-01")])).dataframe.first()

        assert row["start_date"] is None
        assert row["end_date"] == date(2023, 1, 31)

    def test_clean_padded_date_is_parsed(
        self,
        cleaner: Cleaner,
        raw_frame: Callable[..., DataFrame],
        make_row: Callable[..., list[str]],
    ) -> None:
        """Test dates are parsed after trimming."""
        row = cleaner.clean(raw_frame([make_row(end_date=" 12/31/2022 ")])).dataframe.first()

        assert row["end_date"] == date(2022, 12, 31)

    @pytest.mark.parametrize("facility_id", ["", "   ", "\t", None])
    def test_clean_drops_blank_facility_id(
        self,
        cleaner: Cleaner,
        raw_frame: Callable[..., DataFrame],
        make_row: Callable[..., list[str]],
        facility_id: str | None,
    ) -> None:
        """Test rows without a facility identifier are dropped."""
        result = cleaner.clean(raw_frame([make_row(facility_id=facility_id)]))

        assert result.rows_dropped == 1
        assert result.dataframe.count() == 0

    def test_clean_counts_dropped_rows(self, cleaned: CleaningResult) -> None:
        """Test the row deficit equals the blank-identifier count."""
        names = [row["facility_name"] for row in cleaned.dataframe.collect()]

        assert cleaned.rows_read == 6
        assert cleaned.rows_dropped == 1
        assert cleaned.rows_written == 5
        assert len(names) == 5
        assert "Ghost Hosp" not in names

    def test_clean_preserves_input_order(self, cleaned: CleaningResult) -> None:
        """Test kept rows stay in input order."""
        rows = cleaned.dataframe.collect()

        assert [row["facility_id"] for row in rows] == ["F1", "F1", "F2", "F3", "F3"]
        row_ids = [row[ROW_ID_COLUMN] for row in rows]
        assert row_ids == sorted(row_ids)

    def test_clean_counts_cast_failures(
        self,
        cleaner: Cleaner,
        raw_frame: Callable[..., DataFrame],
        make_row: Callable[..., list[str]],
    ) -> None:
        """Test only non-empty values that fail to cast are counted."""
        result = cleaner.clean(
            raw_frame(
                [
                    make_row(score="N/A"),
                    make_row(score="", sample="many"),
                    make_row(score=None, end_date="soon"),
                    make_row(facility_id="", score="bad"),
                ]
            )
        )

        assert result.cast_failures == {
            "score": 1,
            "sample": 1,
            "start_date": 0,
            "end_date": 1,
        }

    def test_clean_is_deterministic(
        self,
        cleaner: Cleaner,
        raw_frame: Callable[..., DataFrame],
        source_rows: list[list[str]],
    ) -> None:
        """Test identical input yields identical output."""
        raw = raw_frame(source_rows)

        first = cleaner.clean(raw).dataframe.collect()
        second = cleaner.clean(raw).dataframe.collect()

        assert first == second

    def test_clean_is_idempotent(self, cleaner: Cleaner, cleaned: CleaningResult) -> None:
        """Test cleaning Silver output again changes nothing."""
        again = cleaner.clean(cleaned.dataframe)

        assert again.rows_dropped == 0
        assert set(again.cast_failures.values()) == {0}
        assert again.dataframe.collect() == cleaned.dataframe.collect()

    def test_clean_empty_input(
        self,
        cleaner: Cleaner,
        raw_frame: Callable[..., DataFrame],
    ) -> None:
        """Test an empty input produces an empty result."""
        result = cleaner.clean(raw_frame([]))

        assert result.dataframe.count() == 0
        assert result.rows_read == 0
        assert result.rows_dropped == 0
        assert set(result.cast_failures.values()) == {0}
