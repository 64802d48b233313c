"""Gold layer aggregations and reporting views.

All views are recomputed in full from the Silver DataFrame on every call.
Averages are Spark ``avg``: null scores are ignored, and a group with no
non-null scores averages to null.

A facility summary groups by (state, facility_id, condition). A facility
whose name is spelled differently across rows reports the lowest spelling.

Ranked views break ties on equal avg_score by facility_id and then
condition, both ascending, and carry a 1-based ``rank`` column.
"""

import logging
from dataclasses import dataclass

from pyspark.sql import Column, DataFrame, Window
from pyspark.sql import functions as F

from hospital_lakehouse.config import ReportingConfig
from hospital_lakehouse.gold.schemas import (
    BottomFacility,
    ConditionSummary,
    FacilitySummary,
    RegionSummary,
    TopFacility,
)

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 20

FACILITY_SUMMARY_ORDER: tuple[str, ...] = ("state", "facility_id", "condition")


@dataclass
class GoldViews:
    """The Gold facility summary and the four reporting views as DataFrames.

    Attributes:
        facility_summaries: Per facility and condition averages.
        top_facilities: Highest scoring facilities of the report region.
        bottom_facilities: Lowest scoring facilities of the report region.
        region_comparison: Average facility score per region.
        condition_comparison: Average facility record count per condition.
    """

    facility_summaries: DataFrame
    top_facilities: DataFrame
    bottom_facilities: DataFrame
    region_comparison: DataFrame
    condition_comparison: DataFrame


@dataclass
class GoldReports:
    """Collected rows of the Gold views, in report order."""

    facility_summaries: list[FacilitySummary]
    top_facilities: list[TopFacility]
    bottom_facilities: list[BottomFacility]
    region_comparison: list[RegionSummary]
    condition_comparison: list[ConditionSummary]


def _with_rank(df: DataFrame, *order: Column) -> DataFrame:
    # A single unpartitioned window; the views are small
    return df.withColumn("rank", F.row_number().over(Window.orderBy(*order)))


def summarize_facilities(silver: DataFrame) -> DataFrame:
    """Average scores per facility, region and condition.

    Args:
        silver: Cleaned Silver rows.

    Returns:
        DataFrame: One row per (state, facility_id, condition).
    """
    return (
        silver.groupBy("state", "facility_id", "condition")
        .agg(
            F.min("facility_name").alias("facility_name"),
            F.avg("score").alias("avg_score"),
            F.count(F.lit(1)).alias("record_count"),
        )
        .select(
            "facility_id",
            "facility_name",
            "state",
            "condition",
            F.col("avg_score").cast("double").alias("avg_score"),
            F.col("record_count").cast("long").alias("record_count"),
        )
    )


def _rank_region(
    summaries: DataFrame,
    region: str,
    n: int,
    descending: bool,
) -> DataFrame:
    if n < 1:
        raise ValueError(f"n must be at least 1, got {n}")

    score = F.col("avg_score").desc() if descending else F.col("avg_score").asc()
    candidates = summaries.where(
        (F.col("state") == region.strip()) & F.col("avg_score").isNotNull()
    )
    ranked = _with_rank(candidates, score, F.col("facility_id"), F.col("condition"))
    return ranked.where(F.col("rank") <= n)


def top_facilities(
    summaries: DataFrame,
    region: str,
    n: int = DEFAULT_TOP_N,
) -> DataFrame:
    """Highest average scores within a region.

    Args:
        summaries: Facility summaries.
        region: Region code (surrounding whitespace is ignored).
        n: Maximum number of rows.

    Returns:
        DataFrame: rank, facility_name, state, condition, avg_score.

    Raises:
        ValueError: If n is less than 1.
    """
    return _rank_region(summaries, region, n, descending=True).select(
        "rank", "facility_name", "state", "condition", "avg_score"
    )


def bottom_facilities(
    summaries: DataFrame,
    region: str,
    n: int = DEFAULT_TOP_N,
) -> DataFrame:
    """Lowest average scores within a region.

    Args:
        summaries: Facility summaries.
        region: Region code (surrounding whitespace is ignored).
        n: Maximum number of rows.

    Returns:
        DataFrame: rank, facility_name, avg_score.

    Raises:
        ValueError: If n is less than 1.
    """
    return _rank_region(summaries, region, n, descending=False).select(
        "rank", "facility_name", "avg_score"
    )


def compare_regions(summaries: DataFrame) -> DataFrame:
    """Average of facility avg_score values per region.

    Each facility summary counts once regardless of its row count. The
    result is rounded half-up to 2 decimals. Regions without any scored
    facility have a null average and sort last.

    Args:
        summaries: Facility summaries.

    Returns:
        DataFrame: rank, state, avg_state_score; highest first, ties by
        state.
    """
    regions = summaries.groupBy("state").agg(
        F.round(F.avg("avg_score"), 2).alias("avg_state_score")
    )
    ranked = _with_rank(
        regions, F.col("avg_state_score").desc_nulls_last(), F.col("state").asc()
    )
    return ranked.select("rank", "state", "avg_state_score")


def compare_conditions(summaries: DataFrame) -> DataFrame:
    """Average facility record count per condition.

    Args:
        summaries: Facility summaries.

    Returns:
        DataFrame: rank, condition, avg_condition_score; highest first,
        ties by condition.
    """
    conditions = summaries.groupBy("condition").agg(
        F.avg("record_count").alias("avg_condition_score")
    )
    ranked = _with_rank(
        conditions, F.col("avg_condition_score").desc(), F.col("condition").asc()
    )
    return ranked.select("rank", "condition", "avg_condition_score")


def build_views(silver: DataFrame, reporting: ReportingConfig) -> GoldViews:
    """Compute the facility summary and all four reporting views.

    Args:
        silver: Cleaned Silver rows.
        reporting: Region and row limit for the ranked views.

    Returns:
        GoldViews: Lazy Gold DataFrames.
    """
    summaries = summarize_facilities(silver)
    logger.info(
        f"Building Gold views for region {reporting.region} (top {reporting.top_n})"
    )
    return GoldViews(
        facility_summaries=summaries,
        top_facilities=top_facilities(summaries, reporting.region, reporting.top_n),
        bottom_facilities=bottom_facilities(
            summaries, reporting.region, reporting.top_n
        ),
        region_comparison=compare_regions(summaries),
        condition_comparison=compare_conditions(summaries),
    )


def collect_reports(views: GoldViews) -> GoldReports:
    """Collect Gold views into validated rows in report order.

    Args:
        views: Gold DataFrames, freshly built or read from storage.

    Returns:
        GoldReports: Rows of every view.
    """

    def rows(df: DataFrame, model, *order: str) -> list:
        return [model(**row.asDict()) for row in df.orderBy(*order).collect()]

    return GoldReports(
        facility_summaries=rows(
            views.facility_summaries, FacilitySummary, *FACILITY_SUMMARY_ORDER
        ),
        top_facilities=rows(views.top_facilities, TopFacility, "rank"),
        bottom_facilities=rows(views.bottom_facilities, BottomFacility, "rank"),
        region_comparison=rows(views.region_comparison, RegionSummary, "rank"),
        condition_comparison=rows(
            views.condition_comparison, ConditionSummary, "rank"
        ),
    )
