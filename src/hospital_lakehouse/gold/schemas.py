"""Schema definitions for Gold layer tables and reporting views.

This module defines:
- Spark schemas of the Gold tables
- Pydantic models for rows read back from them
"""

from pydantic import BaseModel, ConfigDict, Field
from pyspark.sql.types import (
    DoubleType,
    IntegerType,
    LongType,
    StringType,
    StructField,
    StructType,
)

FACILITY_SUMMARY_SCHEMA = StructType(
    [
        StructField("facility_id", StringType(), nullable=False),
        StructField("facility_name", StringType(), nullable=True),
        StructField("state", StringType(), nullable=True),
        StructField("condition", StringType(), nullable=True),
        StructField("avg_score", DoubleType(), nullable=True),
        StructField("record_count", LongType(), nullable=False),
    ]
)

# Ranked views carry their 1-based position so stored order survives reads
TOP_FACILITIES_SCHEMA = StructType(
    [
        StructField("rank", IntegerType(), nullable=False),
        StructField("facility_name", StringType(), nullable=True),
        StructField("state", StringType(), nullable=True),
        StructField("condition", StringType(), nullable=True),
        StructField("avg_score", DoubleType(), nullable=False),
    ]
)

BOTTOM_FACILITIES_SCHEMA = StructType(
    [
        StructField("rank", IntegerType(), nullable=False),
        StructField("facility_name", StringType(), nullable=True),
        StructField("avg_score", DoubleType(), nullable=False),
    ]
)

REGION_COMPARISON_SCHEMA = StructType(
    [
        StructField("rank", IntegerType(), nullable=False),
        StructField("state", StringType(), nullable=True),
        StructField("avg_state_score", DoubleType(), nullable=True),
    ]
)

CONDITION_COMPARISON_SCHEMA = StructType(
    [
        StructField("rank", IntegerType(), nullable=False),
        StructField("condition", StringType(), nullable=True),
        StructField("avg_condition_score", DoubleType(), nullable=False),
    ]
)


class FacilitySummary(BaseModel):
    """Average score of one facility for one condition.

    Attributes:
        facility_id: Facility identifier.
        facility_name: Facility name (lowest spelling if it varies).
        state: Two-letter region code.
        condition: Condition name.
        avg_score: Mean of non-null scores (None if all scores are null).
        record_count: Number of Silver rows in the group.
    """

    model_config = ConfigDict(frozen=True)

    facility_id: str
    facility_name: str | None = None
    state: str | None = None
    condition: str | None = None
    avg_score: float | None = None
    record_count: int = Field(ge=1)


class TopFacility(BaseModel):
    """Row of the Top-N facilities view."""

    model_config = ConfigDict(frozen=True)

    rank: int = Field(ge=1)
    facility_name: str | None = None
    state: str | None = None
    condition: str | None = None
    avg_score: float


class BottomFacility(BaseModel):
    """Row of the Bottom-N facilities view."""

    model_config = ConfigDict(frozen=True)

    rank: int = Field(ge=1)
    facility_name: str | None = None
    avg_score: float


class RegionSummary(BaseModel):
    """Average of facility scores for one region, rounded to 2 decimals."""

    model_config = ConfigDict(frozen=True)

    rank: int = Field(ge=1)
    state: str | None = None
    avg_state_score: float | None = None


class ConditionSummary(BaseModel):
    """Average facility record count for one condition."""

    model_config = ConfigDict(frozen=True)

    rank: int = Field(ge=1)
    condition: str | None = None
    avg_condition_score: float
