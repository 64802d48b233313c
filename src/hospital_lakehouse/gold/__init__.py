"""Gold layer for the Hospital Quality Lakehouse.

The Gold layer aggregates Silver records into per-facility averages and
the facility, region and condition reporting views.
"""

from hospital_lakehouse.gold.aggregator import (
    GoldReports,
    GoldViews,
    bottom_facilities,
    build_views,
    collect_reports,
    compare_conditions,
    compare_regions,
    summarize_facilities,
    top_facilities,
)
from hospital_lakehouse.gold.schemas import (
    BottomFacility,
    ConditionSummary,
    FacilitySummary,
    RegionSummary,
    TopFacility,
)

__all__ = [
    "BottomFacility",
    "ConditionSummary",
    "FacilitySummary",
    "GoldReports",
    "GoldViews",
    "RegionSummary",
    "TopFacility",
    "bottom_facilities",
    "build_views",
    "collect_reports",
    "compare_conditions",
    "compare_regions",
    "summarize_facilities",
    "top_facilities",
]
