"""Hospital Quality Medallion Lakehouse.

A batch data engineering project demonstrating:
- Medallion architecture (Bronze/Silver/Gold)
- Failure-tolerant casting of raw quality measures
- Region-partitioned tables with atomic replace semantics
- Facility, region and condition reporting views
"""

__version__ = "0.1.0"
