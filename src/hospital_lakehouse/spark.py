"""Local Spark session for the lakehouse stages.

The session settings fix the SQL semantics the stages rely on:

- ``spark.sql.ansi.enabled=false``: failed casts yield null instead of
  raising.
- ``spark.sql.legacy.timeParserPolicy=CORRECTED``: unparseable dates yield
  null instead of raising an upgrade error.
- ``spark.sql.csv.parser.columnPruning.enabled=false``: the CSV reader
  checks every row's field count, even for queries that only count rows.
"""

import logging

from pyspark.sql import SparkSession

from hospital_lakehouse.config import SparkConfig

logger = logging.getLogger(__name__)

SESSION_DEFAULTS: dict[str, str] = {
    "spark.sql.ansi.enabled": "false",
    "spark.sql.legacy.timeParserPolicy": "CORRECTED",
    "spark.sql.csv.parser.columnPruning.enabled": "false",
    "spark.sql.session.timeZone": "UTC",
    "spark.ui.enabled": "false",
}


def get_spark(config: SparkConfig | None = None) -> SparkSession:
    """Get or create the local SparkSession.

    Args:
        config: Session settings (defaults to SparkConfig()).

    Returns:
        SparkSession: Active session with the lakehouse settings applied.
    """
    if config is None:
        config = SparkConfig()

    builder = (
        SparkSession.builder.master(config.master)
        .appName(config.app_name)
        .config("spark.sql.shuffle.partitions", str(config.shuffle_partitions))
    )
    for key, value in {**SESSION_DEFAULTS, **config.options}.items():
        builder = builder.config(key, value)

    spark = builder.getOrCreate()
    logger.info(f"Using Spark {spark.version} ({config.master})")
    return spark
