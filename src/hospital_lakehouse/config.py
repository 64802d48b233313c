"""Configuration models for the Hospital Quality Lakehouse.

This module defines Pydantic configuration models for:
- Source file settings (local path, optional download URL, CSV dialect)
- Local Spark session settings
- Table configurations for each medallion layer
- Reporting view settings
"""

from pathlib import Path

from pydantic import BaseModel, Field, computed_field


class SourceConfig(BaseModel):
    """Configuration for the delimited source file.

    Attributes:
        input_path: Local path of the source file.
        url: Optional URL to fetch the file from when it is missing locally.
        delimiter: Field delimiter.
        encoding: Text encoding passed to the CSV reader.
        has_header: Whether the first row is a header to skip.
        timeout_seconds: HTTP request timeout.
        max_retries: Maximum retry attempts for failed downloads.
    """

    input_path: Path = Field(
        description="Local path of the source file",
    )
    url: str | None = Field(
        default=None,
        description="URL to download the source file from (None = local only)",
    )
    delimiter: str = Field(
        default=",",
        min_length=1,
        max_length=1,
        description="Single-character field delimiter",
    )
    encoding: str = Field(
        default="UTF-8",
        description="Text encoding of the source file",
    )
    has_header: bool = Field(
        default=True,
        description="Skip the first row as a header",
    )
    timeout_seconds: int = Field(
        default=60,
        ge=10,
        le=300,
        description="HTTP request timeout in seconds",
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Maximum retry attempts for failed downloads",
    )


class SparkConfig(BaseModel):
    """Configuration for the local Spark session.

    Attributes:
        app_name: Spark application name.
        master: Spark master URL.
        shuffle_partitions: Number of partitions used for shuffles.
        options: Extra Spark configuration entries.
    """

    app_name: str = Field(
        default="hospital_lakehouse",
        description="Spark application name",
    )
    master: str = Field(
        default="local[*]",
        description="Spark master URL",
    )
    shuffle_partitions: int = Field(
        default=4,
        ge=1,
        le=2000,
        description="Value of spark.sql.shuffle.partitions",
    )
    options: dict[str, str] = Field(
        default_factory=dict,
        description="Additional Spark configuration entries",
    )


class TableConfig(BaseModel):
    """Configuration for a lakehouse table.

    Attributes:
        catalog: Catalog name.
        schema_name: Schema (layer) name.
        table_name: Table name.
        partition_columns: Columns to partition by.
    """

    catalog: str = Field(
        default="hospital_lakehouse",
        description="Catalog name",
    )
    schema_name: str = Field(
        description="Schema (database) name",
    )
    table_name: str = Field(
        description="Table name",
    )
    partition_columns: list[str] = Field(
        default_factory=list,
        description="Columns to partition by",
    )

    @computed_field
    @property
    def full_table_name(self) -> str:
        """Get fully qualified table name.

        Returns:
            str: Catalog.schema.table format.
        """
        return f"{self.catalog}.{self.schema_name}.{self.table_name}"


class BronzeConfig(BaseModel):
    """Configuration for Bronze layer tables.

    Attributes:
        raw_table: Configuration for the raw care measures table.
    """

    raw_table: TableConfig = Field(
        default_factory=lambda: TableConfig(
            schema_name="bronze",
            table_name="timely_effective_care_raw",
        ),
    )


class SilverConfig(BaseModel):
    """Configuration for Silver layer tables.

    Attributes:
        cleaned_table: Configuration for the cleaned care measures table.
    """

    cleaned_table: TableConfig = Field(
        default_factory=lambda: TableConfig(
            schema_name="silver",
            table_name="timely_effective_care_cleaned",
            partition_columns=["state"],
        ),
    )


class GoldConfig(BaseModel):
    """Configuration for Gold layer tables.

    Attributes:
        facility_summary_table: Per-facility average score table config.
        top_facilities_table: Top-N facilities for the report region.
        bottom_facilities_table: Bottom-N facilities for the report region.
        region_comparison_table: Per-region average score table config.
        condition_comparison_table: Per-condition average count table config.
    """

    facility_summary_table: TableConfig = Field(
        default_factory=lambda: TableConfig(
            schema_name="gold",
            table_name="facility_summary",
            partition_columns=["state"],
        ),
    )
    top_facilities_table: TableConfig = Field(
        default_factory=lambda: TableConfig(
            schema_name="gold",
            table_name="top_facilities",
        ),
    )
    bottom_facilities_table: TableConfig = Field(
        default_factory=lambda: TableConfig(
            schema_name="gold",
            table_name="bottom_facilities",
        ),
    )
    region_comparison_table: TableConfig = Field(
        default_factory=lambda: TableConfig(
            schema_name="gold",
            table_name="region_comparison",
        ),
    )
    condition_comparison_table: TableConfig = Field(
        default_factory=lambda: TableConfig(
            schema_name="gold",
            table_name="condition_comparison",
        ),
    )


class ReportingConfig(BaseModel):
    """Configuration for the Gold reporting views.

    Attributes:
        region: Region code used by the Top-N and Bottom-N views.
        top_n: Number of rows kept by the Top-N and Bottom-N views.
    """

    region: str = Field(
        default="NY",
        min_length=1,
        description="Region code for the ranked facility views",
    )
    top_n: int = Field(
        default=20,
        ge=1,
        description="Row limit for the ranked facility views",
    )


class LakehouseConfig(BaseModel):
    """Main configuration for the Hospital Quality Lakehouse.

    This is the top-level configuration class that aggregates all
    layer-specific configurations.

    Attributes:
        source: Source file configuration.
        spark: Local Spark session configuration.
        bronze: Bronze layer configuration.
        silver: Silver layer configuration.
        gold: Gold layer configuration.
        reporting: Reporting view configuration.
        storage_root: Root path for lakehouse tables.
    """

    source: SourceConfig
    spark: SparkConfig = Field(default_factory=SparkConfig)
    bronze: BronzeConfig = Field(default_factory=BronzeConfig)
    silver: SilverConfig = Field(default_factory=SilverConfig)
    gold: GoldConfig = Field(default_factory=GoldConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)
    storage_root: Path = Field(
        default=Path("/tmp/hospital_lakehouse"),
        description="Root path for table storage",
    )
