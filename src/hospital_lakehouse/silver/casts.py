"""Column casts with null-on-failure semantics.

Each helper returns a Spark column expression for one column of a
DataFrame. A column that already has the target type passes through
unchanged, so applying a cast to its own output is a no-op.

Integer casts use Spark's non-ANSI ``CAST(... AS INT)``: surrounding
whitespace is ignored, decimal text truncates toward zero, and anything
else (including out-of-range values and non-ASCII digits) becomes null.
"""

from pyspark.sql import Column, DataFrame
from pyspark.sql import functions as F
from pyspark.sql.types import DateType, IntegerType, StringType

# Java DateTimeFormatter pattern of the source dates
DATE_FORMAT = "MM/dd/yyyy"

_SURROUNDING_WHITESPACE = r"^\s+|\s+$"


def trim_whitespace(df: DataFrame, column: str) -> Column:
    """Strip leading and trailing whitespace from a text column.

    Unlike ``F.trim``, tabs and line breaks are stripped as well as spaces.

    Args:
        df: DataFrame holding the column.
        column: Column name.

    Returns:
        Column: Trimmed text (null stays null).
    """
    if not isinstance(df.schema[column].dataType, StringType):
        return F.col(column)
    return F.regexp_replace(F.col(column), _SURROUNDING_WHITESPACE, "")


def cast_int(df: DataFrame, column: str) -> Column:
    """Cast a column to a 32-bit integer, null on failure.

    Args:
        df: DataFrame holding the column.
        column: Column name.

    Returns:
        Column: Integer column.
    """
    if isinstance(df.schema[column].dataType, IntegerType):
        return F.col(column)
    return F.col(column).cast(IntegerType())


def parse_date(df: DataFrame, column: str) -> Column:
    """Parse a MM/dd/yyyy text column into a date, null on failure.

    Args:
        df: DataFrame holding the column.
        column: Column name.

    Returns:
        Column: Date column.
    """
    if isinstance(df.schema[column].dataType, DateType):
        return F.col(column)
    return F.to_date(F.col(column), DATE_FORMAT)
