"""Data ingestion module for the Hospital Quality Lakehouse.

This module provides utilities for fetching the source file
into the local landing path.
"""

from hospital_lakehouse.ingestion.downloader import (
    SourceDownloader,
    SourceFile,
)

__all__ = [
    "SourceDownloader",
    "SourceFile",
]
