"""Source file downloader.

This module provides utilities for fetching the Timely and Effective
Care source file over HTTP into the local landing path.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from hospital_lakehouse.config import SourceConfig

logger = logging.getLogger(__name__)


@dataclass
class SourceFile:
    """Represents a downloaded source file.

    Attributes:
        url: URL the file was downloaded from.
        local_path: Local file path.
        size_bytes: Size of the downloaded file in bytes.
        duration_seconds: Time spent downloading.
    """

    url: str
    local_path: Path
    size_bytes: int = 0
    duration_seconds: float = 0.0

    @property
    def filename(self) -> str:
        """Get the local file name.

        Returns:
            str: Name of the local file.
        """
        return self.local_path.name


class SourceDownloader:
    """Downloads the delimited source file to the local filesystem.

    The file is streamed into a temporary sibling and renamed into place
    once complete, so a failed download never leaves a partial file at
    the input path.

    Attributes:
        config: Source configuration.
        session: Requests session with retry logic.
    """

    def __init__(self, config: SourceConfig) -> None:
        """Initialize the downloader.

        Args:
            config: Source configuration.
        """
        self.config = config
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a requests session with retry logic.

        Returns:
            requests.Session: Configured session.
        """
        session = requests.Session()
        retry_strategy = Retry(
            total=self.config.max_retries,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def download(
        self,
        url: str | None = None,
        local_path: Path | None = None,
    ) -> SourceFile:
        """Download the source file.

        Args:
            url: URL to fetch (uses config url if None).
            local_path: Destination path (uses config input_path if None).

        Returns:
            SourceFile: Metadata of the downloaded file.

        Raises:
            ValueError: If no URL is configured.
            requests.RequestException: If the download fails.
        """
        url = url or self.config.url
        if not url:
            raise ValueError("No source URL configured")
        if local_path is None:
            local_path = self.config.input_path

        local_path.parent.mkdir(parents=True, exist_ok=True)
        partial_path = local_path.with_name(f"{local_path.name}.part")

        logger.info(f"Downloading {url} to {local_path}")
        start_time = time.time()

        try:
            response = self.session.get(
                url,
                timeout=self.config.timeout_seconds,
                stream=True,
            )
            response.raise_for_status()

            with open(partial_path, "wb") as f:
                for chunk in response.iter_content(chunk_size=8192):
                    f.write(chunk)
            partial_path.replace(local_path)
        finally:
            partial_path.unlink(missing_ok=True)

        source = SourceFile(
            url=url,
            local_path=local_path,
            size_bytes=local_path.stat().st_size,
            duration_seconds=time.time() - start_time,
        )
        logger.info(
            f"Downloaded {source.filename}: "
            f"{source.size_bytes:,} bytes, "
            f"{source.duration_seconds:.2f}s"
        )
        return source

    def check_availability(self, url: str | None = None) -> bool:
        """Check if the source file is available.

        Args:
            url: URL to check (uses config url if None).

        Returns:
            bool: True if file exists and is accessible.
        """
        url = url or self.config.url
        if not url:
            return False
        try:
            response = self.session.head(url, timeout=10, allow_redirects=True)
            return response.status_code == 200
        except requests.RequestException:
            return False
