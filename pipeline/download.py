"""Raw metadata download over HTTPS."""
import logging
import os
import time
from pathlib import Path
from typing import Callable, Optional

import requests

from emoji_kitchen.utils import DownloadError, RAW_METADATA_URL

logger = logging.getLogger(__name__)

MB = 1024 * 1024
PROGRESS_EVERY_BYTES = 5 * MB


def _parse_content_length(value: Optional[str]) -> int:
    try:
        return max(int(value), 0) if value else 0
    except ValueError:
        logger.warning(f"Ignoring invalid Content-Length header: {value!r}")
        return 0


def format_progress(received: int, total: int) -> str:
    if total > 0:
        percent = int(received * 100 / total)
        return f"Downloading metadata: {received / MB:.1f} / {total / MB:.1f} MB ({percent}%)"
    return f"Downloading metadata: {received / MB:.1f} MB"


class MetadataDownloader:
    """Downloads the raw metadata document with completeness checks and retries."""

    def __init__(self, url: str = RAW_METADATA_URL, timeout: int = 60, max_retries: int = 3,
                 session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = session or requests.Session()
        self.base_delay = 1  # Base delay in seconds
        self.chunk_size = 1024 * 1024

    def _wait_with_backoff(self, attempt: int) -> None:
        """Wait with exponential backoff."""
        delay = self.base_delay * (2 ** attempt)
        max_delay = 60  # Cap at 1 minute
        delay = min(delay, max_delay)
        logger.info(f"Waiting {delay} seconds before retry attempt {attempt + 2}")
        time.sleep(delay)

    def download(self, dest: Path, on_progress: Optional[Callable[[str], None]] = None) -> int:
        """
        Download the document to ``dest``, retrying failed attempts.

        Args:
            dest: Final location; only a complete download is moved there
            on_progress: Receives human-readable progress strings

        Returns:
            Number of bytes written

        Raises:
            DownloadError: If every attempt fails
        """
        last_error = None
        for attempt in range(self.max_retries):
            try:
                logger.info(f"Downloading {self.url} (attempt {attempt + 1}/{self.max_retries})")
                return self._download_once(Path(dest), on_progress)
            except DownloadError as e:
                last_error = e
                logger.error(f"Download attempt {attempt + 1} failed: {e}")
                if attempt + 1 < self.max_retries:
                    self._wait_with_backoff(attempt)

        logger.error(f"Maximum retries ({self.max_retries}) exceeded. Giving up.")
        raise last_error

    def _download_once(self, dest: Path, on_progress: Optional[Callable[[str], None]]) -> int:
        staging = dest.with_name(dest.name + '.part')
        headers = {
            # Byte count must match Content-Length, so no transparent decompression
            'Accept-Encoding': 'identity',
            'User-Agent': 'EmojiKitchenIndex/1.0 Python/requests',
        }

        try:
            response = self.session.get(self.url, headers=headers, stream=True,
                                        timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as e:
            raise DownloadError(f"Network error: {e}") from e

        try:
            if response.status_code != 200:
                raise DownloadError(f"Failed to download: HTTP {response.status_code}")

            total = _parse_content_length(response.headers.get('Content-Length'))
            logger.info(f"Starting download. Total size: {total / MB:.2f} MB")

            received = 0
            last_report = 0
            with open(staging, 'wb') as f:
                for chunk in response.iter_content(chunk_size=self.chunk_size):
                    if not chunk:
                        continue
                    f.write(chunk)
                    received += len(chunk)
                    if received - last_report >= PROGRESS_EVERY_BYTES:
                        last_report = received
                        logger.info(f"Downloaded: {received / MB:.2f} MB")
                        if on_progress:
                            on_progress(format_progress(received, total))

            if total > 0 and received != total:
                raise DownloadError(f"Download incomplete: {received}/{total} bytes")

            os.replace(staging, dest)
            if on_progress:
                on_progress(format_progress(received, total))
            return received

        except requests.RequestException as e:
            raise DownloadError(f"Network error during download: {e}") from e
        except OSError as e:
            raise DownloadError(f"Could not save downloaded metadata: {e.strerror or e}") from e
        finally:
            response.close()
            if staging.exists():
                staging.unlink()
