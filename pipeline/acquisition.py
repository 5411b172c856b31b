"""Download, compact and cache the metadata the lookup index is built from."""
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import emoji_kitchen
from emoji_kitchen.index import COMPACT_METADATA_FILENAME
from emoji_kitchen.utils import AcquisitionError, CompactionError
from emoji_kitchen.worker import EXIT_MALFORMED, EXIT_OK

from .download import MB, MetadataDownloader

logger = logging.getLogger(__name__)

RAW_METADATA_FILENAME = 'raw-metadata.json'

ProgressCallback = Callable[[str], None]


class MetadataManager:
    """
    Makes sure the raw document and compact index exist in the data directory.

    At most one acquisition runs at a time per manager: callers arriving while
    one is in flight await the same task and see the same outcome.
    """

    def __init__(self, config: dict, downloader: Optional[MetadataDownloader] = None):
        self.data_dir = Path(config['data_dir'])
        self.raw_path = self.data_dir / RAW_METADATA_FILENAME
        self.compact_path = self.data_dir / COMPACT_METADATA_FILENAME
        self.include_empty = config['include_empty']
        self.bidirectional = config['bidirectional']
        self.compaction_timeout = config['compaction_timeout']
        self.downloader = downloader or MetadataDownloader(
            config['metadata_url'],
            timeout=config['download_timeout'],
            max_retries=config['download_retries'],
        )

        self._inflight: Optional[asyncio.Task] = None
        self._listeners: List[ProgressCallback] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def in_progress(self) -> bool:
        return self._inflight is not None

    def is_ready(self) -> bool:
        """Both files exist. Parsing is left to the index loader."""
        return self.raw_path.exists() and self.compact_path.exists()

    async def ensure_metadata_exists(self, on_progress: Optional[ProgressCallback] = None) -> None:
        """
        Download and compact the metadata if needed.

        Raises:
            DownloadError: If the raw document could not be downloaded
            CompactionError: If the compact index could not be produced
        """
        if self._inflight is None:
            if self.is_ready():
                logger.debug("Metadata files already exist")
                return
            if on_progress is not None:
                self._listeners.append(on_progress)
            self._inflight = asyncio.ensure_future(self._acquire())
        else:
            logger.info("Metadata acquisition already in progress, waiting...")
            if on_progress is not None:
                self._listeners.append(on_progress)

        # Shielded so one cancelled caller does not cancel the shared task
        await asyncio.shield(self._inflight)

    async def refresh_metadata(self, on_progress: Optional[ProgressCallback] = None) -> None:
        """Delete both cached files and acquire them again."""
        if self._inflight is not None:
            try:
                await asyncio.shield(self._inflight)
            except AcquisitionError:
                logger.info("Previous acquisition failed, refreshing anyway")

        logger.info("Removing cached metadata for refresh")
        self._remove(self.compact_path)
        self._remove(self.raw_path)
        await self.ensure_metadata_exists(on_progress)

    def discard_compact(self) -> None:
        """Remove the compact index so the next acquisition rebuilds it from the raw file."""
        logger.info(f"Discarding compact metadata at {self.compact_path}")
        self._remove(self.compact_path)

    def status(self) -> Dict[str, Any]:
        """Paths, existence and sizes of the cached files."""
        def describe(path: Path) -> Dict[str, Any]:
            exists = path.exists()
            return {
                'path': str(path),
                'exists': exists,
                'size_mb': round(path.stat().st_size / MB, 2) if exists else 0.0,
            }

        return {
            'data_dir': str(self.data_dir),
            'raw': describe(self.raw_path),
            'compact': describe(self.compact_path),
            'in_progress': self.in_progress,
        }

    # ------------------------------------------------------------------
    # Acquisition sequence
    # ------------------------------------------------------------------

    async def _acquire(self) -> None:
        try:
            try:
                self.data_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise AcquisitionError(f"Cannot create data directory: {e.strerror or e}") from e

            downloaded = False
            if not self.raw_path.exists():
                await self._download()
                downloaded = True
            else:
                logger.info("Raw metadata already exists")

            if downloaded or not self.compact_path.exists():
                await self._compact()

            self._notify("Ready")
            logger.info("✅ Metadata ready")
        except AcquisitionError as e:
            logger.error(f"Failed to ensure metadata exists: {e}")
            raise
        finally:
            self._inflight = None
            self._listeners = []

    async def _download(self) -> None:
        logger.info(f"Downloading raw metadata from {self.downloader.url}")
        loop = asyncio.get_running_loop()

        def progress(status: str) -> None:
            # Called on the download thread; listeners run on the loop
            loop.call_soon_threadsafe(self._notify, status)

        size = await asyncio.to_thread(self.downloader.download, self.raw_path, progress)
        logger.info(f"Download complete ({size / MB:.2f} MB)")

    async def _compact(self) -> None:
        self._notify("Processing metadata...")
        try:
            await self._run_worker()
        except CompactionError as e:
            if e.malformed:
                logger.error("Raw metadata is malformed, deleting it so the next attempt downloads a fresh copy")
                self._remove(self.raw_path)
            raise

    def _worker_command(self) -> List[str]:
        args = [sys.executable, '-m', 'emoji_kitchen.worker', str(self.raw_path), str(self.compact_path)]
        if not self.include_empty:
            args.append('--exclude-empty')
        if self.bidirectional:
            args.append('--bidirectional')
        return args

    async def _run_worker(self) -> None:
        logger.info("Processing raw metadata in worker process...")
        try:
            process = await asyncio.create_subprocess_exec(
                *self._worker_command(),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
                env=self._worker_env(),
            )
        except OSError as e:
            raise CompactionError(f"Could not start metadata worker: {e}") from e

        try:
            _, stderr = await asyncio.wait_for(process.communicate(), timeout=self.compaction_timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            self._remove(self.compact_path.with_name(self.compact_path.name + '.tmp'))
            raise CompactionError(f"Metadata processing timed out after {self.compaction_timeout}s")

        if process.returncode == EXIT_OK:
            logger.info("Metadata processing complete")
            return

        diagnostic = stderr.decode('utf-8', 'replace').strip().splitlines()
        logger.error(f"Metadata worker exited with code {process.returncode}: "
                     f"{diagnostic[-1] if diagnostic else 'no output'}")

        if process.returncode == EXIT_MALFORMED:
            raise CompactionError("Metadata processing failed: downloaded document is malformed", malformed=True)
        raise CompactionError("Metadata processing failed")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _notify(self, status: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception as e:
                logger.warning(f"Progress callback failed: {e}")

    @staticmethod
    def _worker_env() -> Dict[str, str]:
        # The worker must import this same emoji_kitchen, installed or not
        env = os.environ.copy()
        package_root = str(Path(emoji_kitchen.__file__).resolve().parent.parent)
        env['PYTHONPATH'] = os.pathsep.join(filter(None, [package_root, env.get('PYTHONPATH')]))
        return env

    @staticmethod
    def _remove(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
