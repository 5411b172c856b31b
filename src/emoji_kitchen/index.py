"""Lazy, memoized loading of the compact index file."""
import json
import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional, Union

from .schema import is_compact_index
from .utils import CompactIndexError

logger = logging.getLogger(__name__)

COMPACT_METADATA_FILENAME = 'emoji-kitchen.json'


def read_compact_index(path: Union[str, Path]) -> Dict[str, Dict[str, Any]]:
    """
    Read and parse a compact index file.

    Raises:
        FileNotFoundError: If the file does not exist
        CompactIndexError: If the file is not a readable compact index
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            index = json.load(f)
    except FileNotFoundError:
        raise
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CompactIndexError(f"Compact index is unreadable: {e}") from e

    if not is_compact_index(index):
        raise CompactIndexError("Compact index has an unexpected layout")
    return index


def write_compact_index(index: Dict[str, Dict[str, Any]], path: Union[str, Path]) -> None:
    """Write the index to ``path.tmp`` and rename it into place."""
    path = Path(path)
    tmp_path = path.with_name(path.name + '.tmp')
    try:
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(index, f, ensure_ascii=False, separators=(',', ':'))
        os.replace(tmp_path, path)
    except BaseException:
        if tmp_path.exists():
            tmp_path.unlink()
        raise


class CompactIndexLoader:
    """Owns the in-memory compact index for one data directory."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._index: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def from_config(cls, config: dict) -> 'CompactIndexLoader':
        return cls(Path(config['data_dir']) / COMPACT_METADATA_FILENAME)

    @property
    def is_loaded(self) -> bool:
        return self._index is not None

    def get_index(self) -> Dict[str, Dict[str, Any]]:
        """
        Return the compact index, reading it from disk on first use.

        A missing file yields an empty index that is not memoized, so a later
        call picks up the file once acquisition has produced it.

        Raises:
            CompactIndexError: If the file exists but cannot be parsed
        """
        if self._index is not None:
            return self._index

        try:
            index = read_compact_index(self.path)
        except FileNotFoundError:
            logger.warning(f"Compact metadata not found at {self.path}")
            return {}

        logger.info(f"Loaded compact index with {len(index)} entries")
        self._index = index
        return index

    def reload(self) -> None:
        """Drop the memoized index; the next get_index() re-reads disk."""
        self._index = None
