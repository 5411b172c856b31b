"""Recently resolved mashups, persisted as a JSON file."""
import json
import logging
import os
import time
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)

HISTORY_FILENAME = 'history.json'
MAX_HISTORY = 50


@dataclass
class MashupHistoryItem:
    left_emoji: str
    right_emoji: str
    mashup_url: str
    timestamp: int  # epoch milliseconds


class MashupHistory:
    """Most-recent-first list of mashups, capped at ``limit`` items."""

    def __init__(self, path: Union[str, Path], limit: int = MAX_HISTORY):
        self.path = Path(path)
        self.limit = limit

    @classmethod
    def from_config(cls, config: dict) -> 'MashupHistory':
        return cls(Path(config['data_dir']) / HISTORY_FILENAME, config['history_limit'])

    def get(self) -> List[MashupHistoryItem]:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                stored = json.load(f)
            return [MashupHistoryItem(**item) for item in stored]
        except FileNotFoundError:
            return []
        except (UnicodeDecodeError, json.JSONDecodeError, TypeError) as e:
            logger.warning(f"History file unreadable, starting fresh: {e}")
            return []

    def add(self, left_emoji: str, right_emoji: str, mashup_url: str) -> MashupHistoryItem:
        item = MashupHistoryItem(
            left_emoji=left_emoji,
            right_emoji=right_emoji,
            mashup_url=mashup_url,
            timestamp=int(time.time() * 1000),
        )
        self._save([item] + self.get())
        return item

    def remove(self, timestamp: int) -> None:
        self._save([item for item in self.get() if item.timestamp != timestamp])

    def clear(self) -> None:
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass

    def _save(self, items: List[MashupHistoryItem]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + '.tmp')
        try:
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump([asdict(item) for item in items[:self.limit]], f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            if tmp_path.exists():
                tmp_path.unlink()
            raise
