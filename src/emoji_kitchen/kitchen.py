"""Lookup facade over the compact index."""
import logging
import random
from typing import Dict, List, Optional, Tuple

from .index import CompactIndexLoader
from .schema import COMBOS_KEY, NAME_KEY
from .urls import build_mashup_url
from .utils import IMAGE_BASE_URL

logger = logging.getLogger(__name__)


class EmojiKitchen:
    """
    Query surface for emoji mashups.

    Upstream stores each combination under only one of its two emojis, so
    every pair lookup checks both directions.
    """

    def __init__(self, loader: CompactIndexLoader, image_base_url: str = IMAGE_BASE_URL):
        self.loader = loader
        self.image_base_url = image_base_url

    @classmethod
    def from_config(cls, config: dict) -> 'EmojiKitchen':
        return cls(CompactIndexLoader.from_config(config), config['image_base_url'])

    @property
    def index(self):
        return self.loader.get_index()

    def reload(self) -> None:
        self.loader.reload()

    def list_base_emojis(self) -> List[Dict[str, str]]:
        """All base emojis with display names, in index order."""
        return [{'emoji': emoji, 'name': entry[NAME_KEY]} for emoji, entry in self.index.items()]

    def list_combinations(self, emoji: str) -> List[Dict[str, str]]:
        """Partners stored under ``emoji``; empty for an unknown emoji."""
        index = self.index
        entry = index.get(emoji)
        if entry is None:
            return []
        return [
            {'emoji': partner, 'name': index.get(partner, {}).get(NAME_KEY, '')}
            for partner in entry[COMBOS_KEY]
        ]

    def _find_encoded(self, emoji1: str, emoji2: str) -> Optional[str]:
        index = self.index
        encoded = index.get(emoji1, {}).get(COMBOS_KEY, {}).get(emoji2)
        if encoded is None:
            encoded = index.get(emoji2, {}).get(COMBOS_KEY, {}).get(emoji1)
        return encoded

    def is_valid_pair(self, emoji1: str, emoji2: str) -> bool:
        return self._find_encoded(emoji1, emoji2) is not None

    def resolve_pair(self, emoji1: str, emoji2: str) -> Optional[Dict[str, str]]:
        """Image URL for a pair in either order, or None when no mashup exists."""
        encoded = self._find_encoded(emoji1, emoji2)
        if encoded is None:
            return None
        return {'url': build_mashup_url(encoded, self.image_base_url)}

    def list_all_pairs(self) -> List[Tuple[str, str]]:
        """Every stored (base, partner) pair, one direction as stored."""
        return [
            (emoji, partner)
            for emoji, entry in self.index.items()
            for partner in entry[COMBOS_KEY]
        ]

    def random_pair(self, rng: Optional[random.Random] = None) -> Optional[Tuple[str, str]]:
        pairs = self.list_all_pairs()
        if not pairs:
            return None
        return (rng or random).choice(pairs)
