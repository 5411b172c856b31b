"""Emoji Kitchen mashup lookup backed by a compact local index."""
from .codec import emoji_to_codepoint, codepoint_to_emoji
from .history import MashupHistory, MashupHistoryItem
from .index import CompactIndexLoader
from .kitchen import EmojiKitchen
from .urls import build_mashup_url

__all__ = [
    'emoji_to_codepoint',
    'codepoint_to_emoji',
    'MashupHistory',
    'MashupHistoryItem',
    'CompactIndexLoader',
    'EmojiKitchen',
    'build_mashup_url',
]
