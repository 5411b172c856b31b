"""Transforms from raw upstream metadata to the compact index."""
from .compaction import compact_metadata, count_combinations, mirror_combinations
from .extractors import encode_combination, format_name, select_variant

__all__ = [
    'compact_metadata',
    'count_combinations',
    'mirror_combinations',
    'encode_combination',
    'format_name',
    'select_variant',
]
