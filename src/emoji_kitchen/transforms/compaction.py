"""Raw metadata -> compact index transform."""
import logging
from typing import Dict, Any

from ..codec import codepoint_to_emoji
from ..schema import (
    COMBINATIONS_FIELD,
    COMBOS_KEY,
    DATA_FIELD,
    KNOWN_SUPPORTED_FIELD,
    NAME_KEY,
    validate_document_structure,
)
from ..utils import MalformedDocumentError
from .extractors import encode_combination, extract_name, select_variant

logger = logging.getLogger(__name__)

CompactIndex = Dict[str, Dict[str, Any]]


def compact_metadata(document: Dict[str, Any], include_empty: bool = True,
                     bidirectional: bool = False) -> CompactIndex:
    """
    Build the compact index from a raw metadata document.

    Args:
        document: Parsed upstream metadata.json
        include_empty: Keep base emojis that have no combinations
        bidirectional: Also store each pair under the partner's entry

    Returns:
        Mapping of base emoji -> {'n': name, 'c': {partner emoji: 'date:left:right'}},
        in knownSupportedEmoji order

    Raises:
        MalformedDocumentError: If the document or one of its records is malformed
        CodecError: If a codepoint key is not valid hex
    """
    validate_document_structure(document)
    data = document[DATA_FIELD]

    index: CompactIndex = {}
    missing = 0

    for codepoint in document[KNOWN_SUPPORTED_FIELD]:
        record = data.get(codepoint)
        if record is None:
            # knownSupportedEmoji and data drift upstream
            missing += 1
            continue
        if not isinstance(record, dict):
            raise MalformedDocumentError(f"Record for {codepoint} must be an object")

        combinations = record.get(COMBINATIONS_FIELD) or {}
        if not isinstance(combinations, dict):
            raise MalformedDocumentError(f"Combinations for {codepoint} must be an object")

        combos = {}
        for partner_codepoint, variants in combinations.items():
            if not isinstance(variants, list):
                raise MalformedDocumentError(f"Variants for {codepoint}+{partner_codepoint} must be a list")
            variant = select_variant(variants)
            if variant is None:
                continue
            combos[codepoint_to_emoji(partner_codepoint)] = encode_combination(variant)

        index[codepoint_to_emoji(codepoint)] = {
            NAME_KEY: extract_name(record),
            COMBOS_KEY: combos,
        }

    if missing:
        logger.info(f"Skipped {missing} supported emoji(s) with no data record")

    if bidirectional:
        mirror_combinations(index)

    if not include_empty:
        empty = [emoji for emoji, entry in index.items() if not entry[COMBOS_KEY]]
        for emoji in empty:
            del index[emoji]
        if empty:
            logger.info(f"Dropped {len(empty)} base emoji(s) without combinations")

    logger.info(f"Compacted {len(index)} base emojis with {count_combinations(index)} combinations")
    return index


def mirror_combinations(index: CompactIndex) -> int:
    """
    Store every pair under both participants, in place.

    Only partners that are base entries themselves receive the mirrored pair,
    and an existing entry is never overwritten. Returns the number added.
    """
    added = 0
    for emoji, entry in list(index.items()):
        for partner, encoded in list(entry[COMBOS_KEY].items()):
            partner_entry = index.get(partner)
            if partner_entry is None or emoji in partner_entry[COMBOS_KEY]:
                continue
            partner_entry[COMBOS_KEY][emoji] = encoded
            added += 1
    return added


def count_combinations(index: CompactIndex) -> int:
    """Total number of stored (directed) pairs."""
    return sum(len(entry[COMBOS_KEY]) for entry in index.values())
