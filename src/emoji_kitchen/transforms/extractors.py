"""Field extraction from raw metadata records."""
import logging
from typing import Dict, Any, List, Optional

from ..schema import (
    ALT_FIELD,
    VARIANT_DATE_FIELD,
    VARIANT_LATEST_FIELD,
    VARIANT_LEFT_FIELD,
    VARIANT_RIGHT_FIELD,
    validate_variant,
)
from ..urls import encode_combination_fields

logger = logging.getLogger(__name__)


def select_variant(variants: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Pick the representative variant of a combination.

    Args:
        variants: Historical renderings of one pair, in document order

    Returns:
        The first variant flagged isLatest, else the first variant, else None
    """
    if not variants:
        return None
    for variant in variants:
        if isinstance(variant, dict) and variant.get(VARIANT_LATEST_FIELD):
            return variant
    return variants[0]


def format_name(alt: str) -> str:
    """
    Turn an upstream alt token into a display name.

    Args:
        alt: Underscore-separated token, e.g. 'smiling_face_with_hearts'

    Returns:
        'Smiling Face With Hearts'
    """
    return ' '.join(word[:1].upper() + word[1:] for word in alt.split('_'))


def encode_combination(variant: Dict[str, Any]) -> str:
    """
    Encode the URL-relevant fields of a variant as 'date:left:right'.

    The variant's own recorded codepoints are used, since they may keep
    presentation selectors that a round trip through the emoji would lose.
    """
    validate_variant(variant)
    return encode_combination_fields(
        str(variant[VARIANT_DATE_FIELD]),
        variant[VARIANT_LEFT_FIELD],
        variant[VARIANT_RIGHT_FIELD],
    )


def extract_name(record: Dict[str, Any]) -> str:
    """Display name for a raw data record; empty when it carries no alt token."""
    alt = record.get(ALT_FIELD) or ''
    return format_name(alt) if alt else ''
