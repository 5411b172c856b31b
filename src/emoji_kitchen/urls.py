"""Mashup image URL construction."""
from typing import Tuple

from .utils import CodecError, IMAGE_BASE_URL

COMBINATION_DELIMITER = ':'


def encode_combination_fields(date: str, left_codepoint: str, right_codepoint: str) -> str:
    """Pack date and both codepoint strings into one encoded combination."""
    return COMBINATION_DELIMITER.join((date, left_codepoint, right_codepoint))


def decode_combination(encoded: str) -> Tuple[str, str, str]:
    """Split an encoded combination into (date, left codepoint, right codepoint)."""
    parts = encoded.split(COMBINATION_DELIMITER)
    if len(parts) != 3 or not all(parts):
        raise CodecError(f"Malformed encoded combination: {encoded!r}")
    return parts[0], parts[1], parts[2]


def _url_part(codepoint: str) -> str:
    # "1f600-200d-1f9b0" -> "u1f600-u200d-u1f9b0"
    return 'u' + codepoint.replace('-', '-u')


def build_mashup_url(encoded: str, base_url: str = IMAGE_BASE_URL) -> str:
    """
    Rebuild the gstatic PNG URL for an encoded combination.

    Example:
        >>> build_mashup_url('20201001:1f600:2764')
        'https://www.gstatic.com/android/keyboard/emojikitchen/20201001/u1f600/u1f600_u2764.png'
    """
    date, left, right = decode_combination(encoded)
    u_left = _url_part(left)
    u_right = _url_part(right)
    return f"{base_url}/{date}/{u_left}/{u_left}_{u_right}.png"
