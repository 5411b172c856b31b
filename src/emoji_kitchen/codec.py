"""Conversion between emoji characters and hyphen-joined hex codepoint strings."""
import re

from .utils import CodecError

CODEPOINT_SEPARATOR = '-'
MAX_CODEPOINT = 0x10FFFF
SURROGATE_RANGE = range(0xD800, 0xE000)

_HEX_SEGMENT = re.compile(r'[0-9a-fA-F]+')


def emoji_to_codepoint(emoji: str) -> str:
    """
    Encode an emoji sequence as lowercase hex codepoints joined by '-'.

    Python strings index by code point, so characters outside the Basic
    Multilingual Plane contribute exactly one segment.

    Example:
        >>> emoji_to_codepoint('\U0001f600')
        '1f600'
    """
    if not emoji:
        raise CodecError("Cannot encode an empty emoji")
    return CODEPOINT_SEPARATOR.join(format(ord(char), 'x') for char in emoji)


def codepoint_to_emoji(codepoint: str) -> str:
    """
    Decode a codepoint string such as '1f600-200d-1f9b0' back to characters.

    Raises:
        CodecError: If any segment is empty, not plain hex, a surrogate, or
            beyond U+10FFFF
    """
    if not codepoint:
        raise CodecError("Cannot decode an empty codepoint string")

    chars = []
    for segment in codepoint.split(CODEPOINT_SEPARATOR):
        # int(x, 16) alone would also take '1_f600' and ' 1f600'
        if not _HEX_SEGMENT.fullmatch(segment):
            raise CodecError(f"Invalid codepoint segment {segment!r} in {codepoint!r}")
        value = int(segment, 16)
        if value > MAX_CODEPOINT or value in SURROGATE_RANGE:
            raise CodecError(f"Codepoint {segment!r} in {codepoint!r} is not a Unicode scalar value")
        chars.append(chr(value))
    return ''.join(chars)
