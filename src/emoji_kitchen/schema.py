"""Field names and structure checks for the raw and compact metadata documents."""
import logging
from typing import Dict, Any

from .utils import MalformedDocumentError

logger = logging.getLogger(__name__)

# Raw upstream document (emoji-kitchen-backend metadata.json)
KNOWN_SUPPORTED_FIELD = 'knownSupportedEmoji'
DATA_FIELD = 'data'
ALT_FIELD = 'alt'
COMBINATIONS_FIELD = 'combinations'

# Variant records inside a combinations list
VARIANT_DATE_FIELD = 'date'
VARIANT_LATEST_FIELD = 'isLatest'
VARIANT_LEFT_FIELD = 'leftEmojiCodepoint'
VARIANT_RIGHT_FIELD = 'rightEmojiCodepoint'

REQUIRED_VARIANT_FIELDS = {VARIANT_DATE_FIELD, VARIANT_LEFT_FIELD, VARIANT_RIGHT_FIELD}

# Compact index entries: {"😀": {"n": "Grinning Face", "c": {"❤️": "20201001:1f600:2764"}}}
NAME_KEY = 'n'
COMBOS_KEY = 'c'


def validate_document_structure(document: Any) -> None:
    """
    Check the top-level shape of a raw metadata document.

    Only the containers are checked here; per-entry problems surface during
    compaction as KeyError/TypeError and are treated the same way by the worker.

    Raises:
        MalformedDocumentError: If the document cannot be compacted
    """
    if not isinstance(document, dict):
        raise MalformedDocumentError(f"Document root must be an object, got {type(document).__name__}")

    missing = [field for field in (KNOWN_SUPPORTED_FIELD, DATA_FIELD) if field not in document]
    if missing:
        raise MalformedDocumentError(f"Document missing required fields: {missing}")

    if not isinstance(document[KNOWN_SUPPORTED_FIELD], list):
        raise MalformedDocumentError(f"'{KNOWN_SUPPORTED_FIELD}' must be a list")
    if not isinstance(document[DATA_FIELD], dict):
        raise MalformedDocumentError(f"'{DATA_FIELD}' must be an object")


def validate_variant(variant: Dict[str, Any]) -> None:
    """Raise MalformedDocumentError if a variant lacks the fields needed for its URL."""
    if not isinstance(variant, dict):
        raise MalformedDocumentError(f"Variant must be an object, got {type(variant).__name__}")
    missing = REQUIRED_VARIANT_FIELDS - variant.keys()
    if missing:
        raise MalformedDocumentError(f"Variant missing required fields: {sorted(missing)}")


def is_compact_index(index: Any) -> bool:
    """Shallow check that a parsed object looks like a compact index."""
    if not isinstance(index, dict):
        return False
    for entry in index.values():
        if not isinstance(entry, dict) or not isinstance(entry.get(COMBOS_KEY), dict):
            return False
        # One entry is enough to tell the layouts apart
        break
    return True
