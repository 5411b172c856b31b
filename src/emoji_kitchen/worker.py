"""Compaction worker, run in its own process to bound peak memory.

Usage:
    python -m emoji_kitchen.worker RAW_PATH COMPACT_PATH [--exclude-empty] [--bidirectional]

Exit codes: 0 success, 3 raw document malformed, 1 any other failure.
"""
import argparse
import json
import os
import sys
from typing import Optional, Sequence

from .index import write_compact_index
from .transforms import compact_metadata, count_combinations
from .utils import CodecError, MalformedDocumentError, setup_logging, get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_MALFORMED = 3

MALFORMED_ERRORS = (
    json.JSONDecodeError,
    UnicodeError,
    MalformedDocumentError,
    CodecError,
    KeyError,
    TypeError,
    AttributeError,
)


def run_compaction(raw_path: str, compact_path: str, include_empty: bool = True,
                   bidirectional: bool = False) -> int:
    """Read the raw document, compact it, write the index. Returns the combination count."""
    logger.info(f"Reading raw metadata ({os.path.getsize(raw_path) / 1024 / 1024:.2f} MB)")
    with open(raw_path, 'r', encoding='utf-8') as f:
        document = json.load(f)

    index = compact_metadata(document, include_empty=include_empty, bidirectional=bidirectional)
    del document

    write_compact_index(index, compact_path)
    size_mb = os.path.getsize(compact_path) / 1024 / 1024
    total = count_combinations(index)
    logger.info(f"✅ Wrote compact index: {size_mb:.2f} MB, {len(index)} emojis, {total} combinations")
    return total


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Compact raw Emoji Kitchen metadata')
    parser.add_argument('raw_path', help='Path to the raw metadata.json')
    parser.add_argument('compact_path', help='Where to write the compact index')
    parser.add_argument('--exclude-empty', action='store_true',
                        help='Drop base emojis that have no combinations')
    parser.add_argument('--bidirectional', action='store_true',
                        help='Store each pair under both emojis')
    args = parser.parse_args(argv)

    setup_logging(level=os.getenv('LOG_LEVEL', 'INFO'), structured=False, stream=sys.stderr)

    try:
        run_compaction(args.raw_path, args.compact_path,
                       include_empty=not args.exclude_empty,
                       bidirectional=args.bidirectional)
    except MALFORMED_ERRORS as e:
        logger.error(f"Raw metadata is malformed: {type(e).__name__}: {e}")
        return EXIT_MALFORMED
    except OSError as e:
        logger.error(f"Compaction failed: {e}")
        return EXIT_FAILURE

    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
