"""Local pipeline run with sample data, no network."""
import asyncio
import json
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from emoji_kitchen.kitchen import EmojiKitchen
from emoji_kitchen.utils import get_logger

from .acquisition import MetadataManager

logger = get_logger(__name__)


def _variant(left: str, right: str, date: str, is_latest: bool) -> Dict[str, Any]:
    return {
        'gStaticUrl': f"https://www.gstatic.com/android/keyboard/emojikitchen/{date}/u{left}/u{left}_u{right}.png",
        'isLatest': is_latest,
        'date': date,
        'leftEmojiCodepoint': left,
        'rightEmojiCodepoint': right,
    }


def create_sample_document() -> Dict[str, Any]:
    """Create a small raw metadata document shaped like the upstream one."""
    return {
        'knownSupportedEmoji': ['1f600', '2764-fe0f', '1f431', '1f916', '1f9c1'],
        'data': {
            '1f600': {
                'alt': 'grinning_face',
                'combinations': {
                    '2764-fe0f': [
                        _variant('1f600', '2764-fe0f', '20201001', False),
                        _variant('1f600', '2764-fe0f', '20230301', True),
                    ],
                    '1f431': [_variant('1f431', '1f600', '20201001', True)],
                },
            },
            '2764-fe0f': {
                'alt': 'red_heart',
                'combinations': {
                    '1f916': [_variant('2764-fe0f', '1f916', '20211115', False)],
                },
            },
            '1f431': {'alt': 'cat_face', 'combinations': {}},
            '1f916': {
                'alt': 'robot',
                'combinations': {
                    '1f431': [_variant('1f916', '1f431', '20220406', True)],
                },
            },
            # 1f9c1 is listed as supported but has no record, like upstream drift
            '1f47d': {'alt': 'alien', 'combinations': {}},
        },
    }


def run_local_pipeline(config: dict, output_dir: Optional[str] = None) -> Dict[str, Any]:
    """Run acquisition and lookups against sample data in a scratch directory."""
    logger.info("Running local pipeline with sample data...")

    data_dir = Path(output_dir or tempfile.mkdtemp(prefix='emoji-kitchen-'))
    data_dir.mkdir(parents=True, exist_ok=True)
    local_config = dict(config, data_dir=str(data_dir))

    manager = MetadataManager(local_config)
    # A pre-seeded raw document means acquisition only runs the compaction worker
    with open(manager.raw_path, 'w', encoding='utf-8') as f:
        json.dump(create_sample_document(), f)

    asyncio.run(manager.ensure_metadata_exists(on_progress=lambda s: logger.info(f"⏳ {s}")))

    kitchen = EmojiKitchen.from_config(local_config)
    summary = {
        'data_dir': str(data_dir),
        'base_emojis': len(kitchen.list_base_emojis()),
        'pairs': len(kitchen.list_all_pairs()),
        'sample': kitchen.resolve_pair('\u2764\ufe0f', '\U0001F600'),
    }
    logger.info(f"✅ Local pipeline completed - index written to {data_dir}")
    return summary
