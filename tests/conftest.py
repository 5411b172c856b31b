"""Pytest configuration and shared fixtures."""
import sys
import os
import json
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

GRIN = '\U0001F600'
HEART = '\u2764\ufe0f'
CAT = '\U0001F431'
ROBOT = '\U0001F916'
UFO = '\U0001F6F8'


def _make_variant(left, right, date, is_latest):
    return {
        'gStaticUrl': f"https://www.gstatic.com/android/keyboard/emojikitchen/{date}/u{left}/u{left}_u{right}.png",
        'alt': 'mashup',
        'leftEmojiCodepoint': left,
        'rightEmojiCodepoint': right,
        'date': date,
        'isLatest': is_latest,
        'gBoardOrder': 1,
    }


# ============================================================================
# Common test fixtures
# ============================================================================

@pytest.fixture
def make_variant():
    """Factory for raw variant records."""
    return _make_variant


@pytest.fixture
def sample_document():
    """Raw metadata document shaped like upstream metadata.json."""
    return {
        'knownSupportedEmoji': ['1f600', '2764-fe0f', '1f431', '1f47b'],
        'data': {
            '1f600': {
                'alt': 'grinning_face',
                'combinations': {
                    '2764-fe0f': [
                        _make_variant('1f600', '2764-fe0f', '20201001', False),
                        _make_variant('1f600', '2764-fe0f', '20230301', True),
                    ],
                    '1f431': [_make_variant('1f431', '1f600', '20201001', False)],
                },
            },
            '2764-fe0f': {
                'alt': 'red_heart',
                'combinations': {
                    '1f431': [_make_variant('2764-fe0f', '1f431', '20211115', True)],
                },
            },
            '1f431': {'alt': 'cat_face', 'combinations': {}},
            # Not in knownSupportedEmoji, must be ignored
            '1f916': {
                'alt': 'robot',
                'combinations': {'1f600': [_make_variant('1f916', '1f600', '20220101', True)]},
            },
        },
    }


@pytest.fixture
def sample_compact():
    """Compact index expected from sample_document with default options."""
    return {
        GRIN: {'n': 'Grinning Face', 'c': {HEART: '20230301:1f600:2764-fe0f', CAT: '20201001:1f431:1f600'}},
        HEART: {'n': 'Red Heart', 'c': {CAT: '20211115:2764-fe0f:1f431'}},
        CAT: {'n': 'Cat Face', 'c': {}},
    }


@pytest.fixture
def config(tmp_path):
    """Configuration dict pointing at a scratch data directory."""
    return {
        'data_dir': str(tmp_path / 'data'),
        'metadata_url': 'https://example.test/metadata.json',
        'image_base_url': 'https://www.gstatic.com/android/keyboard/emojikitchen',
        'include_empty': True,
        'bidirectional': False,
        'download_timeout': 5,
        'download_retries': 1,
        'compaction_timeout': 60,
        'history_limit': 50,
        'log_level': 'INFO',
    }


@pytest.fixture
def compact_file(tmp_path, sample_compact):
    """Compact index written where CompactIndexLoader expects it for `config`."""
    data_dir = tmp_path / 'data'
    data_dir.mkdir(parents=True, exist_ok=True)
    path = data_dir / 'emoji-kitchen.json'
    path.write_text(json.dumps(sample_compact, ensure_ascii=False), encoding='utf-8')
    return path
