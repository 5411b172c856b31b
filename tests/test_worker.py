"""Unit tests for the compaction worker entry point."""
import json
from unittest.mock import patch

import pytest

from emoji_kitchen.worker import main, run_compaction, EXIT_OK, EXIT_FAILURE, EXIT_MALFORMED

from conftest import GRIN, CAT


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch('emoji_kitchen.worker.setup_logging'):
        yield


@pytest.fixture
def raw_file(tmp_path, sample_document):
    path = tmp_path / 'raw-metadata.json'
    path.write_text(json.dumps(sample_document), encoding='utf-8')
    return path


class TestRunCompaction:

    def test_writes_compact_index(self, raw_file, tmp_path, sample_compact):
        compact_path = tmp_path / 'emoji-kitchen.json'
        total = run_compaction(str(raw_file), str(compact_path))

        assert total == 3
        assert json.loads(compact_path.read_text(encoding='utf-8')) == sample_compact

    def test_options_forwarded(self, raw_file, tmp_path):
        compact_path = tmp_path / 'emoji-kitchen.json'
        run_compaction(str(raw_file), str(compact_path), include_empty=False, bidirectional=True)
        index = json.loads(compact_path.read_text(encoding='utf-8'))
        assert GRIN in index[CAT]['c']


class TestWorkerMain:
    """Exit codes are the contract with the acquisition manager."""

    def test_success(self, raw_file, tmp_path):
        compact_path = tmp_path / 'emoji-kitchen.json'
        assert main([str(raw_file), str(compact_path)]) == EXIT_OK
        assert compact_path.exists()

    def test_exclude_empty_flag(self, raw_file, tmp_path):
        compact_path = tmp_path / 'emoji-kitchen.json'
        assert main([str(raw_file), str(compact_path), '--exclude-empty']) == EXIT_OK
        assert CAT not in json.loads(compact_path.read_text(encoding='utf-8'))

    def test_invalid_json(self, tmp_path):
        raw = tmp_path / 'raw-metadata.json'
        raw.write_text('{"knownSupportedEmoji": [', encoding='utf-8')
        compact_path = tmp_path / 'emoji-kitchen.json'

        assert main([str(raw), str(compact_path)]) == EXIT_MALFORMED
        assert not compact_path.exists()

    def test_wrong_structure(self, tmp_path):
        raw = tmp_path / 'raw-metadata.json'
        raw.write_text(json.dumps({'data': {}}), encoding='utf-8')

        assert main([str(raw), str(tmp_path / 'emoji-kitchen.json')]) == EXIT_MALFORMED

    def test_surrogate_codepoint_is_malformed(self, tmp_path, sample_document):
        """A key naming a lone surrogate cannot be written as UTF-8."""
        sample_document['knownSupportedEmoji'].append('d800')
        sample_document['data']['d800'] = {'alt': 'broken', 'combinations': {}}
        raw = tmp_path / 'raw-metadata.json'
        raw.write_text(json.dumps(sample_document), encoding='utf-8')
        compact_path = tmp_path / 'emoji-kitchen.json'

        assert main([str(raw), str(compact_path)]) == EXIT_MALFORMED
        assert sorted(p.name for p in tmp_path.iterdir()) == ['raw-metadata.json']

    def test_surrogate_partner_is_malformed(self, tmp_path, sample_document, make_variant):
        sample_document['data']['1f431']['combinations']['dc00'] = [
            make_variant('1f431', 'dc00', '20201001', True),
        ]
        raw = tmp_path / 'raw-metadata.json'
        raw.write_text(json.dumps(sample_document), encoding='utf-8')

        assert main([str(raw), str(tmp_path / 'emoji-kitchen.json')]) == EXIT_MALFORMED

    def test_missing_raw_is_not_malformed(self, tmp_path):
        assert main([str(tmp_path / 'nope.json'), str(tmp_path / 'emoji-kitchen.json')]) == EXIT_FAILURE

    def test_unwritable_output(self, raw_file, tmp_path):
        compact_path = tmp_path / 'no-such-dir' / 'emoji-kitchen.json'
        assert main([str(raw_file), str(compact_path)]) == EXIT_FAILURE

    def test_usage_error(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2
