"""Unit tests for pipeline components."""
import json

from emoji_kitchen.index import read_compact_index
from emoji_kitchen.transforms import compact_metadata
from pipeline.local_testing import create_sample_document, run_local_pipeline

from conftest import GRIN, HEART, CAT, ROBOT


class TestCreateSampleDocument:
    """Tests for create_sample_document function."""

    def test_has_document_shape(self):
        document = create_sample_document()
        assert isinstance(document['knownSupportedEmoji'], list)
        assert isinstance(document['data'], dict)

    def test_is_json_serializable(self):
        json.dumps(create_sample_document())

    def test_includes_listed_emoji_without_record(self):
        """Exercises the missing-record path of compaction."""
        document = create_sample_document()
        missing = [cp for cp in document['knownSupportedEmoji'] if cp not in document['data']]
        assert missing == ['1f9c1']

    def test_compacts(self):
        index = compact_metadata(create_sample_document())
        assert list(index) == [GRIN, HEART, CAT, ROBOT]
        assert index[HEART]['c'] == {ROBOT: '20211115:2764-fe0f:1f916'}


class TestRunLocalPipeline:
    """Runs the whole acquisition, including the worker process, on sample data."""

    def test_end_to_end(self, config, tmp_path):
        output_dir = tmp_path / 'local'
        summary = run_local_pipeline(config, str(output_dir))

        assert summary['data_dir'] == str(output_dir)
        assert summary['base_emojis'] == 4
        assert summary['pairs'] == 4
        assert summary['sample'] == {
            'url': 'https://www.gstatic.com/android/keyboard/emojikitchen/20230301/u1f600/u1f600_u2764-ufe0f.png'
        }
        assert (output_dir / 'raw-metadata.json').exists()
        assert GRIN in read_compact_index(output_dir / 'emoji-kitchen.json')

    def test_does_not_touch_configured_data_dir(self, config, tmp_path):
        run_local_pipeline(config, str(tmp_path / 'local'))
        assert not (tmp_path / 'data').exists()
