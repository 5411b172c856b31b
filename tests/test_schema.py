"""Unit tests for document structure checks."""
import pytest

from emoji_kitchen.schema import (
    validate_document_structure,
    validate_variant,
    is_compact_index,
    KNOWN_SUPPORTED_FIELD,
    DATA_FIELD,
)
from emoji_kitchen.utils import MalformedDocumentError


class TestValidateDocumentStructure:
    """Tests for validate_document_structure."""

    def test_valid_document(self, sample_document):
        validate_document_structure(sample_document)

    def test_minimal_document(self):
        validate_document_structure({KNOWN_SUPPORTED_FIELD: [], DATA_FIELD: {}})

    def test_root_not_object(self):
        with pytest.raises(MalformedDocumentError):
            validate_document_structure(['1f600'])

    def test_missing_known_supported(self):
        with pytest.raises(MalformedDocumentError) as exc_info:
            validate_document_structure({DATA_FIELD: {}})
        assert KNOWN_SUPPORTED_FIELD in str(exc_info.value)

    def test_missing_data(self):
        with pytest.raises(MalformedDocumentError) as exc_info:
            validate_document_structure({KNOWN_SUPPORTED_FIELD: []})
        assert DATA_FIELD in str(exc_info.value)

    def test_wrong_container_types(self):
        with pytest.raises(MalformedDocumentError):
            validate_document_structure({KNOWN_SUPPORTED_FIELD: {}, DATA_FIELD: {}})
        with pytest.raises(MalformedDocumentError):
            validate_document_structure({KNOWN_SUPPORTED_FIELD: [], DATA_FIELD: []})


class TestValidateVariant:
    """Tests for validate_variant."""

    def test_valid(self, make_variant):
        validate_variant(make_variant('1f600', '2764', '20201001', True))

    def test_missing_date(self, make_variant):
        variant = make_variant('1f600', '2764', '20201001', True)
        del variant['date']
        with pytest.raises(MalformedDocumentError):
            validate_variant(variant)


class TestIsCompactIndex:
    """Tests for is_compact_index."""

    def test_compact_index(self, sample_compact):
        assert is_compact_index(sample_compact) is True

    def test_empty_index(self):
        assert is_compact_index({}) is True

    def test_other_layouts_rejected(self):
        """The older emoji -> [partners] layout is not accepted."""
        assert is_compact_index({'\U0001F600': ['\U0001F431']}) is False
        assert is_compact_index({'\U0001F600': {'n': 'Grinning Face'}}) is False
        assert is_compact_index([]) is False
