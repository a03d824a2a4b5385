"""Unit tests for model reply parsing."""

import pytest

from switchyard.core.errors import UnparseableOutputError
from switchyard.llm.parsing import extract_json_array, extract_json_object, strip_fences


class TestJsonExtraction:
    """Test cases for JSON extraction helpers."""

    def test_plain_object(self):
        assert extract_json_object('{"intent": "dev/review", "confidence": 90}') == {
            "intent": "dev/review",
            "confidence": 90,
        }

    def test_fenced_object(self):
        raw = '```json\n{"intent": "ops/archive"}\n```'

        assert strip_fences(raw) == '{"intent": "ops/archive"}'
        assert extract_json_object(raw) == {"intent": "ops/archive"}

    def test_object_embedded_in_prose(self):
        """Test the first {...} block is used when the reply has extra text."""
        raw = 'Sure! {"intent": "research/web", "confidence": 85} Hope that helps.'

        assert extract_json_object(raw)["intent"] == "research/web"

    def test_array_embedded_in_prose(self):
        raw = 'Plan:\n[{"worker": "dev", "payload": {"task": "x"}}]\nDone.'

        assert extract_json_array(raw) == [{"worker": "dev", "payload": {"task": "x"}}]

    def test_wrong_type_rejected(self):
        with pytest.raises(UnparseableOutputError):
            extract_json_array('{"worker": "dev"}')

    @pytest.mark.parametrize("raw", ["", "no json here", "{not: valid}"])
    def test_unparseable(self, raw):
        with pytest.raises(UnparseableOutputError):
            extract_json_object(raw)
