"""Tests for parsing provider replies into translation arrays."""

import pytest

from feedtrans.core.exceptions import ResponseParseError
from feedtrans.translation.output_cleaner import strip_code_fences, parse_translation_array


class TestStripCodeFences:

    @pytest.mark.parametrize("raw", [
        '["a", "b"]',
        '```json\n["a", "b"]\n```',
        '```\n["a", "b"]\n```',
        '```JSON["a", "b"]```',
        '  \n["a", "b"]\n  ',
    ])
    def test_fence_variants(self, raw):
        assert strip_code_fences(raw) == '["a", "b"]'

    def test_inner_backticks_kept(self):
        assert strip_code_fences('["use `x`"]') == '["use `x`"]'


class TestParseTranslationArray:

    def test_plain_array(self):
        assert parse_translation_array('["Rose Gold", "Rings"]', 2) == ["Rose Gold", "Rings"]

    def test_fenced_array(self):
        raw = '```json\n["Rose Gold"]\n```'
        assert parse_translation_array(raw, 1) == ["Rose Gold"]

    def test_unicode_and_markup_preserved(self):
        raw = '["&lt;p&gt;Élégant&lt;/p&gt;"]'
        assert parse_translation_array(raw, 1) == ["&lt;p&gt;Élégant&lt;/p&gt;"]

    def test_invalid_json(self):
        with pytest.raises(ResponseParseError) as exc_info:
            parse_translation_array("Here are your translations: Rose Gold", 1)

        assert "not valid JSON" in exc_info.value.message
        assert exc_info.value.details["raw_response"].startswith("Here are")

    def test_not_an_array(self):
        with pytest.raises(ResponseParseError, match="Expected a JSON array"):
            parse_translation_array('{"1": "Rose Gold"}', 1)

    def test_length_mismatch(self):
        with pytest.raises(ResponseParseError) as exc_info:
            parse_translation_array('["a", "b"]', 3)

        assert str(exc_info.value) == "Expected 3 translations, got 2"

    def test_non_string_element(self):
        with pytest.raises(ResponseParseError, match="not a string"):
            parse_translation_array('["a", 52]', 2)

    def test_empty_reply(self):
        with pytest.raises(ResponseParseError):
            parse_translation_array("", 1)
