"""Tests for the JSON and naming helpers."""

from __future__ import annotations

import pytest

from socials_studio.utils import extract_json, natural_sort_key, safe_json_parse, sanitize_filename


class TestSafeJsonParse:
    """Stored list fields decode leniently."""

    def test_decodes_matching_type(self):
        assert safe_json_parse('["a", "b"]', []) == ["a", "b"]

    def test_corrupt_text_gives_fallback(self):
        assert safe_json_parse("not json", []) == []

    def test_wrong_type_gives_fallback(self):
        assert safe_json_parse('{"a": 1}', []) == []

    def test_none_gives_fallback(self):
        assert safe_json_parse(None, []) == []

    def test_decoded_value_passes_through(self):
        assert safe_json_parse(["x"], []) == ["x"]


class TestExtractJson:
    """Model output with JSON in various wrappers."""

    def test_plain(self):
        assert extract_json('{"hooks": ["a"]}') == {"hooks": ["a"]}

    def test_fenced(self):
        assert extract_json('Here you go:\n```json\n{"a": 1}\n```') == {"a": 1}

    def test_surrounding_prose(self):
        assert extract_json('Sure! {"a": 1} Hope that helps.') == {"a": 1}

    def test_no_json_raises(self):
        with pytest.raises(ValueError, match="No valid JSON"):
            extract_json("nothing to see here")


# =============================================================================
# Naming
# =============================================================================


class TestNaming:

    def test_natural_sort(self):
        names = ["slide10.png", "slide2.png", "Slide1.png"]
        assert sorted(names, key=natural_sort_key) == ["Slide1.png", "slide2.png", "slide10.png"]

    def test_sanitize_filename(self):
        assert sanitize_filename("AI at Work!") == "ai-at-work"

    def test_sanitize_filename_empty(self):
        assert sanitize_filename("!!!") == "export"

    def test_sanitize_filename_truncates(self):
        assert len(sanitize_filename("a" * 80)) == 50
