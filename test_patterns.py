"""
Tests for the complication pattern table.

Run with: pytest test_patterns.py -v
"""

import json
import re
from pathlib import Path

import pytest
from pydantic import ValidationError

from drg_tools import AGE_PATTERN, DEFAULT_COMPLICATION_PATTERNS, ComplicationPattern, load_patterns
from drg_tools.patterns import compile_suffix, merge_patterns, order_patterns


class TestComplicationPattern:
    """Test pattern model validation."""

    def test_suffix_normalized(self):
        pattern = ComplicationPattern(suffix="  w/o   cc/mcc ", label=" without CC/MCC ")

        assert pattern.suffix == "W/O CC/MCC"
        assert pattern.label == "without CC/MCC"

    def test_empty_suffix_rejected(self):
        with pytest.raises(ValidationError, match="suffix cannot be empty"):
            ComplicationPattern(suffix="   ", label="with CC")

    def test_empty_label_rejected(self):
        with pytest.raises(ValidationError, match="label cannot be empty"):
            ComplicationPattern(suffix="W CC", label="")


class TestDefaultTable:
    """Test the default complication table."""

    def test_six_known_codings(self):
        suffixes = {p.suffix for p in DEFAULT_COMPLICATION_PATTERNS}

        assert suffixes == {"W CC", "W MCC", "W CC/MCC", "W/O CC", "W/O MCC", "W/O CC/MCC"}

    def test_order_longest_first(self):
        ordered = order_patterns(DEFAULT_COMPLICATION_PATTERNS)
        lengths = [len(p.suffix) for p in ordered]

        assert lengths == sorted(lengths, reverse=True)
        assert ordered[0].suffix == "W/O CC/MCC"
        assert ordered[-1].suffix == "W CC"

    def test_order_is_stable(self):
        patterns = [
            ComplicationPattern(suffix="W CC/MCC", label="a"),
            ComplicationPattern(suffix="WITH MCC", label="b"),
        ]

        assert [p.label for p in order_patterns(patterns)] == ["a", "b"]
        assert [p.label for p in order_patterns(reversed(patterns))] == ["b", "a"]


class TestCompileSuffix:
    """Test suffix regex compilation."""

    def test_anchored_at_end(self):
        regex = compile_suffix(ComplicationPattern(suffix="W CC", label="with CC"))

        assert regex.search("RENAL FAILURE W CC")
        assert regex.search("RENAL FAILURE W  CC  ")
        assert not regex.search("RENAL FAILURE W CC/MCC")
        assert not regex.search("RENAL FAILURE W CC OR TPA")

    def test_requires_word_boundary(self):
        regex = compile_suffix(ComplicationPattern(suffix="W CC", label="with CC"))

        assert not regex.search("RENAL FAILURE NEW CC")
        assert regex.search("W CC")

    def test_special_characters_escaped(self):
        regex = compile_suffix(ComplicationPattern(suffix="W MCC (A+B)", label="x"))

        assert regex.search("SOMETHING W MCC (A+B)")


class TestAgePattern:
    """Test the trailing age qualifier regex."""

    @pytest.mark.parametrize("text", [
        "SIMPLE PNEUMONIA & PLEURISY AGE 0-17",
        "SIMPLE PNEUMONIA & PLEURISY AGE >17",
        "SIMPLE PNEUMONIA & PLEURISY AGE > 17",
        "SIMPLE PNEUMONIA & PLEURISY AGE <=64",
        "SIMPLE PNEUMONIA & PLEURISY, AGE 0 - 17",
    ])
    def test_matches_age_qualifiers(self, text):
        regex = re.compile(AGE_PATTERN, re.IGNORECASE)

        assert regex.sub("", text) == "SIMPLE PNEUMONIA & PLEURISY"

    def test_age_in_middle_not_matched(self):
        regex = re.compile(AGE_PATTERN, re.IGNORECASE)

        assert not regex.search("BRONCHITIS AGE 0-17 W CC")


class TestLoadPatterns:
    """Test loading pattern files."""

    def test_list_format(self, tmp_path):
        path = tmp_path / "patterns.json"
        path.write_text(json.dumps([{"suffix": "with mcc", "label": "with MCC"}]))

        patterns = load_patterns(path)

        assert len(patterns) == 1
        assert patterns[0].suffix == "WITH MCC"

    def test_object_format(self, tmp_path):
        path = tmp_path / "patterns.json"
        path.write_text(json.dumps({"patterns": [
            {"suffix": "WITH CC", "label": "with CC"},
            {"suffix": "WITHOUT CC", "label": "without CC"},
        ]}))

        assert [p.label for p in load_patterns(path)] == ["with CC", "without CC"]

    def test_bundled_extra_patterns(self):
        patterns = load_patterns(Path(__file__).parent / "data" / "extra_patterns.json")

        assert "WITH MCC" in {p.suffix for p in patterns}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Pattern file not found"):
            load_patterns(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "patterns.json"
        path.write_text("{not json")

        with pytest.raises(ValueError, match="not valid JSON"):
            load_patterns(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "patterns.json"
        path.write_text(json.dumps({"rules": []}))

        with pytest.raises(ValueError, match="must contain a list"):
            load_patterns(path)

    def test_invalid_rule(self, tmp_path):
        path = tmp_path / "patterns.json"
        path.write_text(json.dumps([{"suffix": "W CC"}]))

        with pytest.raises(ValueError, match="Invalid pattern 0"):
            load_patterns(path)

    def test_non_object_rule(self, tmp_path):
        path = tmp_path / "patterns.json"
        path.write_text(json.dumps(["W CC"]))

        with pytest.raises(ValueError, match="must be an object"):
            load_patterns(path)


class TestMergePatterns:
    """Test combining pattern tables."""

    def test_appends_new_suffixes(self):
        extra = [ComplicationPattern(suffix="WITH MCC", label="with MCC")]

        merged = merge_patterns(DEFAULT_COMPLICATION_PATTERNS, extra)

        assert len(merged) == len(DEFAULT_COMPLICATION_PATTERNS) + 1
        assert len(DEFAULT_COMPLICATION_PATTERNS) == 6

    def test_duplicate_same_label_ignored(self):
        extra = [ComplicationPattern(suffix="W CC", label="with CC")]

        merged = merge_patterns(DEFAULT_COMPLICATION_PATTERNS, extra)

        assert len(merged) == len(DEFAULT_COMPLICATION_PATTERNS)

    def test_conflicting_label(self):
        extra = [ComplicationPattern(suffix="W CC", label="with MCC")]

        with pytest.raises(ValueError, match="already mapped to 'with CC'"):
            merge_patterns(DEFAULT_COMPLICATION_PATTERNS, extra)
