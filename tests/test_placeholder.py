"""Tests for version placeholder substitution and stamp parsing."""

import pytest

from ngpackager.errors import StampFieldMissing
from ngpackager.services.placeholder_service import (
    PlaceholderSubstitutor,
    VERSION_PLACEHOLDER,
    extract_version,
    parse_stamp_data,
    substitute,
)

STAMP = "BUILD_TIMESTAMP 1538000000\nBUILD_SCM_VERSION 7.0.0-beta.7+12.sha-abc123\nBUILD_USER ci\n"


class TestParseStampData:
    """Tests for parse_stamp_data."""

    def test_parses_pairs(self):
        stamp = parse_stamp_data(STAMP)
        assert stamp["BUILD_SCM_VERSION"] == "7.0.0-beta.7+12.sha-abc123"
        assert stamp["BUILD_USER"] == "ci"

    def test_skips_blank_lines(self):
        assert parse_stamp_data("\n\nA 1\n\n") == {"A": "1"}

    def test_first_occurrence_wins(self):
        assert parse_stamp_data("A 1\nA 2\n") == {"A": "1"}

    def test_key_without_value(self):
        assert parse_stamp_data("LONELY\n") == {"LONELY": ""}


class TestExtractVersion:
    """Tests for extract_version."""

    def test_default_key(self):
        assert extract_version(parse_stamp_data(STAMP)) == "7.0.0-beta.7+12.sha-abc123"

    def test_only_first_token(self):
        assert extract_version({"BUILD_SCM_VERSION": "1.2.3 dirty"}) == "1.2.3"

    def test_custom_key(self):
        assert extract_version({"STABLE_VERSION": "2.0.0"}, key="STABLE_VERSION") == "2.0.0"

    def test_missing_key(self):
        with pytest.raises(StampFieldMissing) as exc_info:
            extract_version({"BUILD_USER": "ci"}, path="stamp.txt")
        assert "BUILD_SCM_VERSION" in str(exc_info.value)
        assert "stamp.txt" in str(exc_info.value)

    def test_empty_value(self):
        with pytest.raises(StampFieldMissing):
            extract_version({"BUILD_SCM_VERSION": ""})

    def test_prefixed_key_does_not_match(self):
        with pytest.raises(StampFieldMissing):
            extract_version(parse_stamp_data("STABLE_BUILD_SCM_VERSION 1.0.0\n"))


class TestSubstitute:
    """Tests for substitute and PlaceholderSubstitutor."""

    def test_sentinel_value(self):
        assert VERSION_PLACEHOLDER == "0.0.0-" + "PLACEHOLDER"

    def test_no_version_is_noop(self):
        content = f'export const VERSION = "{VERSION_PLACEHOLDER}";'
        assert substitute(content, None) == content

    def test_replaces_every_occurrence(self):
        content = f"{VERSION_PLACEHOLDER} and {VERSION_PLACEHOLDER}"
        assert substitute(content, "9.0.0") == "9.0.0 and 9.0.0"

    def test_idempotent(self):
        content = f'"version": "{VERSION_PLACEHOLDER}", "peer": "^{VERSION_PLACEHOLDER}"'
        once = substitute(content, "9.0.0")
        assert substitute(once, "9.0.0") == once

    def test_substitutor_from_stamp_text(self):
        substitutor = PlaceholderSubstitutor.from_stamp_text(STAMP)
        assert substitutor.version == "7.0.0-beta.7+12.sha-abc123"
        assert substitutor.apply(VERSION_PLACEHOLDER) == "7.0.0-beta.7+12.sha-abc123"

    def test_substitutor_without_stamp(self):
        substitutor = PlaceholderSubstitutor.from_stamp_text(None)
        assert substitutor.version is None
        assert substitutor.apply(VERSION_PLACEHOLDER) == VERSION_PLACEHOLDER

    def test_substitutor_missing_field(self):
        with pytest.raises(StampFieldMissing):
            PlaceholderSubstitutor.from_stamp_text("BUILD_USER ci\n")
