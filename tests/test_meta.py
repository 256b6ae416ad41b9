"""Tests for meta block decoding."""

import pytest

from pagekit.exceptions import MetaError
from pagekit.meta import decode_meta


class TestDecodeMeta:
    def test_empty_input_gives_empty_mapping(self):
        assert decode_meta("") == {}
        assert decode_meta("  \n\t") == {}

    def test_sniffs_json_object(self):
        assert decode_meta('{"OldSchool": "YAML", "Count": 2}') == {
            "OldSchool": "YAML",
            "Count": 2,
        }

    def test_sniffs_yaml_when_not_json(self):
        result = decode_meta("# I'm a comment!\nOldSchool: \"YAML\"\n")

        assert result == {"OldSchool": "YAML"}

    def test_yaml_flow_mapping_that_is_not_json(self):
        assert decode_meta("{a: 1}") == {"a": 1}

    def test_accepts_bytes(self):
        assert decode_meta(b"Tags: [a, b]\n", "yaml") == {"Tags": ["a", "b"]}

    def test_comment_only_yaml_is_empty(self):
        assert decode_meta("# nothing here\n", "yaml") == {}

    def test_keys_keep_their_source_text(self):
        assert decode_meta("1: one\ntrue: yes\n") == {"1": "one", "true": True}

    def test_keys_that_compare_equal_stay_distinct(self):
        result = decode_meta("1: one\ntrue: two\n1.0: three\n", "yaml")

        assert result == {"1": "one", "true": "two", "1.0": "three"}

    def test_date_keys_stay_strings(self):
        assert decode_meta("2016-01-02: launch\n") == {"2016-01-02": "launch"}

    def test_nested_mapping_keys_are_strings(self):
        assert decode_meta("Links:\n  1: first\n") == {"Links": {"1": "first"}}

    def test_merge_keys_still_work(self):
        result = decode_meta("base: &b\n  a: 1\nchild:\n  <<: *b\n  c: 2\n")

        assert result["child"] == {"a": 1, "c": 2}

    def test_json_error_is_prefixed(self):
        with pytest.raises(MetaError, match="^json: "):
            decode_meta('{ foo: "bar }', "json")

    def test_json_language_rejects_yaml(self):
        with pytest.raises(MetaError, match="^json: "):
            decode_meta("foo: bar", "json")

    def test_yaml_error_is_prefixed(self):
        with pytest.raises(MetaError, match="^yaml: "):
            decode_meta("foo: [1,true,3", "yaml")

    def test_sniffed_yaml_error_is_prefixed(self):
        with pytest.raises(MetaError, match="^yaml: "):
            decode_meta("foo: [1,true,3")

    def test_non_mapping_is_rejected(self):
        with pytest.raises(MetaError, match="must be a mapping"):
            decode_meta("[1, 2, 3]")

    def test_scalar_is_rejected(self):
        with pytest.raises(MetaError, match="must be a mapping"):
            decode_meta("just words", "yaml")

    def test_unsupported_language(self):
        with pytest.raises(MetaError, match="Unsupported language for meta block: toml"):
            decode_meta("a = 1", "toml")

    def test_meta_error_is_value_error(self):
        with pytest.raises(ValueError):
            decode_meta("{", "json")

    def test_yaml_dates_stay_dates(self):
        result = decode_meta("Created: 2016-01-02\n")

        assert str(result["Created"]) == "2016-01-02"
