"""Tests for the comma-delimited key list codec."""

import logging

from xlengine.core.key_mapping import (
    MAX_KEY_LENGTH,
    MAX_MAPPING_COUNT,
    format_keys,
    parse_keys,
)


class TestParseKeys:
    def test_simple_list(self):
        assert parse_keys("Up,Down,Left") == ["Up", "Down", "Left"]

    def test_single_key(self):
        assert parse_keys("Space") == ["Space"]

    def test_empty_value_yields_one_empty_key(self):
        assert parse_keys("") == [""]

    def test_trailing_separator_yields_empty_last_key(self):
        assert parse_keys("A,") == ["A", ""]

    def test_stops_at_line_end(self):
        assert parse_keys("A,B\r\nC") == ["A", "B"]
        assert parse_keys("A\nB") == ["A"]

    def test_stops_at_nul(self):
        assert parse_keys("A,B\x00,C") == ["A", "B"]

    def test_doubled_comma_is_literal(self):
        # Legacy form: the first comma of a pair belongs to the key.
        assert parse_keys(",,,B") == [",,", "B"]
        assert parse_keys("A,,") == ["A,", ""]
        assert parse_keys(",,B") == [",", "B"]

    def test_backslash_escapes_comma(self):
        assert parse_keys("A,\\,,B") == ["A", ",", "B"]

    def test_backslash_escapes_backslash(self):
        assert parse_keys("\\\\,B") == ["\\", "B"]

    def test_lone_backslash_is_literal(self):
        assert parse_keys("Num\\Enter") == ["Num\\Enter"]
        assert parse_keys("A\\") == ["A\\"]

    def test_length_is_one_plus_separators(self):
        raw = "A,B,,C,D"
        # One of the four commas is escaped by its neighbour.
        assert len(parse_keys(raw)) == 4


class TestBounds:
    def test_too_many_keys_are_clamped(self, caplog):
        raw = ",".join(f"K{i}" for i in range(MAX_MAPPING_COUNT + 3))
        with caplog.at_level(logging.ERROR):
            keys = parse_keys(raw)
        assert len(keys) == MAX_MAPPING_COUNT
        assert keys[-1] == f"K{MAX_MAPPING_COUNT - 1}"
        assert "only" in caplog.text

    def test_long_key_is_truncated(self, caplog):
        with caplog.at_level(logging.ERROR):
            keys = parse_keys("X" * (MAX_KEY_LENGTH + 10))
        assert keys == ["X" * MAX_KEY_LENGTH]
        assert "truncating" in caplog.text

    def test_custom_limits(self):
        assert parse_keys("A,B,C", max_keys=2) == ["A", "B"]
        assert parse_keys("Enter", max_length=3) == ["Ent"]


class TestFormatKeys:
    def test_joins_with_single_comma(self):
        assert format_keys(["Up", "Down", "Left"]) == "Up,Down,Left"

    def test_no_trailing_separator(self):
        assert format_keys(["Space"]) == "Space"

    def test_escapes_commas_and_backslashes(self):
        assert format_keys([",", "A\\B"]) == "\\,,A\\\\B"

    def test_round_trip_plain(self):
        keys = ["Up", "Down", "Left"]
        assert parse_keys(format_keys(keys)) == keys

    def test_round_trip_with_commas(self):
        for keys in (
            ["A", ","],
            ["A,", "B"],
            ["A", ",B"],
            [",", ",", ","],
            ["\\", ",\\,"],
        ):
            assert parse_keys(format_keys(keys)) == keys
