"""Tests for the standard string validators and sanitizers."""

from __future__ import annotations

import re

import pytest

from fieldcheck.chain import body, sanitizers, validators


class TestToString:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, ""),
            (True, "true"),
            (False, "false"),
            (25, "25"),
            (25.0, "25"),
            (2.5, "2.5"),
            ([1, 2], "[1, 2]"),
            ("abc", "abc"),
        ],
    )
    def test_conversion(self, value, expected):
        assert validators.to_string(value) == expected


class TestNumericValidators:
    @pytest.mark.parametrize(
        ("value", "options", "expected"),
        [
            ("25", None, True),
            ("-3", None, True),
            ("abc", None, False),
            ("", None, False),
            ("2.5", None, False),
            ("007", None, True),
            ("007", {"allow_leading_zeroes": False}, False),
            ("5", {"min": 10}, False),
            ("15", {"min": 10, "max": 20}, True),
            ("20", {"lt": 20}, False),
        ],
    )
    def test_is_int(self, value, options, expected):
        assert validators.is_int(value, options) is expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("1.5", True), ("1.", True), (".5", True), (".", False), ("1e3", True), ("x1", False)],
    )
    def test_is_float(self, value, expected):
        assert validators.is_float(value) is expected

    def test_is_float_range(self):
        assert validators.is_float("0.5", {"gt": 0, "max": 1}) is True
        assert validators.is_float("1.5", {"gt": 0, "max": 1}) is False

    def test_is_numeric(self):
        assert validators.is_numeric("-1.25") is True
        assert validators.is_numeric("-1", {"no_symbols": True}) is False


class TestStringValidators:
    def test_is_email(self):
        assert validators.is_email("ada@example.com") is True
        assert validators.is_email("nope") is False
        assert validators.is_email("a@b") is False

    def test_is_length(self):
        assert validators.is_length("abc", {"min": 2, "max": 3}) is True
        assert validators.is_length("abcd", {"max": 3}) is False
        assert validators.is_length("") is True

    def test_is_empty(self):
        assert validators.is_empty("") is True
        assert validators.is_empty("  ") is False
        assert validators.is_empty("  ", {"ignore_whitespace": True}) is True

    def test_not_empty(self):
        assert validators.not_empty("x") is True
        assert validators.not_empty("") is False

    def test_is_boolean(self):
        assert validators.is_boolean("true") is True
        assert validators.is_boolean("0") is True
        assert validators.is_boolean("yes") is False
        assert validators.is_boolean("Yes", {"loose": True}) is True

    def test_is_in_compares_string_forms(self):
        assert validators.is_in("b", ["a", "b"]) is True
        assert validators.is_in("1", [1, 2]) is True
        assert validators.is_in("c", ["a", "b"]) is False

    def test_contains(self):
        assert validators.contains("Hello", "ell") is True
        assert validators.contains("Hello", "ELL") is False
        assert validators.contains("Hello", "ELL", {"ignore_case": True}) is True
        assert validators.contains("banana", "a", {"min_occurrences": 4}) is False

    def test_equals(self):
        assert validators.equals("42", 42) is True

    def test_matches_with_letter_flags(self):
        assert validators.matches("Hello", "^h", "i") is True
        assert validators.matches("Hello", "^h") is False
        assert validators.matches("xHello", re.compile("Hel")) is True

    def test_parse_flags(self):
        assert validators.parse_flags("im") == re.IGNORECASE | re.MULTILINE
        assert validators.parse_flags(re.DOTALL) == re.DOTALL

    def test_unsupported_flag_letter_raises_value_error(self):
        with pytest.raises(ValueError, match="'g'"):
            validators.matches("abc", "a", "g")

    def test_chain_checks_flags_when_queued(self):
        with pytest.raises(ValueError, match="'g'"):
            body("code").matches("^a", "gi")

    def test_alpha_and_alphanumeric(self):
        assert validators.is_alpha("abc") is True
        assert validators.is_alpha("ab1") is False
        assert validators.is_alphanumeric("ab1") is True
        assert validators.is_alphanumeric("ab-1") is False

    def test_case_checks(self):
        assert validators.is_lowercase("abc1") is True
        assert validators.is_uppercase("abc") is False

    def test_is_uuid(self):
        value = "16fd2706-8baf-433b-82eb-8c7fada847da"
        assert validators.is_uuid(value) is True
        assert validators.is_uuid(value, 4) is True
        assert validators.is_uuid(value, 1) is False
        assert validators.is_uuid("not-a-uuid") is False

    def test_is_url(self):
        assert validators.is_url("https://example.com/path?q=1") is True
        assert validators.is_url("example.com") is False
        assert validators.is_url("http://localhost:8000") is False
        assert validators.is_url("http://localhost:8000", {"require_tld": False}) is True
        assert validators.is_url("ftp://example.com", {"protocols": ["https"]}) is False

    def test_is_iso8601(self):
        assert validators.is_iso8601("2024-01-05") is True
        assert validators.is_iso8601("2024-01-05T10:00:00Z") is True
        assert validators.is_iso8601("yesterday") is False
        assert validators.is_iso8601("2024-01-05T10:00:00", {"date_only": True}) is False

    def test_is_json(self):
        assert validators.is_json('{"a": 1}') is True
        assert validators.is_json("1") is False
        assert validators.is_json("1", {"allow_primitives": True}) is True
        assert validators.is_json("{oops") is False


class TestSanitizers:
    def test_trims(self):
        assert sanitizers.trim("  a  ") == "a"
        assert sanitizers.ltrim("  a  ") == "a  "
        assert sanitizers.rtrim("xxaxx", "x") == "xxa"

    def test_escape(self):
        assert sanitizers.escape("<a href='x'>") == "&lt;a href=&#x27;x&#x27;&gt;"

    def test_unescape_does_not_double_decode(self):
        assert sanitizers.unescape("&amp;lt;") == "&lt;"
        assert sanitizers.unescape("&lt;b&gt;") == "<b>"

    def test_to_int(self):
        assert sanitizers.to_int("25") == 25
        assert sanitizers.to_int(" 25abc") == 25
        assert sanitizers.to_int("abc") is None
        assert sanitizers.to_int("ff", 16) == 255

    def test_to_float(self):
        assert sanitizers.to_float("1.5") == 1.5
        assert sanitizers.to_float("x") is None

    def test_to_boolean(self):
        assert sanitizers.to_boolean("0") is False
        assert sanitizers.to_boolean("") is False
        assert sanitizers.to_boolean("yes") is True
        assert sanitizers.to_boolean("yes", strict=True) is False
        assert sanitizers.to_boolean("true", strict=True) is True

    def test_black_and_whitelist(self):
        assert sanitizers.blacklist("abc", "b") == "ac"
        assert sanitizers.whitelist("a1b2", "12") == "12"

    def test_case(self):
        assert sanitizers.to_lower_case("AbC") == "abc"
        assert sanitizers.to_upper_case("AbC") == "ABC"

    def test_to_array(self):
        assert sanitizers.to_array(None) == []
        assert sanitizers.to_array("a") == ["a"]
        assert sanitizers.to_array(["a"]) == ["a"]
