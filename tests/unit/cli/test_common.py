"""Unit tests for command line argument parsers."""

import pytest
import typer

from ostack.cli.common import (
    parse_bool,
    parse_csv,
    parse_int,
    parse_json,
    parse_key_val,
    parse_key_val_opt,
    parse_number,
    parse_properties,
)


class TestKeyValue:
    """Tests for KEY=value parsing."""

    def test_value_may_contain_equals(self):
        assert parse_key_val("filter=a=b") == ("filter", "a=b")

    def test_missing_separator(self):
        with pytest.raises(typer.BadParameter, match="no `=` found"):
            parse_key_val("novalue")

    def test_empty_value_is_none(self):
        assert parse_key_val_opt("key=") == ("key", None)
        assert parse_key_val_opt("key=v") == ("key", "v")

    def test_properties(self):
        assert parse_properties(["a=1", "b=2"]) == {"a": "1", "b": "2"}
        assert parse_properties(None) is None


class TestScalars:
    """Tests for numbers and booleans."""

    @pytest.mark.parametrize(("value", "expected"), [("10", 10), (" 7 ", 7), ("3.0", 3), (5, 5)])
    def test_int(self, value, expected):
        assert parse_int(value) == expected

    @pytest.mark.parametrize("value", ["3.5", "ten", ""])
    def test_invalid_int(self, value):
        with pytest.raises(typer.BadParameter):
            parse_int(value)

    @pytest.mark.parametrize(("value", "expected"), [("yes", True), ("On", True), ("0", False), ("no", False)])
    def test_bool(self, value, expected):
        assert parse_bool(value) is expected

    def test_invalid_bool(self):
        with pytest.raises(typer.BadParameter):
            parse_bool("maybe")

    def test_number(self):
        assert parse_number("4") == 4
        assert parse_number("2.5") == 2.5
        with pytest.raises(typer.BadParameter):
            parse_number("x")


class TestStructured:
    """Tests for JSON and list values."""

    def test_json(self):
        assert parse_json('{"a": [1]}') == {"a": [1]}

    def test_invalid_json(self):
        with pytest.raises(typer.BadParameter, match="invalid JSON"):
            parse_json("{a")

    def test_csv(self):
        assert list(parse_csv("a,b")) == ["a", "b"]
        assert str(parse_csv(["x", "y"])) == "x,y"
