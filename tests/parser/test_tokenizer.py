"""Tests for the OSO line tokenizer."""

import math

import pytest

from oslquery.parser.tokenizer import (
    parse_default_token,
    parse_float,
    parse_int,
    tokenize_line,
)


class TestTokenizeLine:
    """Tests for tokenize_line."""

    def test_space_separated(self) -> None:
        assert tokenize_line("param float Kd 0.5") == ["param", "float", "Kd", "0.5"]

    def test_tab_separated(self) -> None:
        tokens = tokenize_line("param\tcolor\tcoating_color\t1\t1\t1")
        assert tokens == ["param", "color", "coating_color", "1", "1", "1"]

    def test_mixed_separators(self) -> None:
        tokens = tokenize_line("param  \tfloat\t  Kd \t0.5\t %hint")
        assert tokens == ["param", "float", "Kd", "0.5", "%hint"]

    def test_quoted_string_keeps_whitespace(self) -> None:
        tokens = tokenize_line('param string name "hello world" %meta{...}')
        assert tokens == ["param", "string", "name", '"hello world"', "%meta{...}"]

    def test_meta_block_is_one_token(self) -> None:
        """A hint block with quotes and commas stays in one piece."""
        # Arrange
        line = 'param\tcolor\tc\t1 1 1\t%meta{string,label,"Color"}'

        # Act
        tokens = tokenize_line(line)

        # Assert
        assert len(tokens) == 7
        assert tokens[:6] == ["param", "color", "c", "1", "1", "1"]
        assert tokens[6] == '%meta{string,label,"Color"}'

    def test_hint_block_with_inner_whitespace(self) -> None:
        tokens = tokenize_line('%meta{string help "Some help text"} %read{1,2}')
        assert tokens == ['%meta{string help "Some help text"}', "%read{1,2}"]

    def test_nested_braces(self) -> None:
        assert tokenize_line("%a{b{c d}e} x") == ["%a{b{c d}e}", "x"]

    def test_hint_without_braces_ends_at_whitespace(self) -> None:
        assert tokenize_line("%initexpr %space{\"world\"}") == [
            "%initexpr",
            '%space{"world"}',
        ]

    def test_hint_at_end_of_line(self) -> None:
        assert tokenize_line("x %initexpr") == ["x", "%initexpr"]
        assert tokenize_line("x %") == ["x", "%"]

    def test_escaped_quote_inside_string(self) -> None:
        tokens = tokenize_line(r'"say \"hi\"" next')
        assert tokens == [r'"say \"hi\""', "next"]

    def test_unterminated_quote_runs_to_end_of_line(self) -> None:
        assert tokenize_line('a "unterminated string here') == [
            "a",
            '"unterminated string here',
        ]

    def test_unterminated_block_runs_to_end_of_line(self) -> None:
        assert tokenize_line("a %meta{string,x, y") == ["a", "%meta{string,x, y"]

    def test_empty_and_blank_lines(self) -> None:
        assert tokenize_line("") == []
        assert tokenize_line(" \t  ") == []

    def test_carriage_return_is_whitespace(self) -> None:
        assert tokenize_line("code ___main___\r") == ["code", "___main___"]


class TestNumericLiterals:
    """Tests for parse_int and parse_float."""

    @pytest.mark.parametrize(
        "text,expected",
        [("0", 0), ("42", 42), ("-10", -10), ("+7", 7), ("2147483647", 2147483647)],
    )
    def test_int_literals(self, text: str, expected: int) -> None:
        assert parse_int(text) == expected

    @pytest.mark.parametrize("text", ["", "1.0", "1e3", "0x10", "2147483648", " 1"])
    def test_not_int_literals(self, text: str) -> None:
        assert parse_int(text) is None

    @pytest.mark.parametrize(
        "text,expected",
        [("0.5", 0.5), ("1.", 1.0), (".25", 0.25), ("-1e-3", -0.001), ("3", 3.0)],
    )
    def test_float_literals(self, text: str, expected: float) -> None:
        assert parse_float(text) == pytest.approx(expected)

    def test_special_float_literals(self) -> None:
        assert math.isinf(parse_float("inf"))
        assert math.isnan(parse_float("NaN"))

    @pytest.mark.parametrize("text", ["", ".", "abc", "1_000", "1.2.3", "%hint"])
    def test_not_float_literals(self, text: str) -> None:
        assert parse_float(text) is None


class TestParseDefaultToken:
    """Tests for parse_default_token."""

    def test_float(self) -> None:
        assert parse_default_token("0.5") == 0.5
        assert isinstance(parse_default_token("1.0"), float)

    def test_integer(self) -> None:
        assert parse_default_token("42") == 42
        assert isinstance(parse_default_token("42"), int)
        assert parse_default_token("-10") == -10

    def test_int_overflow_becomes_float(self) -> None:
        value = parse_default_token("4294967296")
        assert isinstance(value, float)
        assert value == 4294967296.0

    def test_quoted_string(self) -> None:
        assert parse_default_token('"test string"') == "test string"

    def test_quoted_string_escapes(self) -> None:
        assert parse_default_token(r'"hello\nworld"') == "hello\nworld"
        assert parse_default_token(r'"a\"b"') == 'a"b'

    def test_empty_string(self) -> None:
        assert parse_default_token('""') == ""

    def test_invalid_tokens(self) -> None:
        assert parse_default_token("%hint") is None
        assert parse_default_token("abc") is None
        assert parse_default_token('"') is None
