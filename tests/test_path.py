"""Tests for $-notation paths."""

import pytest

from jkv.path import Index, Name, format_path, parse_path


class TestFormatPath:
    def test_root(self):
        assert format_path([]) == "$"

    def test_names_and_indexes(self):
        assert format_path([Name("config"), Name("items"), Index(2)]) == "$.config.items[2]"

    def test_quoted_name(self):
        assert format_path([Name("a b")]) == '$["a b"]'
        assert format_path([Name("1st")]) == '$["1st"]'
        assert format_path([Name('say "hi"')]) == '$["say \\"hi\\""]'

    def test_step_str(self):
        assert str(Name("a")) == "Name('a')"
        assert str(Index(3)) == "Index(3)"


class TestParsePath:
    def test_root(self):
        assert parse_path("$") == []
        assert parse_path("  $  ") == []

    def test_mixed(self):
        assert parse_path("$.a[0].b") == [Name("a"), Index(0), Name("b")]

    def test_quoted(self):
        assert parse_path('$["a b"]') == [Name("a b")]
        assert parse_path("$['x.y']") == [Name("x.y")]
        assert parse_path('$["a]b"][1]') == [Name("a]b"), Index(1)]

    @pytest.mark.parametrize(
        "text",
        ["$", "$.a", "$.config.items[2]", '$["a b"]', "$[0][1].x", '$.a["1st"]'],
    )
    def test_round_trip(self, text):
        assert format_path(parse_path(text)) == text

    @pytest.mark.parametrize(
        "text",
        ["a.b", "$.", "$..a", "$[x]", "$[-1]", "$[1", '$["abc]', "$a", "$['a]"],
    )
    def test_malformed(self, text):
        with pytest.raises(ValueError):
            parse_path(text)
