"""Tests for the JSON value model and Document."""

import json

import pytest

from jkv.errors import SerializationFailure, UnsupportedType
from jkv.model import (
    Array,
    Bool,
    Document,
    JsonType,
    Null,
    Number,
    Object,
    String,
    display_text,
    dumps,
    from_json,
    parse_bool,
    parse_number,
    to_json,
    type_of,
    value_text,
)


class TestDocumentOrder:
    """Iteration order follows insertion order of surviving keys."""

    def test_insert_appends(self):
        doc = Document()
        doc.insert("b", Number(1))
        doc.insert("a", Number(2))
        doc.insert("c", Number(3))
        assert list(doc) == ["b", "a", "c"]

    def test_update_keeps_position(self):
        doc = Document([("a", Number(1)), ("b", Number(2)), ("c", Number(3))])
        doc.insert("a", String("x"))
        assert doc.keys() == ["a", "b", "c"]
        assert doc.get("a") == String("x")

    def test_remove_keeps_survivor_order(self):
        doc = Document([("a", Null()), ("b", Null()), ("c", Null()), ("d", Null())])
        assert doc.remove("b") == Null()
        assert doc.keys() == ["a", "c", "d"]
        assert doc.index_of("c") == 1
        assert doc.index_of("d") == 2
        assert doc.entry_at(2) == ("d", Null())

    def test_remove_missing(self):
        doc = Document([("a", Null())])
        assert doc.remove("zz") is None
        assert doc.keys() == ["a"]

    def test_mixed_sequence(self):
        doc = Document()
        for key in "abcde":
            doc.insert(key, Number(0))
        doc.remove("a")
        doc.insert("c", Number(5))
        doc.remove("d")
        doc.insert("a", Number(1))
        doc.insert("f", Number(2))
        assert doc.keys() == ["b", "c", "e", "a", "f"]
        assert [doc.index_of(k) for k in doc] == [0, 1, 2, 3, 4]

    def test_reinsert_after_remove_goes_last(self):
        doc = Document([("a", Null()), ("b", Null())])
        doc.remove("a")
        doc.insert("a", Null())
        assert doc.keys() == ["b", "a"]

    def test_entry_at_out_of_range(self):
        doc = Document([("a", Null())])
        assert doc.entry_at(1) is None
        assert doc.entry_at(-1) is None

    def test_contains_len_eq(self):
        doc = Document([("a", Number(1))])
        assert "a" in doc
        assert "b" not in doc
        assert len(doc) == 1
        assert doc == Document([("a", Number(1.0))])
        assert doc != Document([("a", Number(2))])

    def test_copy_is_deep(self):
        inner = Document([("x", Number(1))])
        doc = Document([("o", Object(inner))])
        clone = doc.copy()
        clone.get("o").document.insert("y", Null())
        assert inner.keys() == ["x"]


class TestFromJson:
    """Building values from decoded payloads."""

    def test_scalars(self):
        assert from_json(None) == Null()
        assert from_json(True) == Bool(True)
        assert from_json(3) == Number(3.0)
        assert from_json(2.5) == Number(2.5)
        assert from_json("s") == String("s")

    def test_bool_is_not_number(self):
        assert type_of(from_json(False)) == JsonType.BOOLEAN

    def test_nested(self):
        value = from_json({"a": [1, {"b": None}]})
        assert isinstance(value, Object)
        items = value.document.get("a").items
        assert items[0] == Number(1)
        assert items[1].document.get("b") == Null()

    def test_keeps_key_order(self):
        doc = Document.from_json(json.loads('{"z": 1, "a": 2, "m": 3}'))
        assert doc.keys() == ["z", "a", "m"]

    @pytest.mark.parametrize("node", [(1, 2), {1, 2}, object(), b"bytes"])
    def test_unsupported(self, node):
        with pytest.raises(UnsupportedType):
            from_json(node)

    def test_non_string_key(self):
        with pytest.raises(UnsupportedType):
            Document.from_json({1: "a"})

    def test_huge_int(self):
        with pytest.raises(UnsupportedType):
            from_json(10**400)

    @pytest.mark.parametrize("number", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_float(self, number):
        with pytest.raises(UnsupportedType) as info:
            from_json({"a": number})
        assert str(info.value) == "number out of range"


class TestSerialization:
    """Number re-typing when writing JSON."""

    def test_fraction_stays_float(self):
        assert to_json(Number(3.5)) == 3.5
        assert json.dumps(to_json(Number(3.5))) == "3.5"

    @pytest.mark.parametrize("source", ["-3", "-3.0"])
    def test_negative_whole(self, source):
        value = from_json(json.loads(source))
        assert json.dumps(to_json(value)) == "-3"

    @pytest.mark.parametrize("source", ["3", "3.0"])
    def test_positive_whole(self, source):
        value = from_json(json.loads(source))
        assert json.dumps(to_json(value)) == "3"

    def test_negative_zero(self):
        assert json.dumps(to_json(Number(-0.0))) == "0"

    def test_dumps_document(self):
        doc = Document.from_json({"a": 1.0, "b": [True, None], "c": "é"})
        assert dumps(doc, indent=None) == '{"a": 1, "b": [true, null], "c": "é"}'

    def test_dumps_non_finite(self):
        doc = Document([("n", Number(float("nan")))])
        with pytest.raises(SerializationFailure):
            dumps(doc)


class TestBufferText:
    """Parsing and rendering of edit buffers."""

    @pytest.mark.parametrize("text", ["0", "-1", "+2", "3.5", ".5", "1.", "1e3", "2E-2"])
    def test_parse_number_ok(self, text):
        assert parse_number(text) == float(text)

    @pytest.mark.parametrize("text", ["", "abc", "1.2.3", "nan", "inf", "1e999", " 1", "0x10"])
    def test_parse_number_rejects(self, text):
        assert parse_number(text) is None

    def test_parse_bool(self):
        assert parse_bool("true") is True
        assert parse_bool("false") is False
        assert parse_bool("True") is None
        assert parse_bool("") is None

    def test_value_text(self):
        assert value_text(String("hi")) == "hi"
        assert value_text(Number(2.0)) == "2"
        assert value_text(Number(2.25)) == "2.25"
        assert value_text(Bool(False)) == "false"
        assert value_text(Null()) == "null"
        assert value_text(Object()) == "{}"
        assert value_text(Array()) == "[]"

    def test_display_text(self):
        assert display_text(String("hi")) == '"hi"'
        assert display_text(String('say "hi"\nbye')) == r'"say \"hi\"\nbye"'
        assert display_text(String("é")) == '"é"'
        assert display_text(Object(Document([("a", Null())]))) == "{…} 1 key"
        assert display_text(Array([Null(), Null()])) == "[…] 2 items"

    def test_seeds(self):
        assert JsonType.BOOLEAN.seed == "false"
        assert JsonType.NULL.seed == "null"
        assert JsonType.STRING.seed == ""
        assert JsonType.OBJECT.is_container
        assert not JsonType.NUMBER.is_container
