"""Tests for loading and saving documents."""

import pytest

from jkv.errors import InputFileNotFound, InvalidInputJson, IoFailure, SerializationFailure
from jkv.model import Document, Number
from jkv.storage import MAX_DEPTH, load_document, parse_document, save_document


class TestLoad:
    def test_no_path_is_empty(self):
        assert load_document(None) == Document()
        assert load_document("") == Document()

    def test_load(self, tmp_path):
        path = tmp_path / "in.json"
        path.write_text('{"b": 1, "a": [true, null]}', encoding="utf-8")
        doc = load_document(str(path))
        assert doc.keys() == ["b", "a"]
        assert doc.get("b") == Number(1)

    def test_missing_file(self, tmp_path):
        path = str(tmp_path / "missing.json")
        with pytest.raises(InputFileNotFound) as info:
            load_document(path)
        assert str(info.value) == f"{path}: No such file"

    def test_directory_is_io_failure(self, tmp_path):
        with pytest.raises(IoFailure):
            load_document(str(tmp_path))

    @pytest.mark.parametrize(
        "content",
        [
            "{",
            "[1, 2]",
            '"text"',
            '{"a": NaN}',
            '{"a": Infinity}',
            "",
            '{"a": 1e400}',
            '{"a": -1e400}',
        ],
    )
    def test_invalid(self, content):
        with pytest.raises(InvalidInputJson):
            parse_document(content, "x.json")

    def test_invalid_message_names_file(self):
        with pytest.raises(InvalidInputJson) as info:
            parse_document("[]", "x.json")
        assert str(info.value).startswith("x.json: invalid input JSON")

    def test_overflowing_number_rejected_at_load(self, tmp_path):
        path = tmp_path / "big.json"
        path.write_text('{"big": 1e400, "a": 1}', encoding="utf-8")
        with pytest.raises(InvalidInputJson) as info:
            load_document(str(path))
        assert "number out of range" in str(info.value)

    def test_deep_nesting(self):
        content = '{"a":' + "[" * 600 + "]" * 600 + "}"
        with pytest.raises(InvalidInputJson) as info:
            parse_document(content, "deep.json")
        assert str(info.value) == "deep.json: invalid input JSON: document nested too deeply"

    def test_nesting_beyond_parser_limit(self):
        content = '{"a":' + "[" * 100000 + "]" * 100000 + "}"
        with pytest.raises(InvalidInputJson):
            parse_document(content, "deeper.json")

    def test_nesting_at_limit_loads(self):
        content = '{"a":' + "[" * (MAX_DEPTH - 1) + "]" * (MAX_DEPTH - 1) + "}"
        doc = parse_document(content)
        assert list(doc) == ["a"]

    def test_not_utf8(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"a": "\xff"}')
        with pytest.raises(InvalidInputJson) as info:
            load_document(str(path))
        assert "not UTF-8" in str(info.value)


class TestSave:
    def test_save(self, tmp_path):
        doc = Document.from_json({"a": 1.0, "b": "é"})
        path = tmp_path / "sub" / "out.json"
        save_document(doc, str(path))
        assert path.read_text(encoding="utf-8") == '{\n    "a": 1,\n    "b": "é"\n}\n'

    def test_indent(self, tmp_path):
        path = tmp_path / "out.json"
        save_document(Document.from_json({"a": [1]}), str(path), indent=2)
        assert path.read_text(encoding="utf-8") == '{\n  "a": [\n    1\n  ]\n}\n'

    def test_round_trip(self, tmp_path):
        path = tmp_path / "rt.json"
        doc = Document.from_json({"z": {"y": [1, 2.5, None]}, "a": False})
        save_document(doc, str(path))
        assert load_document(str(path)) == doc

    def test_non_finite(self, tmp_path):
        doc = Document([("n", Number(float("inf")))])
        with pytest.raises(SerializationFailure):
            save_document(doc, str(tmp_path / "x.json"))

    def test_unwritable(self, tmp_path):
        with pytest.raises(IoFailure):
            save_document(Document(), str(tmp_path))
