"""JSON value model: tagged values and the ordered document mapping."""

from __future__ import annotations

import copy
import json
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator

from .errors import SerializationFailure, UnsupportedType


class JsonType(Enum):
    """Value types a user can pick for a pair, in type-list order."""

    STRING = "String"
    NUMBER = "Number"
    BOOLEAN = "Boolean"
    NULL = "Null"
    OBJECT = "Object"
    ARRAY = "Array"

    @property
    def seed(self) -> str:
        """Canonical text a value buffer starts from for this type."""
        return _SEEDS[self]

    @property
    def is_container(self) -> bool:
        return self in (JsonType.OBJECT, JsonType.ARRAY)


_SEEDS = {
    JsonType.STRING: "",
    JsonType.NUMBER: "",
    JsonType.BOOLEAN: "false",
    JsonType.NULL: "null",
    JsonType.OBJECT: "{}",
    JsonType.ARRAY: "[]",
}


# -- Values --------------------------------------------------------------


@dataclass(frozen=True)
class Null:
    pass


@dataclass(frozen=True)
class Number:
    value: float

    def __post_init__(self) -> None:
        # stored as a double whatever the source literal was
        object.__setattr__(self, "value", float(self.value))


@dataclass(frozen=True)
class String:
    value: str


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass
class Object:
    document: Document = field(default_factory=lambda: Document())


@dataclass
class Array:
    items: list[Value] = field(default_factory=list)


Value = Null | Number | String | Bool | Object | Array

_TYPES = {
    Null: JsonType.NULL,
    Number: JsonType.NUMBER,
    String: JsonType.STRING,
    Bool: JsonType.BOOLEAN,
    Object: JsonType.OBJECT,
    Array: JsonType.ARRAY,
}


def type_of(value: Value) -> JsonType:
    return _TYPES[type(value)]


def is_container(value: Value) -> bool:
    return isinstance(value, (Object, Array))


def from_json(obj: object) -> Value:
    """Build a Value from a decoded JSON payload.

    Raises ``UnsupportedType`` for any node outside null, bool, number,
    string, string-keyed dict and list.
    """
    if obj is None:
        return Null()
    # bool before int: True is an int too
    if isinstance(obj, bool):
        return Bool(obj)
    if isinstance(obj, (int, float)):
        try:
            number = float(obj)
        except OverflowError:
            raise UnsupportedType(obj, "number out of range") from None
        # literals such as 1e400 decode to inf
        if not math.isfinite(number):
            raise UnsupportedType(obj, "number out of range")
        return Number(number)
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, dict):
        return Object(Document.from_json(obj))
    if isinstance(obj, list):
        return Array([from_json(item) for item in obj])
    raise UnsupportedType(obj)


def _number_to_json(number: float) -> int | float:
    if not number.is_integer():
        return number
    # whole numbers are written as ints, signed or not; -0.0 becomes 0
    return int(number)


def to_json(value: Value) -> object:
    """Convert a Value back into a plain JSON payload.

    Numbers are re-typed: fractional numbers stay floats, whole numbers
    become ints, so ``1.0`` is written as ``1``.
    """
    if isinstance(value, Null):
        return None
    if isinstance(value, Number):
        return _number_to_json(value.value)
    if isinstance(value, (String, Bool)):
        return value.value
    if isinstance(value, Object):
        return value.document.to_json()
    if isinstance(value, Array):
        return [to_json(item) for item in value.items]
    raise UnsupportedType(value)


# -- Text helpers ----------------------------------------------------------

_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def parse_number(text: str) -> float | None:
    """Parse a number buffer; ``None`` when it is not a finite number."""
    if not _NUMBER_RE.match(text):
        return None
    number = float(text)
    if not math.isfinite(number):
        return None
    return number


def parse_bool(text: str) -> bool | None:
    if text == "true":
        return True
    if text == "false":
        return False
    return None


def format_number(number: float) -> str:
    if math.isfinite(number) and number.is_integer():
        return str(int(number))
    return repr(number)


def value_text(value: Value) -> str:
    """Editable text of a value, as it appears in the value buffer."""
    if isinstance(value, String):
        return value.value
    if isinstance(value, Number):
        return format_number(value.value)
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    return type_of(value).seed


def display_text(value: Value) -> str:
    """One-line rendering of a value for a browser row."""
    if isinstance(value, String):
        return json.dumps(value.value, ensure_ascii=False)
    if isinstance(value, Object):
        n = len(value.document)
        return f"{{…}} {n} key{'' if n == 1 else 's'}"
    if isinstance(value, Array):
        n = len(value.items)
        return f"[…] {n} item{'' if n == 1 else 's'}"
    return value_text(value)


# -- Document --------------------------------------------------------------


class Document:
    """Ordered ``str -> Value`` mapping.

    Updating a key keeps its position, new keys are appended and removal
    keeps the order of the remaining keys.
    """

    def __init__(self, items: Iterable[tuple[str, Value]] | None = None) -> None:
        self._values: dict[str, Value] = {}
        self._keys: list[str] = []
        self._positions: dict[str, int] = {}
        for key, value in items or ():
            self.insert(key, value)

    @classmethod
    def from_json(cls, obj: dict) -> Document:
        document = cls()
        for key, item in obj.items():
            if not isinstance(key, str):
                raise UnsupportedType(key)
            document.insert(key, from_json(item))
        return document

    def to_json(self) -> dict[str, object]:
        return {key: to_json(self._values[key]) for key in self._keys}

    def get(self, key: str) -> Value | None:
        return self._values.get(key)

    def insert(self, key: str, value: Value) -> None:
        if key not in self._values:
            self._positions[key] = len(self._keys)
            self._keys.append(key)
        self._values[key] = value

    def remove(self, key: str) -> Value | None:
        if key not in self._values:
            return None
        position = self._positions.pop(key)
        del self._keys[position]
        for i in range(position, len(self._keys)):
            self._positions[self._keys[i]] = i
        return self._values.pop(key)

    def index_of(self, key: str) -> int | None:
        return self._positions.get(key)

    def entry_at(self, position: int) -> tuple[str, Value] | None:
        if 0 <= position < len(self._keys):
            key = self._keys[position]
            return key, self._values[key]
        return None

    def keys(self) -> list[str]:
        return list(self._keys)

    def values(self) -> list[Value]:
        return [self._values[key] for key in self._keys]

    def items(self) -> list[tuple[str, Value]]:
        return [(key, self._values[key]) for key in self._keys]

    def copy(self) -> Document:
        return copy.deepcopy(self)

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._keys))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self.items() == other.items()

    def __repr__(self) -> str:
        return f"Document({self.items()!r})"


def dumps(document: Document, indent: int | None = 4) -> str:
    """Serialize a document to JSON text."""
    try:
        return json.dumps(
            document.to_json(), indent=indent, ensure_ascii=False, allow_nan=False
        )
    except ValueError as exc:
        raise SerializationFailure(str(exc)) from exc
