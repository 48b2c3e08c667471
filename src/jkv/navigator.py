"""Path resolution: visible projections and path-scoped mutation."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum, auto

from .errors import InvalidKey, InvalidPath
from .model import Array, Document, Object, Value
from .path import Index, Name, Step


class ViewKind(Enum):
    OBJECT = auto()
    ARRAY = auto()


@dataclass(frozen=True)
class View:
    """Flat, ordered snapshot of the container being browsed.

    Object fields and array elements are both exposed as ``(key, value)``
    rows; array rows are keyed by their position (``"0"``, ``"1"``, ...).
    Row values are copies, never references into the document.
    """

    kind: ViewKind
    rows: tuple[tuple[str, Value], ...] = ()

    def __len__(self) -> int:
        return len(self.rows)

    def key_at(self, position: int) -> str | None:
        if 0 <= position < len(self.rows):
            return self.rows[position][0]
        return None

    def value_at(self, position: int) -> Value | None:
        if 0 <= position < len(self.rows):
            return self.rows[position][1]
        return None

    def index_of(self, key: str) -> int | None:
        for i, (row_key, _value) in enumerate(self.rows):
            if row_key == key:
                return i
        return None

    def value_of(self, key: str) -> Value | None:
        i = self.index_of(key)
        return None if i is None else self.rows[i][1]

    def step_at(self, position: int) -> Step:
        """The step that descends into the row at *position*."""
        if self.kind == ViewKind.ARRAY:
            return Index(position)
        return Name(self.rows[position][0])

    def index_of_step(self, step: Step) -> int | None:
        """Row position a step points at, if it still names a row."""
        if isinstance(step, Name):
            return self.index_of(step.name) if self.kind == ViewKind.OBJECT else None
        if self.kind == ViewKind.ARRAY and 0 <= step.index < len(self.rows):
            return step.index
        return None

    def as_document(self) -> Document:
        return Document(copy.deepcopy(self.rows))


def container_at(document: Document, path: list[Step]) -> Document | list[Value]:
    """Return the live container *path* names.

    ``Name`` steps follow object fields, ``Index`` steps follow array
    elements. Raises ``InvalidPath`` for the first step that does not
    resolve, including a step that lands on a leaf value.
    """
    current: Document | list[Value] = document
    for position, step in enumerate(path):
        child: Value | None = None
        if isinstance(step, Name):
            if isinstance(current, Document):
                child = current.get(step.name)
        elif isinstance(current, list) and 0 <= step.index < len(current):
            child = current[step.index]

        if isinstance(child, Object):
            current = child.document
        elif isinstance(child, Array):
            current = child.items
        else:
            raise InvalidPath(step, position)
    return current


def project(document: Document, path: list[Step]) -> View:
    """Snapshot the container at *path* as a fresh view."""
    container = container_at(document, path)
    if isinstance(container, Document):
        rows = tuple(copy.deepcopy(container.items()))
        return View(ViewKind.OBJECT, rows)
    rows = tuple((str(i), copy.deepcopy(item)) for i, item in enumerate(container))
    return View(ViewKind.ARRAY, rows)


def _array_position(key: str, length: int, *, allow_append: bool) -> int:
    limit = length + 1 if allow_append else length
    if key.isdecimal() and int(key) < limit:
        return int(key)
    raise InvalidKey(key)


def write(document: Document, path: list[Step], key: str, value: Value) -> None:
    """Insert or update ``key -> value`` in the container at *path*.

    In an object the key is a field name: an existing field keeps its
    position, a new one is appended. In an array the key is a position:
    an existing element is replaced and ``len`` appends.
    """
    container = container_at(document, path)
    if isinstance(container, Document):
        container.insert(key, value)
        return
    position = _array_position(key, len(container), allow_append=True)
    if position == len(container):
        container.append(value)
    else:
        container[position] = value


def remove(document: Document, path: list[Step], key: str) -> Value:
    """Remove a field or array element from the container at *path*."""
    container = container_at(document, path)
    if isinstance(container, Document):
        removed = container.remove(key)
        if removed is None:
            raise InvalidKey(key)
        return removed
    position = _array_position(key, len(container), allow_append=False)
    return container.pop(position)
