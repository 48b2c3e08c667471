"""Abstract actions, key bindings and input events."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Action(Enum):
    QUIT = auto()
    OPEN_NEW_PAIR = auto()
    CURSOR_UP = auto()
    CURSOR_DOWN = auto()
    CURSOR_CANCEL = auto()
    CURSOR_SELECT = auto()
    TRAVERSE_IN = auto()
    TRAVERSE_OUT = auto()
    REQUEST_DELETE = auto()
    DELETE_YES = auto()
    DELETE_NO = auto()
    PREVIEW = auto()
    EXIT_PREVIEW = auto()
    ENTER_TEXT = auto()
    BACKSPACE_TEXT = auto()
    EDITING_SUBMIT = auto()
    EDITING_CANCEL = auto()
    EDITING_TOGGLE_FIELD = auto()
    EDITING_UP = auto()
    EDITING_DOWN = auto()
    EDITING_LEFT = auto()
    EDITING_RIGHT = auto()
    EDITING_BOOL_TOGGLE = auto()
    EXIT_LEFT = auto()
    EXIT_RIGHT = auto()
    EXIT_UP = auto()
    EXIT_DOWN = auto()
    EXIT_TOGGLE_FIELD = auto()
    EXIT_SELECT = auto()
    EXIT_SAVE = auto()
    EXIT_DISCARD = auto()
    EXIT_CANCEL = auto()

    @property
    def description(self) -> str | None:
        """Footer label, or ``None`` for actions not worth a hint."""
        return _DESCRIPTIONS.get(self)


_DESCRIPTIONS = {
    Action.OPEN_NEW_PAIR: "new",
    Action.QUIT: "quit",
    Action.PREVIEW: "preview",
    Action.EXIT_PREVIEW: "back",
    Action.CURSOR_SELECT: "edit",
    Action.CURSOR_CANCEL: "cancel",
    Action.TRAVERSE_IN: "open",
    Action.TRAVERSE_OUT: "up",
    Action.REQUEST_DELETE: "delete",
    Action.DELETE_YES: "yes",
    Action.DELETE_NO: "no",
    Action.EDITING_SUBMIT: "submit",
    Action.EDITING_CANCEL: "cancel",
    Action.EDITING_TOGGLE_FIELD: "switch",
    Action.EDITING_BOOL_TOGGLE: "toggle",
    Action.EXIT_SELECT: "select",
    Action.EXIT_SAVE: "save",
    Action.EXIT_DISCARD: "discard",
    Action.EXIT_CANCEL: "back",
}


class TextField(Enum):
    KEY = auto()
    VALUE = auto()
    OUTPUT = auto()


# Binding key meaning "any printable character"
TEXT_ENTRY = "<text>"


@dataclass(frozen=True)
class Binding:
    key: str
    action: Action
    field: TextField | None = None


class KeyKind(Enum):
    PRESS = auto()
    REPEAT = auto()
    RELEASE = auto()


@dataclass(frozen=True)
class KeyInput:
    """One input event: key identifier plus the character it produced."""

    key: str
    character: str | None = None
    is_printable: bool = False
    kind: KeyKind = KeyKind.PRESS
