"""Control state machine: which actions are legal and what a key press means.

``bindings`` is a pure function of the session and is called again after
every action, so the table always reflects the current screen, focus and
data shape.
"""

from __future__ import annotations

from .actions import TEXT_ENTRY, Action, Binding, KeyInput, KeyKind, TextField
from .model import JsonType, is_container
from .session import EditFocus, EditorSession, ExitFocus, Screen

# key identifier -> label shown in the footer
_KEY_LABELS = {
    "enter": "Enter",
    "escape": "Esc",
    "tab": "Tab",
    "backspace": "Bksp",
    "delete": "Del",
    "space": "Space",
    "up": "↑",
    "down": "↓",
    "left": "←",
    "right": "→",
}

_TYPED_VALUES = (JsonType.STRING, JsonType.NUMBER)


def _browsing(session: EditorSession) -> list[Binding]:
    if session.pending_delete is not None:
        return [
            Binding("y", Action.DELETE_YES),
            Binding("n", Action.DELETE_NO),
            Binding("escape", Action.DELETE_NO),
        ]

    result: list[Binding] = [Binding("q", Action.QUIT)]
    if session.view is None:
        # path error: only climbing out or quitting makes sense
        if session.path:
            result.append(Binding("left", Action.TRAVERSE_OUT))
        return result

    result += [
        Binding("e", Action.OPEN_NEW_PAIR),
        Binding("p", Action.PREVIEW),
    ]
    if session.view:
        result += [
            Binding("enter", Action.CURSOR_SELECT),
            Binding("down", Action.CURSOR_DOWN),
            Binding("up", Action.CURSOR_UP),
            Binding("j", Action.CURSOR_DOWN),
            Binding("k", Action.CURSOR_UP),
        ]
        if session.selection is not None:
            result += [
                Binding("escape", Action.CURSOR_CANCEL),
                Binding("backspace", Action.REQUEST_DELETE),
                Binding("delete", Action.REQUEST_DELETE),
            ]
            selected = session.selected_value()
            if selected is not None and is_container(selected):
                result.append(Binding("right", Action.TRAVERSE_IN))
    if session.path:
        result.append(Binding("left", Action.TRAVERSE_OUT))
    return result


def _editing(session: EditorSession) -> list[Binding]:
    if session.type_list_open:
        return [
            Binding("enter", Action.EDITING_SUBMIT),
            Binding("escape", Action.EDITING_CANCEL),
            Binding("up", Action.EDITING_UP),
            Binding("down", Action.EDITING_DOWN),
        ]

    result = [
        Binding("enter", Action.EDITING_SUBMIT),
        Binding("tab", Action.EDITING_TOGGLE_FIELD),
        Binding("escape", Action.EDITING_CANCEL),
        Binding("up", Action.EDITING_UP),
        Binding("down", Action.EDITING_DOWN),
        Binding("left", Action.EDITING_LEFT),
        Binding("right", Action.EDITING_RIGHT),
    ]
    focus = session.edit_focus
    if focus == EditFocus.KEY:
        result += [
            Binding("backspace", Action.BACKSPACE_TEXT, TextField.KEY),
            Binding(TEXT_ENTRY, Action.ENTER_TEXT, TextField.KEY),
        ]
    elif focus == EditFocus.VALUE:
        if session.selected_type in _TYPED_VALUES:
            result += [
                Binding("backspace", Action.BACKSPACE_TEXT, TextField.VALUE),
                Binding(TEXT_ENTRY, Action.ENTER_TEXT, TextField.VALUE),
            ]
        elif session.selected_type == JsonType.BOOLEAN:
            result.append(Binding("space", Action.EDITING_BOOL_TOGGLE))
    return result


def _confirming_exit(session: EditorSession) -> list[Binding]:
    result = [
        Binding("enter", Action.EXIT_SELECT),
        Binding("escape", Action.EXIT_CANCEL),
        Binding("tab", Action.EXIT_TOGGLE_FIELD),
        Binding("up", Action.EXIT_UP),
        Binding("down", Action.EXIT_DOWN),
        Binding("left", Action.EXIT_LEFT),
        Binding("right", Action.EXIT_RIGHT),
    ]
    if session.exit_focus == ExitFocus.INPUT:
        result += [
            Binding("backspace", Action.BACKSPACE_TEXT, TextField.OUTPUT),
            Binding(TEXT_ENTRY, Action.ENTER_TEXT, TextField.OUTPUT),
        ]
    else:
        result += [
            Binding("y", Action.EXIT_SAVE),
            Binding("n", Action.EXIT_DISCARD),
        ]
    return result


def bindings(session: EditorSession) -> list[Binding]:
    """Legal bindings for the session as it is right now."""
    if session.finished:
        return []
    if session.screen == Screen.BROWSING:
        return _browsing(session)
    if session.screen == Screen.EDITING:
        return _editing(session)
    if session.screen == Screen.CONFIRMING_EXIT:
        return _confirming_exit(session)
    return [
        Binding("p", Action.EXIT_PREVIEW),
        Binding("escape", Action.EXIT_PREVIEW),
    ]


def resolve(table: list[Binding], event: KeyInput) -> Binding | None:
    """Pick the binding an input event triggers.

    Exact key matches win; the text-entry binding only catches printable
    characters nothing else claimed.
    """
    if event.kind != KeyKind.PRESS:
        return None
    text_entry: Binding | None = None
    for binding in table:
        if binding.key == TEXT_ENTRY:
            text_entry = binding
        elif binding.key == event.key:
            return binding
    if text_entry is not None and event.is_printable and event.character:
        return text_entry
    return None


def dispatch(session: EditorSession, event: KeyInput) -> Binding | None:
    """Resolve *event* against the current table and apply it."""
    binding = resolve(bindings(session), event)
    if binding is not None:
        session.apply(binding.action, field=binding.field, char=event.character)
    return binding


def hints(table: list[Binding]) -> str:
    """Footer text such as ``(e) new | (q) quit``."""
    parts: list[str] = []
    seen: set[Action] = set()
    for binding in table:
        label = binding.action.description
        if label is None or binding.action in seen:
            continue
        seen.add(binding.action)
        parts.append(f"({_KEY_LABELS.get(binding.key, binding.key)}) {label}")
    return " | ".join(parts)
