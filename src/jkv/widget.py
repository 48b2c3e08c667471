"""Textual widget that draws an editor session and feeds it key presses."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.highlighter import JSONHighlighter
from rich.text import Text
from textual import events
from textual.message import Message
from textual.widget import Widget

from .actions import KeyInput, TextField
from .controls import bindings, dispatch, hints
from .errors import InvariantViolation, SerializationFailure
from .model import display_text, dumps
from .navigator import ViewKind
from .path import format_path
from .session import (
    VALUE_TYPES,
    EditFocus,
    EditorSession,
    ExitFocus,
    Screen,
    SessionOutcome,
)

logger = logging.getLogger(__name__)

_KEY_COLUMN = 25


class DocumentBrowser(Widget, can_focus=True):
    """Key/value browser for one JSON document.

    BROWSE:  ↑ ↓ j k  Enter edit  → open  ← up  e new  Bksp delete  p preview  q quit
    EDIT:    typing / Bksp / Tab / arrows / Space toggles booleans / Enter / Esc
    EXIT:    output path, Save / Discard (y / n)
    """

    DEFAULT_CSS = """
    DocumentBrowser {
        height: 1fr;
        background: $surface;
        padding: 0 1;
    }
    """

    # -- Messages ----------------------------------------------------------

    @dataclass
    class SessionFinished(Message):
        outcome: SessionOutcome

    @dataclass
    class SessionFailed(Message):
        error: Exception

    # -- Init --------------------------------------------------------------

    def __init__(
        self,
        session: EditorSession,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.session: EditorSession = session
        self._scroll_top: int = 0

    # =====================================================================
    # Key handling
    # =====================================================================

    def on_key(self, event: events.Key) -> None:
        event.prevent_default()
        event.stop()
        self._handle_key(event)
        self.refresh()

    def _handle_key(self, event) -> None:
        char = event.character
        key_input = KeyInput(
            key=event.key,
            character=char,
            is_printable=bool(char) and char.isprintable(),
        )
        try:
            dispatch(self.session, key_input)
        except InvariantViolation as exc:
            logger.error("session aborted: %s", exc)
            self.post_message(self.SessionFailed(error=exc))
            return
        if self.session.outcome is not None:
            self.post_message(self.SessionFinished(outcome=self.session.outcome))

    # =====================================================================
    # Rendering
    # =====================================================================

    def render(self) -> Text:
        return self._render_frame(self.content_region.width, self.content_region.height)

    def _render_frame(self, width: int, height: int) -> Text:
        if height < 6 or width < 20:
            return Text("(too small)")
        s = self.session

        popup = self._popup_lines()
        footer = Text(" " + hints(bindings(s)), style="blue")
        status = Text(f" {s.status_msg}", style="bold yellow") if s.status_msg else Text("")
        body_height = max(1, height - len(popup) - 4)

        result = Text()
        result.append_text(self._header())
        result.append("\n")
        if s.screen == Screen.PREVIEWING:
            body = self._preview_lines()
        else:
            body = self._row_lines(body_height)
        for line in body[:body_height]:
            result.append_text(line)
            result.append("\n")
        for _ in range(body_height - min(len(body), body_height)):
            result.append("~\n", style="dim blue")
        for line in popup:
            result.append_text(line)
            result.append("\n")
        result.append_text(status)
        result.append("\n")
        result.append_text(footer)
        return result

    def _header(self) -> Text:
        s = self.session
        header = Text()
        if s.screen == Screen.PREVIEWING:
            header.append(" Preview ", style="bold white on dark_green")
            return header
        header.append(f" {format_path(s.path)} ", style="bold white on dark_green")
        if s.view is not None:
            kind = "array" if s.view.kind == ViewKind.ARRAY else "object"
            header.append(f"  {kind}, {len(s.view)} rows", style="dim")
        return header

    def _row_lines(self, visible: int) -> list[Text]:
        s = self.session
        if s.view_error is not None:
            return [
                Text(f" {s.view_error}", style="bold red"),
                Text(" (← to go up)" if s.path else "", style="dim"),
            ]
        if s.view is None or not s.view:
            return [Text(" (empty, press e to add a pair)", style="dim")]

        if s.selection is not None:
            if s.selection < self._scroll_top:
                self._scroll_top = s.selection
            elif s.selection >= self._scroll_top + visible:
                self._scroll_top = s.selection - visible + 1
        self._scroll_top = max(0, min(self._scroll_top, len(s.view) - 1))

        array = s.view.kind == ViewKind.ARRAY
        lines: list[Text] = []
        for i in range(self._scroll_top, min(len(s.view), self._scroll_top + visible)):
            key, value = s.view.rows[i]
            label = f"[{key}]" if array else f'"{key}"'
            style = "black on yellow" if i == s.selection else "yellow"
            lines.append(Text(f" {label:<{_KEY_COLUMN}}: {display_text(value)}", style=style))
        return lines

    def _preview_lines(self) -> list[Text]:
        try:
            content = dumps(self.session.document)
        except SerializationFailure as exc:
            return [Text(f" {exc}", style="bold red")]
        highlighted = JSONHighlighter()(Text(content))
        return list(highlighted.split("\n"))

    # -- Popups ------------------------------------------------------------

    def _popup_lines(self) -> list[Text]:
        s = self.session
        if s.screen == Screen.EDITING:
            return self._type_list_lines() if s.type_list_open else self._edit_lines()
        if s.screen == Screen.CONFIRMING_EXIT:
            return self._exit_lines()
        if s.pending_delete is not None:
            return [
                Text(" Delete? ", style="bold white on grey37"),
                Text(f' Are you sure you want to delete the key: "{s.pending_delete}"? (y/n)'),
            ]
        return []

    @staticmethod
    def _field(label: str, text: str, active: bool, error: bool) -> Text:
        line = Text(f" {label:<7}")
        line.append(text or " ", style="black on yellow" if active else "underline")
        if error:
            line.append("  invalid", style="bold red")
        return line

    def _edit_lines(self) -> list[Text]:
        s = self.session
        title = " Edit pair " if s.editing_existing else " Enter a new key-value pair "
        return [
            Text(title, style="bold white on grey37"),
            self._field(
                "Key", s.key_input, s.edit_focus == EditFocus.KEY, TextField.KEY in s.error_fields
            ),
            self._field(
                "Value",
                s.value_input,
                s.edit_focus == EditFocus.VALUE,
                TextField.VALUE in s.error_fields,
            ),
            self._field("Type", s.selected_type.value, s.edit_focus == EditFocus.TYPE, False),
        ]

    def _type_list_lines(self) -> list[Text]:
        s = self.session
        lines = [Text(" Select type of new value ", style="bold white on grey37")]
        for i, value_type in enumerate(VALUE_TYPES):
            style = "black on yellow" if i == s.type_list_index else "yellow"
            lines.append(Text(f" {value_type.value} ", style=style))
        return lines

    def _exit_lines(self) -> list[Text]:
        s = self.session
        buttons = Text(" ")
        buttons.append(
            " Save ", style="black on yellow" if s.exit_focus == ExitFocus.SAVE else "bold"
        )
        buttons.append("  ")
        buttons.append(
            " Discard ",
            style="black on yellow" if s.exit_focus == ExitFocus.DISCARD else "bold",
        )
        return [
            Text(" Save? ", style="bold white on grey37"),
            Text(" Would you like to save your changes before exiting?", style="red"),
            self._field(
                "Output",
                s.output_input,
                s.exit_focus == ExitFocus.INPUT,
                TextField.OUTPUT in s.error_fields,
            ),
            buttons,
        ]
