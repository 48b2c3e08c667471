"""Editor session: the live document plus everything the user is doing to it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto

from .actions import Action, TextField
from .errors import InvalidKey, InvalidPath, InvariantViolation
from .model import (
    Array,
    Bool,
    Document,
    JsonType,
    Null,
    Number,
    Object,
    String,
    Value,
    is_container,
    parse_bool,
    parse_number,
    type_of,
    value_text,
)
from .navigator import View, ViewKind, project, remove, write
from .path import Step, format_path

logger = logging.getLogger(__name__)

VALUE_TYPES: list[JsonType] = list(JsonType)


class Screen(Enum):
    BROWSING = auto()
    EDITING = auto()
    CONFIRMING_EXIT = auto()
    PREVIEWING = auto()


class EditFocus(Enum):
    KEY = auto()
    VALUE = auto()
    TYPE = auto()


class ExitFocus(Enum):
    INPUT = auto()
    SAVE = auto()
    DISCARD = auto()


@dataclass(frozen=True)
class SessionOutcome:
    """How the session ended: save to *output_path*, or discard."""

    save: bool
    output_path: str = ""


class EditorSession:
    """Single-user editing session over one document.

    Every change goes through ``apply``; the render side only reads the
    public attributes.
    """

    def __init__(
        self,
        document: Document | None = None,
        *,
        path: list[Step] | None = None,
        output_path: str = "",
    ) -> None:
        self.document: Document = document if document is not None else Document()
        self.path: list[Step] = list(path or [])
        self.screen: Screen = Screen.BROWSING
        # Edit buffers
        self.key_input: str = ""
        self.value_input: str = ""
        self.selected_type: JsonType = JsonType.STRING
        self.error_fields: set[TextField] = set()
        self.edit_focus: EditFocus | None = None
        self.type_list_open: bool = False
        self.type_list_index: int = 0
        self.editing_existing: bool = False
        # Browsing state
        self.selection: int | None = None  # index into self.view
        self.pending_delete: str | None = None
        self.view: View | None = None
        self.view_error: InvalidPath | None = None
        # Exit popup
        self.output_input: str = output_path
        self.exit_focus: ExitFocus | None = None
        self.outcome: SessionOutcome | None = None
        self.status_msg: str = ""
        self.refresh()

    # -- Helpers -----------------------------------------------------------

    @property
    def finished(self) -> bool:
        return self.outcome is not None

    @property
    def is_array_view(self) -> bool:
        return self.view is not None and self.view.kind == ViewKind.ARRAY

    def selected_value(self) -> Value | None:
        if self.view is None or self.selection is None:
            return None
        return self.view.value_at(self.selection)

    def refresh(self) -> None:
        """Re-project the current path.

        A path that no longer resolves only aborts this refresh: the view
        is dropped and the failing step is kept in ``view_error``.
        """
        try:
            view = project(self.document, self.path)
        except InvalidPath as exc:
            if self.view_error is None:
                logger.warning("cannot show %s: %s", format_path(self.path), exc)
            self.view = None
            self.view_error = exc
            self.selection = None
            return
        self.view = view
        self.view_error = None
        if self.selection is not None and self.selection >= len(view):
            self.selection = None

    def goto_screen(self, screen: Screen) -> None:
        if screen == self.screen:
            return
        leaving = self.screen
        self.screen = screen
        self.selection = None
        self.error_fields.clear()
        if leaving == Screen.EDITING:
            self.edit_focus = None
            self.type_list_open = False
        elif leaving == Screen.CONFIRMING_EXIT:
            self.exit_focus = None
        if screen == Screen.EDITING:
            self.edit_focus = EditFocus.KEY
        elif screen == Screen.CONFIRMING_EXIT:
            self.exit_focus = ExitFocus.SAVE

    def clear_editing_state(self) -> None:
        self.key_input = ""
        self.value_input = ""
        self.selected_type = JsonType.STRING
        self.type_list_open = False
        self.type_list_index = 0
        self.editing_existing = False
        self.error_fields.clear()

    # =====================================================================
    # Dispatch
    # =====================================================================

    def apply(
        self,
        action: Action,
        *,
        field: TextField | None = None,
        char: str | None = None,
    ) -> None:
        """Run one action to completion, then refresh the view."""
        if self.finished:
            return
        self.status_msg = ""

        # browsing
        if action == Action.CURSOR_UP:
            self.cursor_up()
        elif action == Action.CURSOR_DOWN:
            self.cursor_down()
        elif action == Action.CURSOR_CANCEL:
            self.cursor_cancel()
        elif action == Action.CURSOR_SELECT:
            if self.selection is not None:
                self.open_row_edit(self.selection)
        elif action == Action.OPEN_NEW_PAIR:
            self.open_new_pair()
        elif action == Action.TRAVERSE_IN:
            self.traverse_in()
        elif action == Action.TRAVERSE_OUT:
            self.traverse_out()
        elif action == Action.REQUEST_DELETE:
            self.request_delete()
        elif action == Action.DELETE_YES:
            self.confirm_delete()
        elif action == Action.DELETE_NO:
            self.deny_delete()
        elif action in (Action.PREVIEW, Action.EXIT_PREVIEW):
            self.toggle_preview()
        elif action == Action.QUIT:
            self.request_quit()

        # text fields
        elif action == Action.ENTER_TEXT:
            if field is not None and char:
                self.enter_text(field, char)
        elif action == Action.BACKSPACE_TEXT:
            if field is not None:
                self.backspace(field)

        # editing popup
        elif action == Action.EDITING_SUBMIT:
            self.edit_submit()
        elif action == Action.EDITING_CANCEL:
            if self.type_list_open:
                self.type_list_open = False
            else:
                self.cancel_edit()
        elif action == Action.EDITING_TOGGLE_FIELD:
            self.edit_toggle_field()
        elif action == Action.EDITING_LEFT:
            if self.edit_focus in (EditFocus.VALUE, EditFocus.TYPE):
                self.edit_focus = EditFocus.KEY
        elif action == Action.EDITING_RIGHT:
            if self.edit_focus in (EditFocus.KEY, EditFocus.TYPE):
                self.edit_focus = EditFocus.VALUE
        elif action == Action.EDITING_UP:
            if self.type_list_open:
                self.type_list_index = max(0, self.type_list_index - 1)
            elif self.edit_focus == EditFocus.TYPE:
                self.edit_focus = EditFocus.KEY
        elif action == Action.EDITING_DOWN:
            if self.type_list_open:
                self.type_list_index = min(len(VALUE_TYPES) - 1, self.type_list_index + 1)
            elif self.edit_focus in (EditFocus.KEY, EditFocus.VALUE):
                self.edit_focus = EditFocus.TYPE
        elif action == Action.EDITING_BOOL_TOGGLE:
            self.toggle_bool()

        # exit popup
        elif action in (Action.EXIT_LEFT, Action.EXIT_RIGHT):
            if self.exit_focus == ExitFocus.SAVE:
                self.exit_focus = ExitFocus.DISCARD
            elif self.exit_focus == ExitFocus.DISCARD:
                self.exit_focus = ExitFocus.SAVE
        elif action == Action.EXIT_UP:
            self.exit_focus = ExitFocus.INPUT
        elif action == Action.EXIT_DOWN:
            if self.exit_focus == ExitFocus.INPUT:
                self.exit_focus = ExitFocus.SAVE
        elif action == Action.EXIT_TOGGLE_FIELD:
            self.exit_focus = {
                ExitFocus.INPUT: ExitFocus.SAVE,
                ExitFocus.SAVE: ExitFocus.DISCARD,
                ExitFocus.DISCARD: ExitFocus.INPUT,
            }.get(self.exit_focus, ExitFocus.INPUT)
        elif action == Action.EXIT_SELECT:
            self.finish(save=self.exit_focus != ExitFocus.DISCARD)
        elif action == Action.EXIT_SAVE:
            self.finish(save=True)
        elif action == Action.EXIT_DISCARD:
            self.finish(save=False)
        elif action == Action.EXIT_CANCEL:
            self.goto_screen(Screen.BROWSING)

        self.refresh()

    # =====================================================================
    # Browsing
    # =====================================================================

    def cursor_down(self) -> None:
        if not self.view:
            return
        if self.selection is None:
            self.selection = 0
        else:
            self.selection = min(self.selection + 1, len(self.view) - 1)

    def cursor_up(self) -> None:
        if not self.view:
            return
        if self.selection is None:
            self.selection = len(self.view) - 1
        else:
            self.selection = max(self.selection - 1, 0)

    def cursor_cancel(self) -> None:
        self.selection = None

    def open_new_pair(self) -> None:
        self.clear_editing_state()
        self.goto_screen(Screen.EDITING)
        if self.is_array_view:
            # new array rows append by default
            self.key_input = str(len(self.view))

    def open_row_edit(self, index: int) -> None:
        """Open the edit popup pre-filled from the row at *index*."""
        if self.view is None or self.view.key_at(index) is None:
            raise InvariantViolation(f"no entry at index {index}")
        key, value = self.view.rows[index]
        self.clear_editing_state()
        self.goto_screen(Screen.EDITING)
        self.key_input = key
        self.selected_type = type_of(value)
        self.type_list_index = VALUE_TYPES.index(self.selected_type)
        self.value_input = value_text(value)
        self.editing_existing = True
        self.edit_focus = EditFocus.VALUE

    def request_delete(self) -> None:
        if self.selection is None:
            return
        key = self.view.key_at(self.selection) if self.view is not None else None
        if key is None:
            raise InvariantViolation(f"no entry at index {self.selection}")
        self.pending_delete = key

    def confirm_delete(self) -> None:
        key = self.pending_delete
        if key is None:
            return
        self.pending_delete = None
        self.selection = None
        try:
            remove(self.document, self.path, key)
        except InvalidPath as exc:
            self.view_error = exc
            self.status_msg = str(exc)
            return
        except InvalidKey as exc:
            raise InvariantViolation(f"delete target {key!r} vanished") from exc
        logger.info("deleted %s from %s", key, format_path(self.path))
        self.status_msg = f"deleted {key}"

    def deny_delete(self) -> None:
        self.pending_delete = None

    def traverse_in(self) -> None:
        """Descend into the selected row when it holds a container."""
        if self.view is None or self.selection is None:
            return
        value = self.view.value_at(self.selection)
        if value is None:
            raise InvariantViolation(f"no entry at index {self.selection}")
        if not is_container(value):
            return
        self.path.append(self.view.step_at(self.selection))
        self.pending_delete = None
        self.refresh()
        self.selection = 0 if self.view else None
        logger.debug("traversed into %s", format_path(self.path))

    def traverse_out(self) -> None:
        """Pop one step and reselect the row it came from."""
        if not self.path:
            return
        popped = self.path.pop()
        self.pending_delete = None
        self.refresh()
        self.selection = self.view.index_of_step(popped) if self.view is not None else None
        logger.debug("traversed out to %s", format_path(self.path))

    def toggle_preview(self) -> None:
        if self.screen == Screen.PREVIEWING:
            self.goto_screen(Screen.BROWSING)
        elif self.screen == Screen.BROWSING:
            self.goto_screen(Screen.PREVIEWING)

    def request_quit(self) -> None:
        self.pending_delete = None
        self.goto_screen(Screen.CONFIRMING_EXIT)

    # =====================================================================
    # Editing
    # =====================================================================

    def enter_text(self, field: TextField, char: str) -> None:
        if field == TextField.KEY:
            self.key_input += char
        elif field == TextField.VALUE:
            self.value_input += char
        else:
            self.output_input += char
        self.error_fields.discard(field)

    def backspace(self, field: TextField) -> None:
        if field == TextField.KEY:
            self.key_input = self.key_input[:-1]
        elif field == TextField.VALUE:
            self.value_input = self.value_input[:-1]
        else:
            self.output_input = self.output_input[:-1]
        self.error_fields.discard(field)

    def edit_toggle_field(self) -> None:
        if self.edit_focus == EditFocus.KEY:
            self.edit_focus = EditFocus.VALUE
        elif self.edit_focus in (EditFocus.VALUE, EditFocus.TYPE):
            self.edit_focus = EditFocus.KEY

    def edit_submit(self) -> None:
        if self.type_list_open:
            self.type_list_open = False
            self.select_value_type(VALUE_TYPES[self.type_list_index])
        elif self.edit_focus == EditFocus.KEY:
            self.edit_focus = EditFocus.VALUE
        elif self.edit_focus == EditFocus.VALUE:
            self.submit_edit()
        elif self.edit_focus == EditFocus.TYPE:
            self.type_list_open = True
            self.type_list_index = VALUE_TYPES.index(self.selected_type)

    def select_value_type(self, value_type: JsonType) -> None:
        self.selected_type = value_type
        self.value_input = value_type.seed
        self.error_fields.discard(TextField.VALUE)

    def toggle_bool(self) -> None:
        self.value_input = "false" if parse_bool(self.value_input) else "true"

    def validate_edit(self) -> set[TextField]:
        """Return the buffers that fail validation for the current edit."""
        errors: set[TextField] = set()
        if self.selected_type == JsonType.NUMBER:
            if parse_number(self.value_input) is None:
                errors.add(TextField.VALUE)
        elif self.selected_type == JsonType.BOOLEAN:
            if parse_bool(self.value_input) is None:
                errors.add(TextField.VALUE)
        if self.is_array_view:
            key = self.key_input
            if not (key.isdecimal() and int(key) <= len(self.view)):
                errors.add(TextField.KEY)
        return errors

    def buffer_value(self) -> Value:
        """Build the value the buffers describe; call after validation."""
        value_type = self.selected_type
        if value_type == JsonType.STRING:
            return String(self.value_input)
        if value_type == JsonType.NUMBER:
            return Number(parse_number(self.value_input))
        if value_type == JsonType.BOOLEAN:
            return Bool(bool(parse_bool(self.value_input)))
        if value_type == JsonType.NULL:
            return Null()
        # a container keeps its contents when only its pair is re-submitted
        existing = self.view.value_of(self.key_input) if self.view is not None else None
        if existing is not None and type_of(existing) == value_type:
            return existing
        return Object() if value_type == JsonType.OBJECT else Array()

    def submit_edit(self) -> bool:
        """Validate and write the pair; ``False`` leaves the popup open."""
        errors = self.validate_edit()
        if errors:
            self.error_fields = errors
            self.status_msg = "invalid " + ", ".join(
                sorted(f.name.lower() for f in errors)
            )
            logger.debug("edit rejected for %r: %s", self.key_input, self.status_msg)
            return False

        key = self.key_input
        try:
            write(self.document, self.path, key, self.buffer_value())
        except InvalidKey:
            self.error_fields = {TextField.KEY}
            self.status_msg = "invalid key"
            return False
        except InvalidPath as exc:
            self.view_error = exc
            self.status_msg = str(exc)
            logger.error("write to %s failed: %s", format_path(self.path), exc)
            self.cancel_edit()
            return False

        logger.info("wrote %s in %s", key, format_path(self.path))
        self.status_msg = f"saved {key}"
        self.clear_editing_state()
        self.goto_screen(Screen.BROWSING)
        return True

    def cancel_edit(self) -> None:
        self.clear_editing_state()
        self.goto_screen(Screen.BROWSING)

    # =====================================================================
    # Exit
    # =====================================================================

    def finish(self, save: bool) -> bool:
        """End the session; saving needs a non-blank output path."""
        if save and not self.output_input.strip():
            self.error_fields = {TextField.OUTPUT}
            self.exit_focus = ExitFocus.INPUT
            self.status_msg = "output path is required"
            return False
        output = self.output_input.strip() if save else ""
        self.outcome = SessionOutcome(save=save, output_path=output)
        logger.info("session finished (%s)", "save" if save else "discard")
        return True
