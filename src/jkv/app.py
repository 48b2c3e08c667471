"""Terminal application and command line entry point for jkv."""

from __future__ import annotations

import argparse
import logging
import sys

from textual.app import App, ComposeResult
from textual.widgets import Header

from ._logging import setup_logging
from .errors import JkvError
from .model import Document
from .navigator import project
from .path import Step, format_path, parse_path
from .session import EditorSession, SessionOutcome
from .storage import load_document, save_document
from .widget import DocumentBrowser

logger = logging.getLogger(__name__)


class JkvApp(App[SessionOutcome]):
    """TUI app that wraps the DocumentBrowser widget."""

    CSS = """
    Screen {
        layout: vertical;
    }
    #browser {
        height: 1fr;
        border: solid $accent;
    }
    """

    TITLE = "JSON Editor"
    BINDINGS = []
    ENABLE_COMMAND_PALETTE = False

    def __init__(
        self,
        document: Document,
        *,
        file_path: str = "",
        output_path: str = "",
        start_path: list[Step] | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.file_path = file_path
        self.session = EditorSession(document, path=start_path, output_path=output_path)
        self.error: Exception | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield DocumentBrowser(self.session, id="browser")

    def on_mount(self) -> None:
        self.sub_title = self.file_path or "[new]"
        self.query_one("#browser").focus()

    def on_document_browser_session_finished(
        self, event: DocumentBrowser.SessionFinished
    ) -> None:
        self.exit(event.outcome)

    def on_document_browser_session_failed(
        self, event: DocumentBrowser.SessionFailed
    ) -> None:
        self.error = event.error
        self.exit(return_code=1)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="jkv",
        description="Interactive key/value editor for JSON documents",
    )
    parser.add_argument(
        "input_file",
        nargs="?",
        default="",
        help="JSON file to edit (starts with an empty object when omitted)",
    )
    parser.add_argument(
        "-o", "--output",
        default="",
        help="file to save to (defaults to the input file)",
    )
    parser.add_argument(
        "--at",
        default="$",
        help="location to start browsing at, e.g. $.config.items[0]",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=4,
        help="indent of the saved JSON (default: 4)",
    )
    parser.add_argument(
        "--dry",
        action="store_true",
        default=False,
        help="run without writing the output file",
    )
    parser.add_argument("--log-file", default="", help="write log records to this file")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="log debug records",
    )
    args = parser.parse_args(argv)

    setup_logging(args.log_file, verbose=args.verbose)

    try:
        document = load_document(args.input_file)
    except JkvError as exc:
        print(f"jkv: {exc}", file=sys.stderr)
        return 1

    try:
        start_path = parse_path(args.at)
        project(document, start_path)
    except (ValueError, JkvError) as exc:
        print(f"jkv: --at {args.at}: {exc}", file=sys.stderr)
        return 1

    app = JkvApp(
        document,
        file_path=args.input_file,
        output_path=args.output or args.input_file,
        start_path=start_path,
    )
    outcome = app.run()

    if app.error is not None:
        print(f"jkv: {app.error}", file=sys.stderr)
        return 1
    if outcome is None or not outcome.save:
        logger.info("exited without saving")
        return 0
    if args.dry:
        logger.info("dry run, not writing %s", outcome.output_path)
        return 0

    try:
        save_document(document, outcome.output_path, indent=args.indent)
    except JkvError as exc:
        print(f"jkv: {exc}", file=sys.stderr)
        return 1
    logger.info("saved %s at %s", outcome.output_path, format_path(app.session.path))
    return 0


if __name__ == "__main__":
    sys.exit(main())
