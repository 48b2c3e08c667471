"""Reading and writing documents on disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .errors import (
    InputFileNotFound,
    InvalidInputJson,
    IoFailure,
    UnsupportedType,
)
from .model import Document, dumps

logger = logging.getLogger(__name__)


# containers nested deeper than this are rejected at load
MAX_DEPTH = 100


def _reject_constant(name: str) -> object:
    raise ValueError(f"non-standard JSON constant {name}")


def _nesting_depth(payload: object) -> int:
    depth = 0
    stack = [(payload, 0)]
    while stack:
        node, level = stack.pop()
        if isinstance(node, dict):
            children = node.values()
        elif isinstance(node, list):
            children = node
        else:
            continue
        depth = max(depth, level + 1)
        stack.extend((child, level + 1) for child in children)
    return depth


def parse_document(content: str, source: str = "<input>") -> Document:
    """Parse JSON text whose top level must be an object."""
    try:
        payload = json.loads(content, parse_constant=_reject_constant)
    except ValueError as exc:
        raise InvalidInputJson(source, str(exc)) from exc
    except RecursionError:
        raise InvalidInputJson(source, "document nested too deeply") from None
    if not isinstance(payload, dict):
        raise InvalidInputJson(source, "top-level value is not an object")
    if _nesting_depth(payload) > MAX_DEPTH:
        raise InvalidInputJson(source, "document nested too deeply")
    try:
        return Document.from_json(payload)
    except UnsupportedType as exc:
        raise InvalidInputJson(source, str(exc)) from exc
    except RecursionError:
        raise InvalidInputJson(source, "document nested too deeply") from None


def load_document(file_path: str | None) -> Document:
    """Load the document to edit; no path means a fresh empty document."""
    if not file_path:
        return Document()
    path = Path(file_path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise InputFileNotFound(file_path) from None
    except UnicodeDecodeError as exc:
        raise InvalidInputJson(file_path, f"not UTF-8 text: {exc.reason}") from exc
    except OSError as exc:
        raise IoFailure(file_path, str(exc)) from exc
    document = parse_document(content, file_path)
    logger.info("loaded %s (%d keys)", file_path, len(document))
    return document


def save_document(document: Document, file_path: str, *, indent: int | None = 4) -> None:
    """Serialize *document* and write it to *file_path*."""
    text = dumps(document, indent=indent)
    try:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
    except OSError as exc:
        raise IoFailure(file_path, str(exc)) from exc
    logger.info("saved %s", file_path)
