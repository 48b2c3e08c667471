"""Paths into a document and their ``$``-notation."""

from __future__ import annotations

import json
from dataclasses import dataclass


@dataclass(frozen=True)
class Name:
    """Descend into an object field."""

    name: str

    def __str__(self) -> str:
        return f"Name({self.name!r})"


@dataclass(frozen=True)
class Index:
    """Descend into an array element."""

    index: int

    def __str__(self) -> str:
        return f"Index({self.index})"


Step = Name | Index


def _is_plain_name(name: str) -> bool:
    return name.isidentifier()


def format_path(path: list[Step]) -> str:
    """Render a path as ``$``, ``$.config.items[2]`` or ``$["a b"]``."""
    parts = ["$"]
    for step in path:
        if isinstance(step, Index):
            parts.append(f"[{step.index}]")
        elif _is_plain_name(step.name):
            parts.append(f".{step.name}")
        else:
            parts.append(f"[{json.dumps(step.name, ensure_ascii=False)}]")
    return "".join(parts)


def parse_path(text: str) -> list[Step]:
    """Parse ``$``-notation back into steps.

    Supports:
      $            (root)
      .name        (object field)
      [n]          (array element)
      ["name"]     (quoted field, also single quotes)
    """
    text = text.strip()
    if not text.startswith("$"):
        raise ValueError("path must start with $")

    steps: list[Step] = []
    rest = text[1:]
    while rest:
        if rest.startswith("."):
            rest = rest[1:]
            end = len(rest)
            for i, ch in enumerate(rest):
                if ch in ".[":
                    end = i
                    break
            name = rest[:end]
            if not name:
                raise ValueError("empty name in path")
            steps.append(Name(name))
            rest = rest[end:]
        elif rest.startswith("["):
            token, rest = _bracket_segment(rest)
            if token[:1] in ("'", '"'):
                if len(token) < 2 or token[-1] != token[0]:
                    raise ValueError(f"unterminated quote in path: {token}")
                if token[0] == '"':
                    steps.append(Name(json.loads(token)))
                else:
                    steps.append(Name(token[1:-1]))
            elif token.isdigit():
                steps.append(Index(int(token)))
            else:
                raise ValueError(f"bad index in path: [{token}]")
        else:
            raise ValueError(f"unexpected text in path: {rest}")
    return steps


def _bracket_segment(path: str) -> tuple[str, str]:
    """Split ``[token]rest`` into ``(token, rest)``, honouring quotes."""
    quote = ""
    i = 1
    while i < len(path):
        ch = path[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = ""
        elif ch in ("'", '"'):
            quote = ch
        elif ch == "]":
            return path[1:i], path[i + 1 :]
        i += 1
    raise ValueError("Unclosed bracket")
