"""Error types raised by the jkv core and its storage layer."""

from __future__ import annotations


class JkvError(Exception):
    """Base class for every error jkv raises on purpose."""


class UnsupportedType(JkvError):
    """A payload node has no JSON value counterpart."""

    def __init__(self, node: object, reason: str | None = None) -> None:
        self.node = node
        super().__init__(reason or f"unsupported value type: {type(node).__name__}")


class InvalidPath(JkvError):
    """A path step does not resolve against the document."""

    def __init__(self, step: object, position: int) -> None:
        self.step = step
        self.position = position
        super().__init__(f"path step {step} at depth {position} does not resolve")


class InvalidKey(JkvError):
    """A key has no slot in the container a path names."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"no slot for key {key!r}")


class InputFileNotFound(JkvError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"{path}: No such file")


class InvalidInputJson(JkvError):
    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: invalid input JSON: {reason}")


class SerializationFailure(JkvError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"cannot serialize document: {reason}")


class IoFailure(JkvError):
    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class InvariantViolation(JkvError):
    """Session state no longer matches the document it describes."""
