"""Error types raised by the session log archive."""

from __future__ import annotations


class SessionLogError(Exception):
    """Base class for archive errors."""


class MalformedNameError(SessionLogError, ValueError):
    """A filename does not follow the DD-MM-YYYY-HH_MM-topic.md format."""

    def __init__(self, filename: str, reason: str = "") -> None:
        self.filename = filename
        self.reason = reason
        msg = f"Malformed session log name: {filename!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class NotFoundError(SessionLogError, FileNotFoundError):
    """A session log disappeared between listing and reading."""

    def __init__(self, path: object) -> None:
        self.path = path
        super().__init__(f"Session log not found: {path}")
