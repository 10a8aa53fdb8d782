"""Recoverable error taxonomy for mark commands.

Every error carries a short user-visible ``message``. None of them leave
registry state half-updated: the operation that raised is rolled back.
"""

from __future__ import annotations


class MarkError(Exception):
    """Base class for mark command failures surfaced as messages."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotManualMark(MarkError):
    """Key cannot be used as a manual mark (reserved or non-printable)."""


class DisallowedContext(MarkError):
    """Current document does not accept manual marks."""


class MarkExists(MarkError):
    """Mark is already taken and overwriting is disabled."""


class PositionDuplicate(MarkError):
    """Position is already recorded under another manual mark."""


class NotFound(MarkError):
    """Mark is absent, or its target can no longer be reached."""


class InvalidToken(MarkError):
    """Read loop received input that is not a single character."""


__all__ = [
    "MarkError",
    "NotManualMark",
    "DisallowedContext",
    "MarkExists",
    "PositionDuplicate",
    "NotFound",
    "InvalidToken",
]
