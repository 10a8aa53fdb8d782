"""Mark-key classification.

Maps one input token to the role it plays in the mark namespace. Checks run
in a fixed order and the first match wins, so a key configured as the back
mark is never also an auto or manual mark.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum


class MarkCategory(Enum):
    QUIT = "quit"
    HELP = "help"
    BACK = "back"
    AUTO = "auto"
    MANUAL = "manual"
    INVALID = "invalid"


# Categories that name a stored position.
STORED_CATEGORIES = frozenset({MarkCategory.BACK, MarkCategory.AUTO, MarkCategory.MANUAL})


def is_mark_key(key: str) -> bool:
    """Return whether key is a valid single-character printable mark."""
    return len(key) == 1 and key.isprintable() and not key.isspace()


def classify_mark(
    token: str,
    *,
    back_mark: str | None,
    auto_marks: Iterable[str],
    quit_keys: Iterable[str] = (),
    help_keys: Iterable[str] = (),
) -> MarkCategory:
    """Classify ``token`` against the currently configured keys.

    An empty ``back_mark`` or ``auto_marks`` disables that category. Never
    raises: anything unrecognized is ``INVALID``.
    """
    if token in quit_keys:
        return MarkCategory.QUIT
    if token in help_keys:
        return MarkCategory.HELP
    if back_mark and token == back_mark:
        return MarkCategory.BACK
    if token and token in tuple(auto_marks):
        return MarkCategory.AUTO
    if is_mark_key(token):
        return MarkCategory.MANUAL
    return MarkCategory.INVALID
