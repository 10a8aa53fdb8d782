"""Input layer: terminal key decoding and the mark prompt."""

from .keys import ESC_SEQUENCE_TIMEOUT_MS, read_key
from .read_mark import MarkReaderCallbacks, preview_session, read_mark

__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "read_key",
    "MarkReaderCallbacks",
    "preview_session",
    "read_mark",
]
