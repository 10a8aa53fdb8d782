"""Host editor contracts plus an in-memory reference host."""

from .base import DOCUMENT_CLOSED, DOCUMENT_OPENED, FOCUS_CHANGE, Document, Host, LiveHandle
from .memory import MemoryDocument, MemoryHandle, MemoryHost
from .scheduler import CooperativeScheduler, TimerHandle

__all__ = [
    "DOCUMENT_CLOSED",
    "DOCUMENT_OPENED",
    "FOCUS_CHANGE",
    "Document",
    "Host",
    "LiveHandle",
    "MemoryDocument",
    "MemoryHandle",
    "MemoryHost",
    "CooperativeScheduler",
    "TimerHandle",
]
