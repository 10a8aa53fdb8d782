"""Host editor contracts consumed by the mark registry.

The registry never owns documents. It only holds non-owning live handles
created by the host and listens to the three document lifecycle events.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Protocol, runtime_checkable

FOCUS_CHANGE = "focus-change"
DOCUMENT_CLOSED = "document-closed"
DOCUMENT_OPENED = "document-opened"

LIFECYCLE_EVENTS = (FOCUS_CHANGE, DOCUMENT_CLOSED, DOCUMENT_OPENED)

# focus-change passes the document list; the other two pass one document.
LifecycleCallback = Callable[[object], None]


@runtime_checkable
class Document(Protocol):
    """One open text document as seen by the registry."""

    name: str
    path: Path | None
    mode: str
    bookmarkable: bool

    @property
    def point(self) -> int: ...

    def is_alive(self) -> bool:
        """Return whether the document is still open in the host."""
        ...

    def line_at(self, offset: int) -> str:
        """Return the full line of text containing ``offset``."""
        ...

    def line_number_at(self, offset: int) -> int:
        """Return the 1-based line number containing ``offset``."""
        ...


@runtime_checkable
class LiveHandle(Protocol):
    """Host-maintained position that keeps pointing at the same text under edits."""

    def resolve(self) -> tuple[Document, int]:
        """Return the current document and offset of this handle."""
        ...

    def is_valid(self) -> bool:
        """Return whether the underlying document still exists."""
        ...


@runtime_checkable
class Host(Protocol):
    """Document/window management surface of the host editor."""

    def documents(self) -> list[Document]:
        """Return open documents in focus order, least recent first."""
        ...

    def current_document(self) -> Document | None: ...

    def make_handle(self, document: Document, offset: int) -> LiveHandle: ...

    def open_path(self, path: Path) -> Document:
        """Open (or reuse) the document for ``path``; raises ``OSError`` when unreadable."""
        ...

    def focus(self, document: Document) -> None: ...

    def goto(self, document: Document, offset: int) -> None: ...

    def add_listener(self, event: str, callback: LifecycleCallback) -> None: ...

    def remove_listener(self, event: str, callback: LifecycleCallback) -> None: ...
