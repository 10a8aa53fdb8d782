"""In-process reference host: text documents, focus order, lifecycle events.

Live handles behave like editor markers: they shift with insertions and
deletions so they keep pointing at the same text. Closing a document fires
``document-closed`` while its text is still readable, then invalidates it.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Callable
from pathlib import Path

from .base import DOCUMENT_CLOSED, DOCUMENT_OPENED, FOCUS_CHANGE, LIFECYCLE_EVENTS
from .syntax import TEXT_MODE, read_text, syntax_mode_for

logger = logging.getLogger(__name__)


class MemoryHandle:
    """Position inside a :class:`MemoryDocument` that follows edits."""

    def __init__(self, document: MemoryDocument, offset: int) -> None:
        self.document = document
        self.offset = offset

    def resolve(self) -> tuple[MemoryDocument, int]:
        return self.document, self.offset

    def is_valid(self) -> bool:
        return self.document.is_alive()

    def __repr__(self) -> str:
        return f"MemoryHandle({self.document.name!r}, {self.offset})"


class MemoryDocument:
    """Editable text buffer; identity (not content) defines equality."""

    def __init__(
        self,
        name: str,
        text: str = "",
        *,
        path: Path | None = None,
        mode: str = TEXT_MODE,
        bookmarkable: bool = True,
    ) -> None:
        self.name = name
        self.text = text
        self.path = path
        self.mode = mode
        self.bookmarkable = bookmarkable
        self._point = 0
        self._alive = True
        self._handles: weakref.WeakSet[MemoryHandle] = weakref.WeakSet()

    def __repr__(self) -> str:
        return f"MemoryDocument({self.name!r})"

    @property
    def point(self) -> int:
        return self._point

    @point.setter
    def point(self, offset: int) -> None:
        self._point = self.clamp(offset)

    def clamp(self, offset: int) -> int:
        return max(0, min(offset, len(self.text)))

    def is_alive(self) -> bool:
        return self._alive

    def handle(self, offset: int) -> MemoryHandle:
        handle = MemoryHandle(self, self.clamp(offset))
        self._handles.add(handle)
        return handle

    def line_bounds(self, offset: int) -> tuple[int, int]:
        """Return ``[start, end)`` of the line containing ``offset``, newline excluded."""
        offset = self.clamp(offset)
        start = self.text.rfind("\n", 0, offset) + 1
        end = self.text.find("\n", offset)
        if end < 0:
            end = len(self.text)
        return start, end

    def line_at(self, offset: int) -> str:
        start, end = self.line_bounds(offset)
        return self.text[start:end]

    def line_number_at(self, offset: int) -> int:
        return self.text.count("\n", 0, self.clamp(offset)) + 1

    def offset_of_line(self, line_number: int) -> int:
        """Return the offset where 1-based ``line_number`` starts (clamped)."""
        offset = 0
        for _ in range(max(0, line_number - 1)):
            next_newline = self.text.find("\n", offset)
            if next_newline < 0:
                return len(self.text)
            offset = next_newline + 1
        return offset

    def insert(self, offset: int, text: str) -> None:
        """Insert ``text``; handles and point at or after ``offset`` move right."""
        offset = self.clamp(offset)
        self.text = self.text[:offset] + text + self.text[offset:]
        for handle in list(self._handles):
            if handle.offset >= offset:
                handle.offset += len(text)
        if self._point >= offset:
            self._point += len(text)

    def delete(self, start: int, end: int) -> None:
        """Delete ``[start, end)``; positions inside the span collapse to ``start``."""
        start = self.clamp(start)
        end = self.clamp(end)
        if end <= start:
            return
        removed = end - start
        self.text = self.text[:start] + self.text[end:]

        def shifted(offset: int) -> int:
            if offset >= end:
                return offset - removed
            if offset > start:
                return start
            return offset

        for handle in list(self._handles):
            handle.offset = shifted(handle.offset)
        self._point = shifted(self._point)

    def kill(self) -> None:
        self._alive = False


class MemoryHost:
    """Host implementation holding every document in memory.

    ``documents()`` is ordered by focus, least recent first; the current
    document is always the last one.
    """

    def __init__(self) -> None:
        self._documents: list[MemoryDocument] = []
        self._listeners: dict[str, list[Callable[[object], None]]] = {
            event: [] for event in LIFECYCLE_EVENTS
        }
        self.flashes: list[tuple[MemoryDocument, int]] = []

    # Listener plumbing.

    def add_listener(self, event: str, callback: Callable[[object], None]) -> None:
        if event not in self._listeners:
            raise ValueError(f"unknown lifecycle event: {event!r}")
        self._listeners[event].append(callback)

    def remove_listener(self, event: str, callback: Callable[[object], None]) -> None:
        listeners = self._listeners.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    def listener_count(self) -> int:
        return sum(len(listeners) for listeners in self._listeners.values())

    def _emit(self, event: str, payload: object) -> None:
        logger.debug("host event %s", event)
        for callback in list(self._listeners[event]):
            callback(payload)

    # Queries.

    def documents(self) -> list[MemoryDocument]:
        return list(self._documents)

    def current_document(self) -> MemoryDocument | None:
        return self._documents[-1] if self._documents else None

    def find_path(self, path: Path) -> MemoryDocument | None:
        target = path.resolve()
        for document in self._documents:
            if document.path is not None and document.path == target:
                return document
        return None

    def make_handle(self, document: MemoryDocument, offset: int) -> MemoryHandle:
        return document.handle(offset)

    # Document lifecycle.

    def _unique_name(self, name: str) -> str:
        taken = {document.name for document in self._documents}
        if name not in taken:
            return name
        suffix = 2
        while f"{name}<{suffix}>" in taken:
            suffix += 1
        return f"{name}<{suffix}>"

    def _add_document(self, document: MemoryDocument, focus: bool) -> MemoryDocument:
        if focus:
            self._documents.append(document)
        else:
            # Opened in the background: behind everything ever focused.
            self._documents.insert(0, document)
        self._emit(DOCUMENT_OPENED, document)
        if focus:
            self._emit(FOCUS_CHANGE, self.documents())
        return document

    def create(
        self,
        name: str,
        text: str = "",
        *,
        path: Path | None = None,
        mode: str | None = None,
        bookmarkable: bool = True,
        focus: bool = True,
    ) -> MemoryDocument:
        """Create a document directly from text (scratch buffers, tests)."""
        resolved = path.resolve() if path is not None else None
        if mode is None:
            mode = syntax_mode_for(resolved.name, text) if resolved is not None else TEXT_MODE
        document = MemoryDocument(
            self._unique_name(name),
            text,
            path=resolved,
            mode=mode,
            bookmarkable=bookmarkable,
        )
        return self._add_document(document, focus)

    def open_path(self, path: Path, *, focus: bool = False) -> MemoryDocument:
        """Return the open document for ``path``, reading the file when needed."""
        existing = self.find_path(path)
        if existing is not None:
            if focus:
                self.focus(existing)
            return existing
        resolved = path.resolve()
        text = read_text(resolved)
        document = MemoryDocument(
            self._unique_name(resolved.name),
            text,
            path=resolved,
            mode=syntax_mode_for(resolved.name, text),
        )
        logger.debug("opened %s", resolved)
        return self._add_document(document, focus)

    def focus(self, document: MemoryDocument) -> None:
        if not document.is_alive() or document not in self._documents:
            raise ValueError(f"document is not open: {document.name!r}")
        if self.current_document() is document:
            return
        self._documents.remove(document)
        self._documents.append(document)
        self._emit(FOCUS_CHANGE, self.documents())

    def goto(self, document: MemoryDocument, offset: int) -> None:
        document.point = offset

    def close(self, document: MemoryDocument) -> None:
        if document not in self._documents:
            return
        was_current = self.current_document() is document
        self._emit(DOCUMENT_CLOSED, document)
        self._documents.remove(document)
        document.kill()
        if was_current:
            self._emit(FOCUS_CHANGE, self.documents())

    def flash(self, document: MemoryDocument, offset: int) -> None:
        """Record a jump highlight request; a real UI would pulse the line."""
        self.flashes.append((document, offset))
