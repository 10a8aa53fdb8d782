"""Position references: live host handles and swapped-out snapshots.

A reference is always exactly one of the two forms. Live references wrap a
host handle that tracks edits; swapped references are immutable snapshots
taken when the document closed and can only turn back into live ones when
the same path is reopened.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from ..host.base import Document, LiveHandle


@dataclass(frozen=True, eq=False)
class LivePosition:
    """Non-owning reference to an offset inside an open host document."""

    handle: LiveHandle

    def resolve(self) -> tuple[Document, int]:
        return self.handle.resolve()

    def is_valid(self) -> bool:
        return self.handle.is_valid()

    @property
    def document(self) -> Document:
        return self.handle.resolve()[0]

    @property
    def offset(self) -> int:
        return self.handle.resolve()[1]

    def points_into(self, document: Document) -> bool:
        return self.document is document

    def same_place(self, other: LivePosition) -> bool:
        """Return whether both references currently resolve to one position."""
        document, offset = self.resolve()
        other_document, other_offset = other.resolve()
        return document is other_document and offset == other_offset


@dataclass(frozen=True)
class SwappedPosition:
    """Snapshot of a live position whose document has been closed."""

    path: Path
    offset: int
    mode: str
    context: str
    line: int = 1


PositionRef = Union[LivePosition, SwappedPosition]


def live_at(host, document: Document, offset: int | None = None) -> LivePosition:
    """Create a live reference at ``offset`` (default: the document's point)."""
    if offset is None:
        offset = document.point
    return LivePosition(host.make_handle(document, offset))
