"""The three mark stores: manual, automatic, and back.

Stores are plain ordered containers. Policy (who may add what, when the auto
store is rebuilt) lives in :mod:`binky.registry.registry`.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from ..host.base import Document
from .position import LivePosition, PositionRef


class ManualStore:
    """User-curated ``mark -> position`` mapping in insertion order."""

    def __init__(self) -> None:
        self._entries: dict[str, PositionRef] = {}

    def __contains__(self, mark: object) -> bool:
        return mark in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, mark: str) -> PositionRef | None:
        return self._entries.get(mark)

    def items(self) -> list[tuple[str, PositionRef]]:
        return list(self._entries.items())

    def as_mapping(self) -> Mapping[str, PositionRef]:
        return MappingProxyType(self._entries)

    def put(self, mark: str, position: PositionRef) -> None:
        """Insert ``mark``; an overwritten mark moves to the end."""
        self._entries.pop(mark, None)
        self._entries[mark] = position

    def replace(self, mark: str, position: PositionRef) -> None:
        """Swap the representation of an existing entry, keeping its slot."""
        if mark not in self._entries:
            raise KeyError(mark)
        self._entries[mark] = position

    def remove(self, mark: str) -> PositionRef:
        return self._entries.pop(mark)

    def find_live(self, position: LivePosition) -> str | None:
        """Return the mark whose live reference resolves to the same place."""
        for mark, existing in self._entries.items():
            if isinstance(existing, LivePosition) and existing.is_valid() and existing.same_place(position):
                return mark
        return None

    def live_documents(self) -> list[Document]:
        """Return documents referenced by live entries, identity-deduplicated."""
        seen: list[Document] = []
        for existing in self._entries.values():
            if isinstance(existing, LivePosition) and existing.is_valid():
                document = existing.document
                if not any(document is known for known in seen):
                    seen.append(document)
        return seen


class AutoStore:
    """Policy-ranked ``mark -> live position`` mapping.

    Never edited in place: each recompute builds a new dict and swaps it in,
    so readers always see either the old or the new mapping in full.
    """

    def __init__(self) -> None:
        self._entries: dict[str, LivePosition] = {}

    def __contains__(self, mark: object) -> bool:
        return mark in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, mark: str) -> LivePosition | None:
        return self._entries.get(mark)

    def items(self) -> list[tuple[str, LivePosition]]:
        return list(self._entries.items())

    def as_mapping(self) -> Mapping[str, LivePosition]:
        return MappingProxyType(self._entries)

    def replace_all(self, entries: dict[str, LivePosition]) -> None:
        self._entries = entries

    def discard_document(self, document: Document) -> None:
        """Drop entries pointing into ``document`` (one atomic replacement)."""
        self.replace_all(
            {mark: position for mark, position in self._entries.items() if position.document is not document}
        )


class BackStore:
    """Single optional entry recording the position before the last jump."""

    def __init__(self) -> None:
        self._mark: str | None = None
        self._position: LivePosition | None = None

    def set(self, mark: str, position: LivePosition) -> None:
        self._mark = mark
        self._position = position

    def clear(self) -> None:
        self._mark = None
        self._position = None

    def entry(self) -> tuple[str, LivePosition] | None:
        """Return the back entry, clearing it first if its document is gone."""
        if self._mark is None or self._position is None:
            return None
        if not self._position.is_valid():
            self.clear()
            return None
        return self._mark, self._position

    def raw(self) -> tuple[str | None, LivePosition | None]:
        return self._mark, self._position

    def restore(self, saved: tuple[str | None, LivePosition | None]) -> None:
        self._mark, self._position = saved

    def __len__(self) -> int:
        return 0 if self.entry() is None else 1
