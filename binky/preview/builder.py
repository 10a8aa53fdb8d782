"""Merge the three mark stores into column-aligned preview rows.

Pipeline: order entries (back first, then auto/manual in configured order),
resolve each to a display snapshot, fold the back mark into any entry at the
same position, then format every snapshot into fixed-width cells.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path

from ..config import DEFAULT_PREVIEW_COLUMNS, ColumnSpec
from ..host.base import Document
from ..host.syntax import sanitize_context_line
from ..registry.position import LivePosition, PositionRef, SwappedPosition
from .columns import format_cells, join_cells


class MarkStyle(Enum):
    AUTO = "auto"
    BACK = "back"
    MANUAL = "manual"
    STALE = "stale"


@dataclass(frozen=True)
class MarkLabel:
    key: str
    style: MarkStyle


@dataclass(frozen=True)
class PreviewEntry:
    """Display snapshot of one mark (or a back mark merged into one)."""

    labels: tuple[MarkLabel, ...]
    name: str
    offset: int
    mode: str
    context: str
    line: int | None = None
    path: Path | None = None
    # Open document for live entries; swapped entries have none.
    document: Document | None = dataclasses.field(default=None, compare=False, repr=False)

    @property
    def stale(self) -> bool:
        return any(label.style is MarkStyle.STALE for label in self.labels)

    def same_position(self, other: PreviewEntry) -> bool:
        """Live entries match by document identity, swapped entries by path."""
        if self.offset != other.offset:
            return False
        if self.document is not None or other.document is not None:
            return self.document is other.document
        return self.path is not None and self.path == other.path

    def field(self, column: str) -> str:
        if column == "mark":
            return "".join(label.key for label in self.labels)
        if column == "line":
            return "" if self.line is None else str(self.line)
        if column == "offset":
            return str(self.offset)
        if column == "path":
            return "" if self.path is None else str(self.path)
        return str(getattr(self, column, ""))


@dataclass(frozen=True)
class PreviewRow:
    """One formatted line; ``entry`` is ``None`` for the header row."""

    columns: tuple[str, ...]
    cells: tuple[str, ...]
    entry: PreviewEntry | None = None

    @property
    def is_header(self) -> bool:
        return self.entry is None

    @property
    def labels(self) -> tuple[MarkLabel, ...]:
        return () if self.entry is None else self.entry.labels

    @property
    def text(self) -> str:
        return join_cells(self.cells)


def ordered_entries(
    manual: Mapping[str, PositionRef],
    auto: Mapping[str, LivePosition],
    back: tuple[str, LivePosition] | None,
    auto_first: bool,
) -> list[tuple[str, PositionRef, MarkStyle]]:
    """Concatenate back + auto + manual (or back + manual + auto)."""
    out: list[tuple[str, PositionRef, MarkStyle]] = []
    if back is not None:
        out.append((back[0], back[1], MarkStyle.BACK))
    auto_part = [(mark, position, MarkStyle.AUTO) for mark, position in auto.items()]
    manual_part = [(mark, position, MarkStyle.MANUAL) for mark, position in manual.items()]
    out.extend(auto_part + manual_part if auto_first else manual_part + auto_part)
    return out


def resolve_entry(mark: str, position: PositionRef, style: MarkStyle) -> PreviewEntry:
    """Snapshot a stored position for display.

    Live positions whose document is gone are kept but tagged stale; they
    are never offered as jump targets.
    """
    if isinstance(position, SwappedPosition):
        return PreviewEntry(
            labels=(MarkLabel(mark, style),),
            name=position.path.name,
            offset=position.offset,
            mode=position.mode,
            context=sanitize_context_line(position.context),
            line=position.line,
            path=position.path,
        )

    document, offset = position.resolve()
    if not position.is_valid():
        return PreviewEntry(
            labels=(MarkLabel(mark, MarkStyle.STALE),),
            name=document.name,
            offset=offset,
            mode=document.mode,
            context="",
            path=document.path,
            document=document,
        )
    return PreviewEntry(
        labels=(MarkLabel(mark, style),),
        name=document.name,
        offset=offset,
        mode=document.mode,
        context=sanitize_context_line(document.line_at(offset).strip()),
        line=document.line_number_at(offset),
        path=document.path,
        document=document,
    )


def merge_back_entry(entries: Sequence[PreviewEntry]) -> list[PreviewEntry]:
    """Fold the back entry into the first other entry at the same position."""
    back_index = next(
        (index for index, entry in enumerate(entries) if any(label.style is MarkStyle.BACK for label in entry.labels)),
        None,
    )
    if back_index is None:
        return list(entries)
    back = entries[back_index]
    for index, entry in enumerate(entries):
        if index == back_index or entry.stale or not entry.same_position(back):
            continue
        merged = list(entries)
        merged[index] = replace(entry, labels=entry.labels + back.labels)
        del merged[back_index]
        return merged
    return list(entries)


def build_preview_entries(
    manual: Mapping[str, PositionRef],
    auto: Mapping[str, LivePosition],
    back: tuple[str, LivePosition] | None,
    auto_first: bool = True,
) -> list[PreviewEntry]:
    resolved = [resolve_entry(mark, position, style) for mark, position, style in ordered_entries(manual, auto, back, auto_first)]
    return merge_back_entry(resolved)


def build_preview(
    manual: Mapping[str, PositionRef],
    auto: Mapping[str, LivePosition],
    back: tuple[str, LivePosition] | None,
    auto_first: bool = True,
    *,
    columns: Sequence[ColumnSpec] = DEFAULT_PREVIEW_COLUMNS,
    ellipsis: str = "..",
    header: bool = True,
) -> list[PreviewRow]:
    """Return formatted preview rows, header first when requested."""
    names = tuple(name for name, _ in columns)
    rows: list[PreviewRow] = []
    if header:
        rows.append(PreviewRow(columns=names, cells=format_cells(names, columns, ellipsis)))
    for entry in build_preview_entries(manual, auto, back, auto_first):
        values = [entry.field(name) for name in names]
        rows.append(PreviewRow(columns=names, cells=format_cells(values, columns, ellipsis), entry=entry))
    return rows
