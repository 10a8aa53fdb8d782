"""ANSI presentation of preview rows."""

from __future__ import annotations

from collections.abc import Sequence

from ..ui_theme import PLAIN_THEME, UITheme
from .builder import PreviewRow
from .columns import COLUMN_SEPARATOR


def _styled_mark_cell(cell: str, row: PreviewRow, theme: UITheme) -> str:
    """Color each visible mark key with its own style; padding stays plain."""
    out: list[str] = []
    visible = cell.rstrip(" ")
    for index, ch in enumerate(visible):
        if index < len(row.labels) and ch == row.labels[index].key:
            color = theme.mark_color(row.labels[index].style)
            out.append(f"{color}{ch}{theme.reset}" if color else ch)
        else:
            out.append(ch)
    out.append(cell[len(visible):])
    return "".join(out)


def render_row(row: PreviewRow, theme: UITheme = PLAIN_THEME) -> str:
    """Return the row with ANSI styling applied, newline-terminated."""
    if row.is_header:
        body = row.text[:-1]
        if theme.preview_header:
            body = f"{theme.preview_header}{body}{theme.reset}"
        return body + "\n"
    cells = [
        _styled_mark_cell(cell, row, theme) if column == "mark" else cell
        for column, cell in zip(row.columns, row.cells)
    ]
    return COLUMN_SEPARATOR.join(cells) + "\n"


def render_rows(rows: Sequence[PreviewRow], theme: UITheme = PLAIN_THEME) -> str:
    return "".join(render_row(row, theme) for row in rows)
