"""Fixed-width column formatting for preview rows.

Pure string functions; styling is attached separately by the renderer.
"""

from __future__ import annotations

from collections.abc import Sequence

COLUMN_SEPARATOR = "  "


def column_width(name: str, width: int | None) -> int | None:
    """Return the effective width of a column.

    A configured width narrower than the column's own label is widened to fit
    the label, so the header never gets truncated.
    """
    if width is None:
        return None
    return max(width, len(name))


def format_column(value: str, width: int | None, ellipsis: str) -> str:
    """Render ``value`` into exactly ``width`` characters.

    Overlong values keep ``width - len(ellipsis)`` characters followed by the
    ellipsis; when the ellipsis itself does not fit it is cut to ``width``.
    ``width=None`` leaves the value untouched.
    """
    if width is None:
        return value
    if len(value) > width:
        keep = max(0, width - len(ellipsis))
        value = (value[:keep] + ellipsis)[:width]
    return value.ljust(width)


def format_cells(
    values: Sequence[str],
    columns: Sequence[tuple[str, int | None]],
    ellipsis: str,
) -> tuple[str, ...]:
    """Format one value per column; only the last column may be unbounded."""
    if len(values) != len(columns):
        raise ValueError("expected one value per column")
    cells: list[str] = []
    for index, (value, (name, width)) in enumerate(zip(values, columns)):
        if width is None and index != len(columns) - 1:
            raise ValueError(f"column {name!r} needs a width unless it is last")
        cells.append(format_column(value, column_width(name, width), ellipsis))
    return tuple(cells)


def join_cells(cells: Sequence[str]) -> str:
    return COLUMN_SEPARATOR.join(cells) + "\n"
