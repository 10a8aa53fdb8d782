"""Move manual marks between live and swapped form across close/reopen.

Neither direction raises. Marks in a document without a backing path cannot
be recovered after close, so they are dropped on swap-out.
"""

from __future__ import annotations

import logging

from ..host.base import Document
from .position import LivePosition, SwappedPosition, live_at
from .stores import ManualStore

logger = logging.getLogger(__name__)


def snapshot(position: LivePosition) -> SwappedPosition | None:
    """Freeze a live position, or ``None`` when its document has no path."""
    document, offset = position.resolve()
    if document.path is None:
        return None
    return SwappedPosition(
        path=document.path,
        offset=offset,
        mode=document.mode,
        context=document.line_at(offset).strip(),
        line=document.line_number_at(offset),
    )


def swap_out(manual: ManualStore, document: Document) -> int:
    """Snapshot every live manual mark in a closing ``document``.

    Must run while the document text is still readable. Returns the number
    of entries touched (swapped or dropped).
    """
    touched = 0
    for mark, position in manual.items():
        if not isinstance(position, LivePosition) or not position.points_into(document):
            continue
        frozen = snapshot(position)
        if frozen is None:
            manual.remove(mark)
            logger.debug("dropped mark %r: %s has no path", mark, document.name)
        else:
            manual.replace(mark, frozen)
            logger.debug("swapped out mark %r -> %s:%d", mark, frozen.path, frozen.offset)
        touched += 1
    return touched


def swap_in(manual: ManualStore, document: Document, host) -> int:
    """Turn swapped manual marks for the reopened ``document`` path back into live ones."""
    if document.path is None:
        return 0
    touched = 0
    for mark, position in manual.items():
        if not isinstance(position, SwappedPosition) or position.path != document.path:
            continue
        manual.replace(mark, live_at(host, document, position.offset))
        logger.debug("swapped in mark %r at %s:%d", mark, document.name, position.offset)
        touched += 1
    return touched
