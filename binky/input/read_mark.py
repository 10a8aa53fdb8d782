"""Blocking single-key mark prompt with a delayed preview.

The prompt owns two resources: the pending preview timer and the preview
window. ``preview_session`` guarantees both are released on every exit path,
whether a mark was read, the user quit, or an error escaped.
"""

from __future__ import annotations

import contextlib
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from ..errors import InvalidToken
from ..host.scheduler import TimerHandle
from ..preview.builder import PreviewRow
from ..registry.classify import STORED_CATEGORIES, MarkCategory

POLL_INTERVAL_MS = 50


@dataclass(frozen=True)
class MarkReaderCallbacks:
    """Injected UI operations used by ``read_mark``."""

    read_key: Callable[[int | None], str]
    show_preview: Callable[[list[PreviewRow]], None]
    hide_preview: Callable[[], None]
    report: Callable[[str], None]


class PreviewSession:
    """Preview visibility for one prompt."""

    def __init__(self, registry, callbacks: MarkReaderCallbacks) -> None:
        self.registry = registry
        self.callbacks = callbacks
        self.shown = False
        self.timer: TimerHandle | None = None

    def show_now(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None
        self.callbacks.show_preview(self.registry.build_preview())
        self.shown = True

    def close(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None
        if self.shown:
            self.callbacks.hide_preview()
            self.shown = False


@contextlib.contextmanager
def preview_session(
    registry,
    callbacks: MarkReaderCallbacks,
    scheduler=None,
    *,
    delay: float | None = None,
) -> Iterator[PreviewSession]:
    """Schedule the preview after ``delay`` seconds (0: now, negative: never)."""
    if delay is None:
        delay = registry.config.preview_delay
    session = PreviewSession(registry, callbacks)
    try:
        if delay == 0:
            session.show_now()
        elif delay > 0 and scheduler is not None:
            session.timer = scheduler.call_later(delay, session.show_now)
        yield session
    finally:
        session.close()


def read_mark(
    prompt: str,
    registry,
    callbacks: MarkReaderCallbacks,
    scheduler=None,
    *,
    preview_delay: float | None = None,
    poll_ms: int = POLL_INTERVAL_MS,
) -> str | None:
    """Read one mark key; ``None`` means the user cancelled.

    Help keys show the preview immediately and keep waiting. Keys that are
    not single characters raise :class:`InvalidToken` without being used as
    a mark.
    """
    callbacks.report(prompt)
    with preview_session(registry, callbacks, scheduler, delay=preview_delay) as session:
        while True:
            key = callbacks.read_key(poll_ms)
            if key == "":
                if scheduler is not None:
                    scheduler.run_pending()
                continue
            category = registry.classify(key)
            if category is MarkCategory.QUIT:
                return None
            if category is MarkCategory.HELP:
                session.show_now()
                continue
            if category in STORED_CATEGORIES:
                return key
            raise InvalidToken("non-character input")
