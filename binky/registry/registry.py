"""Mark registry: one object owning the manual, auto, and back stores.

``start()`` subscribes to host lifecycle events and starts the frequency
timer; ``stop()`` undoes both. All mutations run synchronously inside host
callbacks or command calls. A command that raises leaves every store as it
was before the call.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..config import BinkyConfig
from ..errors import DisallowedContext, MarkExists, NotFound, NotManualMark, PositionDuplicate
from ..host.base import DOCUMENT_CLOSED, DOCUMENT_OPENED, FOCUS_CHANGE, Document
from ..host.scheduler import TimerHandle
from ..preview.builder import PreviewRow, build_preview
from .auto import compute_auto_marks
from .classify import MarkCategory, classify_mark
from .position import LivePosition, PositionRef, SwappedPosition, live_at
from .ranking import FrequencyCounter, make_policy
from .stores import AutoStore, BackStore, ManualStore
from .swap import swap_in, swap_out

logger = logging.getLogger(__name__)


class MarkRegistry:
    """Unified mark namespace over the manual, auto, and back stores."""

    def __init__(
        self,
        host,
        config: BinkyConfig | None = None,
        *,
        scheduler=None,
        highlight: Callable[[Document, int], None] | None = None,
    ) -> None:
        self.host = host
        self.config = config or BinkyConfig()
        self.scheduler = scheduler
        self.highlight = highlight if highlight is not None else getattr(host, "flash", None)
        self.manual = ManualStore()
        self.auto = AutoStore()
        self.back = BackStore()
        self.counter = FrequencyCounter()
        self.policy = make_policy(self.config.auto_policy, self.counter)
        self._idle_timer: TimerHandle | None = None
        self._started = False

    # Lifecycle wiring.

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> MarkRegistry:
        if self._started:
            return self
        self.host.add_listener(FOCUS_CHANGE, self.on_focus_change)
        self.host.add_listener(DOCUMENT_CLOSED, self.on_document_closed)
        self.host.add_listener(DOCUMENT_OPENED, self.on_document_opened)
        if self.policy.uses_frequency and self.scheduler is not None:
            self._idle_timer = self.scheduler.call_every(self.config.frequency_interval, self.tick_frequency)
        self._started = True
        self.recompute_auto()
        logger.debug("registry started (policy=%s)", self.policy.name)
        return self

    def stop(self) -> None:
        if not self._started:
            return
        self.host.remove_listener(FOCUS_CHANGE, self.on_focus_change)
        self.host.remove_listener(DOCUMENT_CLOSED, self.on_document_closed)
        self.host.remove_listener(DOCUMENT_OPENED, self.on_document_opened)
        if self._idle_timer is not None:
            self._idle_timer.cancel()
            self._idle_timer = None
        self._started = False
        logger.debug("registry stopped")

    def __enter__(self) -> MarkRegistry:
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.stop()

    # Host callbacks.

    def on_focus_change(self, documents=None) -> None:
        self.recompute_auto(documents)

    def on_document_closed(self, document: Document) -> None:
        swap_out(self.manual, document)
        self.counter.forget(document)
        back = self.back.entry()
        if back is not None and back[1].points_into(document):
            self.back.clear()
        self.auto.discard_document(document)

    def on_document_opened(self, document: Document) -> None:
        swap_in(self.manual, document, self.host)

    def tick_frequency(self) -> None:
        current = self.host.current_document()
        if current is not None:
            self.counter.increment(current)

    def recompute_auto(self, documents=None) -> None:
        if documents is None:
            documents = self.host.documents()
        self.auto.replace_all(compute_auto_marks(self.host, documents, self.manual, self.config, self.policy))

    # Queries.

    def classify(self, token: str) -> MarkCategory:
        return classify_mark(
            token,
            back_mark=self.config.back_mark,
            auto_marks=self.config.auto_alphabet,
            quit_keys=self.config.quit_keys,
            help_keys=self.config.help_keys,
        )

    def lookup(self, mark: str) -> PositionRef | None:
        """Resolve ``mark`` across the union namespace."""
        back = self.back.entry()
        if back is not None and back[0] == mark:
            return back[1]
        if mark in self.auto:
            return self.auto.get(mark)
        return self.manual.get(mark)

    def marks(self) -> list[str]:
        back = self.back.entry()
        return ([back[0]] if back is not None else []) + list(self.auto) + list(self.manual)

    def __contains__(self, mark: object) -> bool:
        return isinstance(mark, str) and self.lookup(mark) is not None

    # Commands.

    def add(self, mark: str, position: LivePosition | None = None) -> tuple[str, LivePosition]:
        """Record ``position`` (default: point in the current document) as a manual mark."""
        if self.classify(mark) is not MarkCategory.MANUAL:
            raise NotManualMark(f"{mark!r} is not a manual mark")
        current = self.host.current_document()
        if current is None or not current.bookmarkable:
            raise DisallowedContext("Marks are not allowed in this document")
        if mark in self and not self.config.overwrite:
            raise MarkExists(f"Mark {mark} exists")
        if position is None:
            position = live_at(self.host, current)
        duplicate = self.manual.find_live(position)
        if duplicate is not None:
            raise PositionDuplicate(f"Position already marked by {duplicate}")
        self.manual.put(mark, position)
        # The document now carries a manual mark, so it loses its auto mark.
        self.recompute_auto()
        logger.debug("added mark %r", mark)
        return mark, position

    def delete(self, mark: str) -> None:
        if self.classify(mark) is not MarkCategory.MANUAL or mark not in self.manual:
            raise NotFound(f"No manual mark {mark}")
        self.manual.remove(mark)
        self.recompute_auto()
        logger.debug("deleted mark %r", mark)

    def jump(self, mark: str) -> tuple[Document, int]:
        """Move to ``mark``, recording the pre-jump position as the back mark."""
        target = self.lookup(mark)
        if target is None:
            raise NotFound(f"No mark {mark}")
        if isinstance(target, LivePosition) and not target.is_valid():
            raise NotFound(f"Mark {mark} points into a closed document")

        saved_back = self.back.raw()
        self._capture_back()
        try:
            document, offset = self._navigate(target)
        except OSError as exc:
            self.back.restore(saved_back)
            raise NotFound(f"Cannot open {target.path}: {exc.strerror or exc}") from exc

        if self.config.highlight and self.highlight is not None:
            self.highlight(document, offset)
        logger.debug("jumped to %r (%s:%d)", mark, document.name, offset)
        return document, offset

    def _capture_back(self) -> None:
        current = self.host.current_document()
        if self.config.back_mark and current is not None:
            self.back.set(self.config.back_mark, live_at(self.host, current))
        else:
            self.back.clear()

    def _navigate(self, target: PositionRef) -> tuple[Document, int]:
        if isinstance(target, SwappedPosition):
            # Opening fires document-opened, which swaps the entry back in.
            document = self.host.open_path(target.path)
            offset = target.offset
        else:
            document, offset = target.resolve()
        self.host.focus(document)
        self.host.goto(document, offset)
        return document, offset

    def build_preview(self) -> list[PreviewRow]:
        return build_preview(
            self.manual.as_mapping(),
            self.auto.as_mapping(),
            self.back.entry(),
            self.config.preview_auto_first,
            columns=self.config.preview_columns,
            ellipsis=self.config.preview_ellipsis,
            header=self.config.preview_header,
        )
