"""User-facing mark commands.

Each command reads a mark through the prompt, calls the registry, and turns
any :class:`~binky.errors.MarkError` into a message. Commands return whether
they succeeded so key bindings can decide whether to redraw.
"""

from __future__ import annotations

from collections.abc import Callable

from .errors import MarkError
from .input.read_mark import MarkReaderCallbacks, preview_session, read_mark
from .registry.registry import MarkRegistry


class MarkCommands:
    """Prompted add/delete/jump/view operations over one registry."""

    def __init__(
        self,
        registry: MarkRegistry,
        callbacks: MarkReaderCallbacks,
        scheduler=None,
    ) -> None:
        self.registry = registry
        self.callbacks = callbacks
        self.scheduler = scheduler

    def _run(self, prompt: str, action: Callable[[str], str], *, preview_delay: float | None = None) -> bool:
        try:
            mark = read_mark(prompt, self.registry, self.callbacks, self.scheduler, preview_delay=preview_delay)
            if mark is None:
                self.callbacks.report("Quit")
                return False
            self.callbacks.report(action(mark))
            return True
        except MarkError as error:
            self.callbacks.report(error.message)
            return False

    def add(self) -> bool:
        def action(mark: str) -> str:
            self.registry.add(mark)
            return f"Mark {mark} added"

        return self._run("Mark add: ", action)

    def delete(self) -> bool:
        def action(mark: str) -> str:
            self.registry.delete(mark)
            return f"Mark {mark} deleted"

        return self._run("Mark delete: ", action)

    def jump(self) -> bool:
        def action(mark: str) -> str:
            document, offset = self.registry.jump(mark)
            return f"Jumped to {document.name}:{document.line_number_at(offset)}"

        return self._run("Mark jump: ", action)

    def view(self) -> bool:
        """Show the preview until any key is pressed."""
        with preview_session(self.registry, self.callbacks, self.scheduler, delay=0):
            while self.callbacks.read_key(None) == "":
                continue
        return True
