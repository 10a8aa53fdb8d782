"""Terminal control helpers for the interactive mark prompt.

Owns raw-mode lifecycle and an inline preview area drawn below the prompt
line. The preview is erased in place, so the prompt never leaves the
normal screen buffer.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty
from collections.abc import Sequence

from .preview.builder import PreviewRow
from .preview.rendering import render_row
from .ui_theme import PLAIN_THEME, UITheme


class TerminalController:
    """Manage raw mode and draw/erase the inline preview."""

    def __init__(self, stdin_fd: int, stdout_fd: int, theme: UITheme = PLAIN_THEME) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self.theme = theme
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self._preview_lines = 0

    def _write(self, text: str) -> None:
        os.write(self.stdout_fd, text.encode("utf-8"))

    def enable_raw_mode(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        # Hide cursor while waiting for a single key.
        self._write("\x1b[?25l")

    def disable_raw_mode(self) -> None:
        self._write("\x1b[?25h")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with raw enter/exit calls."""
        try:
            self.enable_raw_mode()
            yield
        finally:
            self.disable_raw_mode()

    def report(self, message: str) -> None:
        """Replace the current line with ``message``."""
        styled = f"{self.theme.prompt}{message}{self.theme.reset}" if self.theme.prompt else message
        self._write(f"\r\x1b[2K{styled}")

    def show_preview(self, rows: Sequence[PreviewRow]) -> None:
        self.hide_preview()
        if not rows:
            return
        # Raw mode disables newline translation; emit explicit CR LF.
        body = "".join("\r\n" + render_row(row, self.theme).rstrip("\n") for row in rows)
        self._write("\x1b7" + body + "\x1b8")
        self._preview_lines = len(rows)

    def hide_preview(self) -> None:
        if not self._preview_lines:
            return
        # Clear everything below the prompt line, then return to it.
        self._write("\x1b7\r\n\x1b[J\x1b8")
        self._preview_lines = 0
