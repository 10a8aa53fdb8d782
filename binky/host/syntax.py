"""Document loading and syntax-mode detection.

Syntax modes are Pygments lexer names, resolved from the file name first and
the text second. Lookups are cached per file suffix because lexer discovery
scans every installed plugin.
"""

from __future__ import annotations

import re
from pathlib import Path

from pygments.lexers import get_lexer_for_filename, guess_lexer
from pygments.util import ClassNotFound

TEXT_MODE = "Text only"

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_MODE_BY_SUFFIX: dict[str, str] = {}


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1; as a final fallback decodes
    raw bytes with UTF-8 replacement semantics.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def sanitize_context_line(line: str) -> str:
    """Escape terminal control bytes so a context line is safe to print.

    Tabs become single spaces; every other control byte, ``\\r`` included,
    is shown as a ``\\xNN`` escape.
    """
    if _CONTROL_RE.search(line) is None:
        return line
    out: list[str] = []
    for ch in line:
        code = ord(ch)
        if ch == "\t":
            out.append(" ")
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def syntax_mode_for(name: str, text: str = "") -> str:
    """Return the Pygments lexer name for a document, ``TEXT_MODE`` when unknown."""
    suffix = Path(name).suffix.lower()
    if suffix and suffix in _MODE_BY_SUFFIX:
        return _MODE_BY_SUFFIX[suffix]

    try:
        mode = get_lexer_for_filename(name, text).name
    except ClassNotFound:
        mode = None

    if mode is None:
        # Extensionless scripts still carry shebangs/modelines worth sniffing.
        if suffix or not text.strip():
            return TEXT_MODE
        try:
            return guess_lexer(text).name
        except ClassNotFound:
            return TEXT_MODE

    if suffix:
        _MODE_BY_SUFFIX[suffix] = mode
    return mode
