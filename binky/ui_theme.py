"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the preview: one color per mark style plus the
header row. Presentation only; nothing here affects registry state.
"""

from __future__ import annotations

from dataclasses import dataclass

from .preview.builder import MarkStyle


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the preview renderer."""

    name: str
    reset: str
    preview_header: str
    mark_auto: str
    mark_back: str
    mark_manual: str
    mark_stale: str
    prompt: str

    def mark_color(self, style: MarkStyle) -> str:
        if style is MarkStyle.AUTO:
            return self.mark_auto
        if style is MarkStyle.BACK:
            return self.mark_back
        if style is MarkStyle.STALE:
            return self.mark_stale
        return self.mark_manual


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    preview_header="\033[1;4;38;5;81m",
    mark_auto="\033[1;38;5;42m",
    mark_back="\033[1;38;5;214m",
    mark_manual="\033[1;38;5;229m",
    mark_stale="\033[9;2;38;5;250m",
    prompt="\033[1;38;5;45m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    preview_header="\033[1;4;38;5;45m",
    mark_auto="\033[1;38;5;84m",
    mark_back="\033[1;38;5;215m",
    mark_manual="\033[1;38;5;153m",
    mark_stale="\033[9;2;38;5;110m",
    prompt="\033[1;38;5;39m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    preview_header="",
    mark_auto="",
    mark_back="",
    mark_manual="",
    mark_stale="",
    prompt="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return theme names accepted by ``--theme``."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Map user input to a known theme name; unknown names mean the default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return the palette for the preview, or the plain one when color is off."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
