"""Typed configuration and defensive JSON loading.

The registry only reads configuration. Values come from
``BinkyConfig`` defaults, optionally overridden by a JSON object stored in
the platform config directory. Every key is validated on its own: a
malformed value is dropped with a warning and the default is kept.
Marks themselves are never written here.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, fields, replace
from pathlib import Path

from platformdirs import user_config_dir

from .registry.classify import is_mark_key
from .registry.ranking import available_policy_names

logger = logging.getLogger(__name__)

APP_NAME = "binky"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

ColumnSpec = tuple[str, int | None]

DEFAULT_PREVIEW_COLUMNS: tuple[ColumnSpec, ...] = (
    ("mark", 5),
    ("name", 15),
    ("line", 6),
    ("mode", 15),
    ("context", None),
)
PREVIEW_COLUMN_NAMES = ("mark", "name", "line", "offset", "mode", "context", "path")


@dataclass(frozen=True)
class BinkyConfig:
    """Read-only settings consumed by the registry, preview, and read loop."""

    back_mark: str | None = ","
    auto_marks: tuple[str, ...] = ("1", "2", "3", "4", "5")
    auto_policy: str = "recency"
    auto_exclude_regexps: tuple[str, ...] = (r"^\*", r"^ ")
    auto_include_regexps: tuple[str, ...] = (r"^\*scratch\*$",)
    auto_exclude_modes: tuple[str, ...] = ()
    auto_exclude_predicates: tuple[Callable[[object], bool], ...] = ()
    overwrite: bool = False
    preview_columns: tuple[ColumnSpec, ...] = DEFAULT_PREVIEW_COLUMNS
    preview_ellipsis: str = ".."
    preview_header: bool = True
    preview_auto_first: bool = True
    preview_delay: float = 0.5
    frequency_interval: float = 1.0
    highlight: bool = True
    quit_keys: tuple[str, ...] = ("ESC", "CTRL_G", "CTRL_C")
    help_keys: tuple[str, ...] = ("?",)

    @property
    def auto_alphabet(self) -> tuple[str, ...]:
        """Auto marks usable this session: configured order, back mark removed."""
        out: list[str] = []
        for key in self.auto_marks:
            if key == self.back_mark or key in out:
                continue
            out.append(key)
        return tuple(out)


def load_config(path: Path | None = None) -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    config_path = CONFIG_PATH if path is None else path
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object], path: Path | None = None) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored; configuration is
    never critical to keeping marks working.
    """
    config_path = CONFIG_PATH if path is None else path
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write %s: %s", config_path, exc)


def _coerce_optional_key(value: object) -> str | None:
    if value is None or value == "":
        return None
    if isinstance(value, str) and is_mark_key(value):
        return value
    raise ValueError("expected a single printable character or null")


def _coerce_keys(value: object) -> tuple[str, ...]:
    """Accept a list of single characters or a string of them (``"12345"``)."""
    if isinstance(value, str):
        value = list(value)
    if not isinstance(value, list) or not all(isinstance(key, str) and is_mark_key(key) for key in value):
        raise ValueError("expected a list of single printable characters")
    return tuple(value)


def _coerce_tokens(value: object) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(token, str) and token for token in value):
        raise ValueError("expected a list of non-empty strings")
    return tuple(value)


def _coerce_regexps(value: object) -> tuple[str, ...]:
    patterns = _coerce_tokens(value)
    for pattern in patterns:
        re.compile(pattern)
    return patterns


def _coerce_bool(value: object) -> bool:
    if not isinstance(value, bool):
        raise ValueError("expected true or false")
    return value


def _coerce_seconds(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("expected a number of seconds")
    return float(value)


def _coerce_positive_seconds(value: object) -> float:
    seconds = _coerce_seconds(value)
    if seconds <= 0:
        raise ValueError("expected a positive number of seconds")
    return seconds


def _coerce_policy(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("expected a policy name")
    name = value.strip()
    if name not in available_policy_names():
        raise ValueError(f"unknown policy {name!r} (choose from {', '.join(available_policy_names())})")
    return name


def _coerce_ellipsis(value: object) -> str:
    if not isinstance(value, str):
        raise ValueError("expected a string")
    return value


def coerce_columns(value: object) -> tuple[ColumnSpec, ...]:
    """Validate ``[[name, width], ...]``; only the last width may be null."""
    if not isinstance(value, list) or not value:
        raise ValueError("expected a non-empty list of [name, width] pairs")
    columns: list[ColumnSpec] = []
    for index, item in enumerate(value):
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            raise ValueError("expected [name, width] pairs")
        name, width = item
        if name not in PREVIEW_COLUMN_NAMES:
            raise ValueError(f"unknown preview column {name!r}")
        if width is None:
            if index != len(value) - 1:
                raise ValueError("only the last column may have no width")
        elif isinstance(width, bool) or not isinstance(width, int) or width <= 0:
            raise ValueError(f"invalid width for column {name!r}")
        columns.append((name, width))
    return tuple(columns)


_COERCERS: dict[str, Callable[[object], object]] = {
    "back_mark": _coerce_optional_key,
    "auto_marks": _coerce_keys,
    "auto_policy": _coerce_policy,
    "auto_exclude_regexps": _coerce_regexps,
    "auto_include_regexps": _coerce_regexps,
    "auto_exclude_modes": _coerce_tokens,
    "overwrite": _coerce_bool,
    "preview_columns": coerce_columns,
    "preview_ellipsis": _coerce_ellipsis,
    "preview_header": _coerce_bool,
    "preview_auto_first": _coerce_bool,
    "preview_delay": _coerce_seconds,
    "frequency_interval": _coerce_positive_seconds,
    "highlight": _coerce_bool,
    "quit_keys": _coerce_tokens,
    "help_keys": _coerce_tokens,
}


def config_from_mapping(data: dict[str, object], base: BinkyConfig | None = None) -> BinkyConfig:
    """Overlay validated ``data`` onto ``base`` (defaults when omitted)."""
    known = {field.name for field in fields(BinkyConfig)}
    overrides: dict[str, object] = {}
    for key, raw in data.items():
        coerce = _COERCERS.get(key)
        if coerce is None:
            if key not in known:
                logger.warning("ignoring unknown config key %r", key)
            continue
        try:
            overrides[key] = coerce(raw)
        except (ValueError, re.error) as exc:
            logger.warning("ignoring config key %r: %s", key, exc)
    return replace(base or BinkyConfig(), **overrides)


def config_to_mapping(config: BinkyConfig) -> dict[str, object]:
    """Serialize the JSON-representable settings (predicates are skipped)."""
    data: dict[str, object] = {}
    for key in _COERCERS:
        value = getattr(config, key)
        if key == "preview_columns":
            value = [[name, width] for name, width in value]
        elif isinstance(value, tuple):
            value = list(value)
        data[key] = value
    return data


def load_binky_config(path: Path | None = None) -> BinkyConfig:
    """Load :class:`BinkyConfig` from ``path`` (default: the platform config file)."""
    return config_from_mapping(load_config(path))
