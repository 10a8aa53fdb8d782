"""Command-line front door for binky.

Opens files into an in-memory host (in the order given, so the last one is
current), records any ``--mark`` bookmarks, and prints the mark preview.
``--interactive`` then prompts for one mark in raw terminal mode and jumps
to it.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from .commands import MarkCommands
from .config import CONFIG_PATH, config_to_mapping, load_binky_config, save_config
from .errors import MarkError
from .host.memory import MemoryHost
from .host.scheduler import CooperativeScheduler
from .input.keys import read_key
from .input.read_mark import MarkReaderCallbacks
from .preview.rendering import render_rows
from .registry.position import live_at
from .registry.ranking import available_policy_names
from .registry.registry import MarkRegistry
from .ui_theme import available_theme_names, resolve_theme


def _mark_spec(value: str) -> tuple[str, Path, int]:
    """argparse type for ``KEY=PATH[:LINE]``."""
    key, sep, target = value.partition("=")
    if not sep or not key or not target:
        raise argparse.ArgumentTypeError(f"expected KEY=PATH[:LINE], got {value!r}")
    path_text, _, line_text = target.rpartition(":")
    if path_text and line_text.isdigit():
        return key, Path(path_text), max(1, int(line_text))
    return key, Path(target), 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Bookmark positions in files and preview manual, automatic, and back marks."
    )
    parser.add_argument("paths", nargs="*", help="Files to open, least recently used first.")
    parser.add_argument(
        "--mark",
        action="append",
        type=_mark_spec,
        default=[],
        metavar="KEY=PATH[:LINE]",
        help="Add a manual mark (repeatable).",
    )
    parser.add_argument("--policy", choices=available_policy_names(), help="Auto-mark ranking policy.")
    parser.add_argument("--config", type=Path, default=None, help=f"Config file (default: {CONFIG_PATH}).")
    parser.add_argument("--init-config", action="store_true", help="Write the effective config and exit.")
    parser.add_argument("--no-header", action="store_true", help="Omit the preview header row.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--interactive", action="store_true", help="Prompt for a mark and jump to it.")
    parser.add_argument("--verbose", action="store_true", help="Log registry activity to stderr.")
    return parser


def _open_documents(host: MemoryHost, paths: list[str]) -> None:
    for raw in paths:
        path = Path(raw)
        if not path.is_file():
            raise SystemExit(f"Path not found: {path}")
        host.open_path(path, focus=True)


def _add_marks(host: MemoryHost, registry: MarkRegistry, specs: list[tuple[str, Path, int]]) -> None:
    for key, path, line in specs:
        if not path.is_file():
            raise SystemExit(f"Path not found: {path}")
        document = host.open_path(path, focus=host.current_document() is None)
        position = live_at(host, document, document.offset_of_line(line))
        try:
            registry.add(key, position)
        except MarkError as error:
            raise SystemExit(error.message) from error


def _run_interactive(registry: MarkRegistry, scheduler: CooperativeScheduler, theme) -> None:
    from .terminal import TerminalController

    if not sys.stdin.isatty():
        raise SystemExit("--interactive needs a terminal on stdin.")
    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno(), theme)
    callbacks = MarkReaderCallbacks(
        read_key=lambda timeout_ms: read_key(stdin_fd, timeout_ms),
        show_preview=terminal.show_preview,
        hide_preview=terminal.hide_preview,
        report=terminal.report,
    )
    with terminal.raw_mode():
        MarkCommands(registry, callbacks, scheduler).jump()
    sys.stdout.write("\n")


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments, build a registry over the given files, and print its preview."""
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s", stream=sys.stderr)

    config = load_binky_config(args.config)
    if args.policy is not None:
        config = dataclasses.replace(config, auto_policy=args.policy)
    if args.no_header:
        config = dataclasses.replace(config, preview_header=False)

    if args.init_config:
        target = args.config or CONFIG_PATH
        save_config(config_to_mapping(config), target)
        sys.stdout.write(f"{target}\n")
        return

    theme = resolve_theme(args.theme, no_color=args.no_color or not sys.stdout.isatty())
    host = MemoryHost()
    scheduler = CooperativeScheduler()
    registry = MarkRegistry(host, config, scheduler=scheduler)
    with registry:
        _open_documents(host, args.paths)
        _add_marks(host, registry, args.mark)
        sys.stdout.write(render_rows(registry.build_preview(), theme))
        if args.interactive:
            _run_interactive(registry, scheduler, theme)


if __name__ == "__main__":
    main()
