"""Public package surface for binky.

Exports ``main`` for programmatic CLI invocation and ``MarkRegistry`` for
embedding the mark engine in a host editor.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


def __getattr__(name: str):
    if name == "MarkRegistry":
        from .registry.registry import MarkRegistry

        return MarkRegistry
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["main", "MarkRegistry"]
