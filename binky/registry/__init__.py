"""Mark registry and auto-tracking engine.

Submodules are imported lazily: :mod:`binky.config` depends on the
classifier, and the registry itself depends on :mod:`binky.config`.
"""

from __future__ import annotations

_EXPORTS = {
    "MarkRegistry": ".registry",
    "MarkCategory": ".classify",
    "classify_mark": ".classify",
    "LivePosition": ".position",
    "SwappedPosition": ".position",
    "register_policy": ".ranking",
}


def __getattr__(name: str):
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from importlib import import_module

    return getattr(import_module(module_name, __name__), name)


__all__ = list(_EXPORTS)
