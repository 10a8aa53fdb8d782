"""Ranking strategies that order candidate documents for auto marks.

Strategies receive candidates in host focus order (least recent first) and
return them best first. New strategies register a factory by name; nothing
else in the recompute pipeline changes.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol

from ..host.base import Document


class FrequencyCounter:
    """Per-document tick counts, incremented while the document is current."""

    def __init__(self) -> None:
        self._counts: dict[Document, int] = {}

    def increment(self, document: Document) -> int:
        count = self._counts.get(document, 0) + 1
        self._counts[document] = count
        return count

    def count(self, document: Document) -> int:
        return self._counts.get(document, 0)

    def forget(self, document: Document) -> None:
        self._counts.pop(document, None)


class RankingPolicy(Protocol):
    name: str
    uses_frequency: bool

    def rank(self, candidates: Sequence[Document]) -> list[Document]: ...


class RecencyPolicy:
    """Most recently focused first."""

    name = "recency"
    uses_frequency = False

    def __init__(self, counter: FrequencyCounter | None = None) -> None:
        pass

    def rank(self, candidates: Sequence[Document]) -> list[Document]:
        return list(reversed(candidates))


class FrequencyPolicy:
    """Highest tick count first; equal counts keep recency order."""

    name = "frequency"
    uses_frequency = True

    def __init__(self, counter: FrequencyCounter) -> None:
        self.counter = counter

    def rank(self, candidates: Sequence[Document]) -> list[Document]:
        # sorted() is stable, so ties stay most-recent-first.
        return sorted(reversed(candidates), key=lambda document: -self.counter.count(document))


PolicyFactory = Callable[[FrequencyCounter], RankingPolicy]

_POLICIES: dict[str, PolicyFactory] = {
    RecencyPolicy.name: RecencyPolicy,
    FrequencyPolicy.name: FrequencyPolicy,
}


def register_policy(name: str, factory: PolicyFactory) -> None:
    """Make a ranking strategy selectable by ``name``."""
    _POLICIES[name] = factory


def available_policy_names() -> tuple[str, ...]:
    return tuple(sorted(_POLICIES))


def make_policy(name: str, counter: FrequencyCounter) -> RankingPolicy:
    factory = _POLICIES.get(name)
    if factory is None:
        raise ValueError(f"unknown auto-mark policy {name!r} (choose from {', '.join(available_policy_names())})")
    return factory(counter)
