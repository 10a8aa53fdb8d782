"""Automatic mark assignment for recently or frequently used documents."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from ..config import BinkyConfig
from ..host.base import Document
from .position import LivePosition, live_at
from .ranking import RankingPolicy
from .stores import ManualStore

logger = logging.getLogger(__name__)


def _matches_any(patterns: Sequence[str], name: str) -> bool:
    return any(re.search(pattern, name) for pattern in patterns)


def is_excluded(document: Document, config: BinkyConfig) -> bool:
    """Return whether ``document`` may never receive an auto mark."""
    if any(predicate(document) for predicate in config.auto_exclude_predicates):
        return True
    if document.mode in config.auto_exclude_modes:
        return True
    return _matches_any(config.auto_exclude_regexps, document.name) and not _matches_any(
        config.auto_include_regexps, document.name
    )


def auto_candidates(
    documents: Sequence[Document],
    current: Document | None,
    manual: ManualStore,
    config: BinkyConfig,
) -> list[Document]:
    """Filter open documents down to auto-mark candidates, keeping focus order."""
    marked = manual.live_documents()
    out: list[Document] = []
    for document in documents:
        if document is current or not document.is_alive():
            continue
        if is_excluded(document, config):
            continue
        if any(document is known for known in marked):
            continue
        out.append(document)
    return out


def compute_auto_marks(
    host,
    documents: Sequence[Document],
    manual: ManualStore,
    config: BinkyConfig,
    policy: RankingPolicy,
) -> dict[str, LivePosition]:
    """Build a fresh ``mark -> live position`` mapping for the auto store.

    Alphabet slots and ranked candidates are paired positionally; whichever
    list is longer is cut off.
    """
    alphabet = config.auto_alphabet
    if not alphabet:
        return {}
    candidates = auto_candidates(documents, host.current_document(), manual, config)
    ranked = policy.rank(candidates)
    entries = {mark: live_at(host, document) for mark, document in zip(alphabet, ranked)}
    logger.debug(
        "auto marks (%s): %s",
        policy.name,
        ", ".join(f"{mark}={position.document.name}" for mark, position in entries.items()) or "-",
    )
    return entries
