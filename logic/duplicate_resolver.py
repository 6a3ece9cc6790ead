"""Duplicate detection for newly uploaded wardrobe items.

Strategies run from highest to lowest confidence and the first match wins:

1. exact fingerprint
2. near fingerprint (Hamming similarity above ``near_duplicate_threshold``)
3. identical name, category and color
4. upload filename resembling an existing item name in the same category
5. same category and color with at least two shared significant name words
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from logic.similarity_hasher import fingerprint_similarity, is_comparable, string_similarity
from models.taxonomy import coerce_category
from models.wardrobe_item import WardrobeItem
from wardrobe_app.config import WardrobeConfig

logger = logging.getLogger(__name__)

EXACT_METADATA_SIMILARITY = 90.0
SEMANTIC_SIMILARITY = 80.0
MIN_SHARED_WORDS = 2
MIN_WORD_LENGTH = 4


@dataclass(frozen=True)
class ItemAttributes:
    """The descriptive subset of an item used for duplicate checks."""

    name: str
    category: str
    color: str

    @classmethod
    def of(cls, item: WardrobeItem) -> "ItemAttributes":
        return cls(name=item.name, category=item.category, color=item.color)


@dataclass(frozen=True)
class DuplicateVerdict:
    is_duplicate: bool
    similarity: float = 0.0
    reason: str = ""
    strategy: str = "none"
    matched_item: Optional[WardrobeItem] = None

    @property
    def matched_item_id(self) -> Optional[str]:
        return self.matched_item.item_id if self.matched_item else None


@dataclass(frozen=True)
class BatchEntry:
    """One upload in a batch: its fingerprint, attributes and optional filename."""

    fingerprint: str
    attributes: ItemAttributes
    filename: Optional[str] = None
    candidate: Optional[WardrobeItem] = None


@dataclass
class BatchResolution:
    verdicts: List[DuplicateVerdict] = field(default_factory=list)

    @property
    def unique_indexes(self) -> List[int]:
        return [index for index, verdict in enumerate(self.verdicts) if not verdict.is_duplicate]


def normalize_text(value: str) -> str:
    return " ".join((value or "").lower().split())


def normalize_filename(filename: str) -> str:
    """Lowercase and strip everything but ``a-z0-9``; the extension is dropped."""

    stem = re.sub(r"\.[A-Za-z0-9]{2,5}$", "", (filename or "").strip())
    return re.sub(r"[^a-z0-9]", "", stem.lower())


def _significant_words(name: str) -> set:
    return {word for word in re.findall(r"[a-z0-9]+", name.lower()) if len(word) >= MIN_WORD_LENGTH}


class DuplicateResolver:
    """Decide whether a new upload duplicates an existing wardrobe entry."""

    def __init__(self, config: WardrobeConfig | None = None) -> None:
        self.config = config or WardrobeConfig()

    def resolve(
        self,
        fingerprint: str,
        attributes: ItemAttributes,
        pool: Sequence[WardrobeItem],
        filename: Optional[str] = None,
    ) -> DuplicateVerdict:
        category = coerce_category(attributes.category)
        color = normalize_text(attributes.color)
        name = normalize_text(attributes.name)

        for check in (
            lambda: self._exact_fingerprint(fingerprint, pool),
            lambda: self._near_fingerprint(fingerprint, pool),
            lambda: self._exact_metadata(name, category, color, pool),
            lambda: self._filename_match(filename, category, pool),
            lambda: self._semantic_overlap(name, category, color, pool),
        ):
            verdict = check()
            if verdict is not None:
                logger.info(
                    "Duplicate detected via %s (%.1f%%) against item %s",
                    verdict.strategy,
                    verdict.similarity,
                    verdict.matched_item_id,
                )
                return verdict
        return DuplicateVerdict(is_duplicate=False)

    def resolve_batch(
        self, entries: Sequence[BatchEntry], pool: Sequence[WardrobeItem]
    ) -> BatchResolution:
        """Resolve each entry against the pool and the unique entries before it.

        Entries compared against their batch mates need a ``candidate`` item so
        that a later upload can report which earlier upload it duplicates.
        """

        resolution = BatchResolution()
        accepted: List[WardrobeItem] = []
        for entry in entries:
            verdict = self.resolve(entry.fingerprint, entry.attributes, list(pool) + accepted, entry.filename)
            resolution.verdicts.append(verdict)
            if not verdict.is_duplicate and entry.candidate is not None:
                accepted.append(entry.candidate)
        return resolution

    def _exact_fingerprint(self, fingerprint: str, pool: Iterable[WardrobeItem]) -> Optional[DuplicateVerdict]:
        if not is_comparable(fingerprint):
            return None
        for item in pool:
            if is_comparable(item.fingerprint) and item.fingerprint.lower() == fingerprint.lower():
                return DuplicateVerdict(
                    is_duplicate=True,
                    similarity=100.0,
                    reason="Identical image detected (exact fingerprint match)",
                    strategy="exact_fingerprint",
                    matched_item=item,
                )
        return None

    def _near_fingerprint(self, fingerprint: str, pool: Iterable[WardrobeItem]) -> Optional[DuplicateVerdict]:
        if not is_comparable(fingerprint):
            return None
        best: Tuple[float, Optional[WardrobeItem]] = (0.0, None)
        for item in pool:
            if not is_comparable(item.fingerprint):
                continue
            similarity = fingerprint_similarity(fingerprint, item.fingerprint)
            if similarity > best[0]:
                best = (similarity, item)
        similarity, item = best
        if item is None or similarity < self.config.near_duplicate_threshold:
            return None
        return DuplicateVerdict(
            is_duplicate=True,
            similarity=round(similarity, 1),
            reason=f"Very similar image detected ({similarity:.1f}% similarity)",
            strategy="near_fingerprint",
            matched_item=item,
        )

    @staticmethod
    def _exact_metadata(
        name: str, category: str, color: str, pool: Iterable[WardrobeItem]
    ) -> Optional[DuplicateVerdict]:
        for item in pool:
            if normalize_text(item.name) == name and item.category == category and normalize_text(item.color) == color:
                return DuplicateVerdict(
                    is_duplicate=True,
                    similarity=EXACT_METADATA_SIMILARITY,
                    reason="Identical item details (name, category, color)",
                    strategy="exact_metadata",
                    matched_item=item,
                )
        return None

    def _filename_match(
        self, filename: Optional[str], category: str, pool: Iterable[WardrobeItem]
    ) -> Optional[DuplicateVerdict]:
        normalized = normalize_filename(filename or "")
        if not normalized:
            return None
        for item in pool:
            if item.category != category:
                continue
            similarity = string_similarity(normalized, normalize_filename(item.name))
            if similarity >= self.config.filename_similarity_threshold:
                return DuplicateVerdict(
                    is_duplicate=True,
                    similarity=similarity,
                    reason=f"Similar filename and category detected ({similarity:.1f}% filename similarity)",
                    strategy="filename",
                    matched_item=item,
                )
        return None

    @staticmethod
    def _semantic_overlap(
        name: str, category: str, color: str, pool: Iterable[WardrobeItem]
    ) -> Optional[DuplicateVerdict]:
        words = _significant_words(name)
        if len(words) < MIN_SHARED_WORDS:
            return None
        for item in pool:
            if item.category != category or normalize_text(item.color) != color:
                continue
            if len(words & _significant_words(item.name)) >= MIN_SHARED_WORDS:
                return DuplicateVerdict(
                    is_duplicate=True,
                    similarity=SEMANTIC_SIMILARITY,
                    reason="Similar item with matching category and color detected",
                    strategy="semantic_overlap",
                    matched_item=item,
                )
        return None


__all__ = [
    "DuplicateResolver",
    "DuplicateVerdict",
    "ItemAttributes",
    "BatchEntry",
    "BatchResolution",
    "normalize_filename",
]
