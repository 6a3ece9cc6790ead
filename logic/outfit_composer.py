"""Constrained outfit generation with transparent diagnostics."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, List, Optional, Sequence, Tuple

from logic.outfit_scoring import ScoreBreakdown, item_affinity, score_outfit
from logic.usage_ledger import UsageLedger
from memory.user_profile import StyleProfile
from models.issues import Issue, cold_without_outerwear, insufficient_variety, missing_categories
from models.outfit import OutfitCandidate, OutfitContext
from models.taxonomy import CATEGORIES
from models.wardrobe_item import WardrobeItem
from wardrobe_app.config import WardrobeConfig

logger = logging.getLogger(__name__)

REQUIRED_CATEGORIES = ("top", "bottom")
ACCESSORY_OCCASIONS = {"formal", "business"}
MIN_OUTFIT_SIZE = 3

DEFAULT_REASONS = ["Well-balanced color combination", "Appropriate for the occasion"]

OUTFIT_NAMES: Dict[str, List[str]] = {
    "casual": ["Relaxed {time}", "Weekend Casual", "Comfortable Day Look"],
    "smart-casual": ["Smart {time}", "Polished Casual", "Refined Look"],
    "formal": ["Classic Formal", "Professional Look", "Elegant Ensemble"],
    "business": ["Business Professional", "Office Ready", "Executive Style"],
    "party": ["Party Ready", "Social Event", "Stylish Night Out"],
    "athletic": ["Active {time}", "Sport Ready", "Training Look"],
}


@dataclass(frozen=True)
class CompositionResult:
    candidates: List[OutfitCandidate]
    issue: Optional[Issue]
    diagnostics: Dict[str, object] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.issue is None


@dataclass
class _EnumerationStats:
    examined: int = 0
    padded: int = 0
    undersized: int = 0
    repeated: int = 0
    budget_exhausted: bool = False


def partition_by_category(items: Sequence[WardrobeItem]) -> Dict[str, List[WardrobeItem]]:
    """Group items by category; every canonical category gets a (possibly empty) pool."""

    grouped: Dict[str, List[WardrobeItem]] = {category: [] for category in CATEGORIES}
    for item in items:
        grouped.setdefault(item.category, []).append(item)
    return grouped


def _compositions(total: int, sizes: Sequence[int]) -> Iterator[Tuple[int, ...]]:
    if not sizes:
        if total == 0:
            yield ()
        return
    head, rest = sizes[0], sizes[1:]
    rest_room = sum(size - 1 for size in rest)
    for index in range(max(0, total - rest_room), min(head - 1, total) + 1):
        for tail in _compositions(total - index, rest):
            yield (index,) + tail


def rank_sum_order(sizes: Sequence[int]) -> Iterator[Tuple[int, ...]]:
    """Yield every index tuple for pools of ``sizes``, lowest index sum first."""

    if not sizes or min(sizes) < 1:
        return
    for total in range(sum(size - 1 for size in sizes) + 1):
        yield from _compositions(total, sizes)


def outfit_name(occasion: str, time_of_day: str, index: int) -> str:
    options = OUTFIT_NAMES.get(occasion, ["Stylish Look"])
    return options[index % len(options)].format(time=time_of_day.title())


class OutfitComposer:
    """Enumerate, score and rank outfits from the available wardrobe pool."""

    def __init__(self, config: WardrobeConfig | None = None, ledger: UsageLedger | None = None) -> None:
        self.config = config or WardrobeConfig()
        self.ledger = ledger or UsageLedger(self.config.max_uses)

    def compose(
        self,
        items: Sequence[WardrobeItem],
        context: OutfitContext,
        max_results: int | None = None,
        profile: StyleProfile | None = None,
    ) -> CompositionResult:
        limit = max(1, max_results or self.config.max_results)
        available = [item for item in items if self.ledger.available(item)]
        pools = partition_by_category(available)
        diagnostics: Dict[str, object] = {
            "input_count": len(items),
            "available_count": len(available),
            "at_limit_ids": sorted(item.item_id for item in items if not self.ledger.available(item)),
            "pool_sizes": {category: len(pool) for category, pool in pools.items() if pool},
        }
        logger.info("Composing outfits from %s available items (of %s)", len(available), len(items))

        missing = [category for category in REQUIRED_CATEGORIES if not pools[category]]
        if missing:
            logger.info("Insufficient items for required categories: %s", missing)
            return CompositionResult(candidates=[], issue=missing_categories(missing), diagnostics=diagnostics)

        cold = context.temperature < self.config.layering_threshold_c
        diagnostics["cold"] = cold
        if cold and not pools["outerwear"]:
            logger.info("Cold weather (%sC) with no outerwear available", context.temperature)
            return CompositionResult(
                candidates=[], issue=cold_without_outerwear(context.temperature), diagnostics=diagnostics
            )

        ranked = {category: self._rank(pool, context, profile) for category, pool in pools.items()}
        slots = [ranked["top"], ranked["bottom"]]
        if ranked["shoes"]:
            slots.append(ranked["shoes"])
        if cold:
            slots.append(ranked["outerwear"])
        if context.occasion in ACCESSORY_OCCASIONS and ranked["accessory"]:
            slots.append(ranked["accessory"])

        stats = _EnumerationStats()
        scored: List[tuple] = []
        for combination in self._enumerate(slots, ranked["accessory"], stats):
            breakdown = score_outfit(combination, context, profile, self.config)
            scored.append((breakdown, combination))

        diagnostics.update(
            {
                "combinations_examined": stats.examined,
                "padded_with_accessory": stats.padded,
                "discarded_undersized": stats.undersized,
                "discarded_repeats": stats.repeated,
                "budget_exhausted": stats.budget_exhausted,
                "candidates_scored": len(scored),
            }
        )

        if not scored:
            short = [category for category in ("shoes", "accessory") if not pools[category]]
            logger.info("No outfit reached %s items; missing %s", MIN_OUTFIT_SIZE, short)
            return CompositionResult(candidates=[], issue=insufficient_variety(short), diagnostics=diagnostics)

        scored.sort(key=lambda entry: (-entry[0].total, sorted(item.item_id for item in entry[1])))
        candidates = [
            self._build_candidate(index, combination, breakdown, context)
            for index, (breakdown, combination) in enumerate(scored[:limit])
        ]
        diagnostics["best_score"] = candidates[0].score
        logger.info("Returning %s of %s scored outfits", len(candidates), len(scored))
        return CompositionResult(candidates=candidates, issue=None, diagnostics=diagnostics)

    def _rank(
        self, pool: List[WardrobeItem], context: OutfitContext, profile: StyleProfile | None
    ) -> List[WardrobeItem]:
        ordered = sorted(pool, key=lambda item: (-item_affinity(item, context, profile), item.item_id))
        return ordered[: self.config.per_category_cap]

    def _enumerate(
        self,
        slots: Sequence[List[WardrobeItem]],
        accessories: Sequence[WardrobeItem],
        stats: _EnumerationStats,
    ) -> Iterator[List[WardrobeItem]]:
        """Lazily walk the bounded product, yielding unique outfits of at least three items.

        Combinations come out in order of their summed rank, so a budget cut
        drops the weakest pairings across every slot instead of freezing the
        first slots at their best pick.
        """

        seen: set[FrozenSet[str]] = set()
        for indexes in rank_sum_order([len(slot) for slot in slots]):
            combination = [slot[index] for slot, index in zip(slots, indexes)]
            if stats.examined >= self.config.combination_budget:
                stats.budget_exhausted = True
                logger.info("Combination budget of %s reached", self.config.combination_budget)
                return
            stats.examined += 1
            outfit = list(combination)
            if len(outfit) < MIN_OUTFIT_SIZE:
                used = {item.item_id for item in outfit}
                filler = next((item for item in accessories if item.item_id not in used), None)
                if filler is not None:
                    outfit.append(filler)
                    stats.padded += 1
            if len(outfit) < MIN_OUTFIT_SIZE:
                stats.undersized += 1
                continue
            key = frozenset(item.item_id for item in outfit)
            if key in seen:
                stats.repeated += 1
                continue
            seen.add(key)
            yield outfit

    def _build_candidate(
        self,
        index: int,
        items: List[WardrobeItem],
        breakdown: ScoreBreakdown,
        context: OutfitContext,
    ) -> OutfitCandidate:
        reasons = list(breakdown.reasons) or list(DEFAULT_REASONS)
        outer = next((item for item in items if item.category == "outerwear"), None)
        top = next((item for item in items if item.category == "top"), None)
        if outer is not None and top is not None and context.temperature < self.config.layering_threshold_c:
            reasons.append(f"Layer your {top.name.lower()} under the {outer.name.lower()} for warmth")
        return OutfitCandidate(
            items=tuple(items),
            context=context,
            score=breakdown.total,
            reasons=reasons,
            name=outfit_name(context.occasion, context.time_of_day, index),
        )


__all__ = [
    "OutfitComposer",
    "CompositionResult",
    "partition_by_category",
    "outfit_name",
    "rank_sum_order",
    "REQUIRED_CATEGORIES",
    "MIN_OUTFIT_SIZE",
]
