"""Availability queries and value-semantics updates for item usage counters."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Iterable, List

from models.usage_counter import MAX_USES, UsageCounter
from models.wardrobe_item import WardrobeItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UsageCheck:
    valid: bool
    unavailable_ids: List[str]
    message: str = ""


class UsageLedger:
    """Reads and derives usage counters without touching shared state.

    Every mutation returns a new :class:`UsageCounter`; callers decide if and
    when the result is persisted.
    """

    def __init__(self, max_uses: int = MAX_USES) -> None:
        self.max_uses = max_uses

    def counter(self, item: WardrobeItem) -> UsageCounter:
        """Return the item's counter re-clamped against the ledger ceiling."""

        return UsageCounter(item.usage.current, self.max_uses)

    def available(self, item: WardrobeItem) -> bool:
        return self.counter(item).can_use

    def increment(self, item: WardrobeItem) -> UsageCounter:
        current = self.counter(item)
        if current.is_at_limit:
            logger.debug("Usage increment ignored for %s: already at %s", item.item_id, current.display)
            return current
        return UsageCounter(current.current + 1, current.maximum)

    def reset(self, item: WardrobeItem) -> UsageCounter:
        return UsageCounter(0, self.max_uses)

    @staticmethod
    def apply(item: WardrobeItem, counter: UsageCounter) -> WardrobeItem:
        """Return a copy of ``item`` carrying ``counter``."""

        return dataclasses.replace(item, usage=counter)

    def validate_for_outfit(self, items: Iterable[WardrobeItem]) -> UsageCheck:
        """Check that every item can still be worn in a new outfit."""

        unavailable = [item.item_id for item in items if not self.available(item)]
        if unavailable:
            return UsageCheck(
                valid=False,
                unavailable_ids=unavailable,
                message=(
                    f"{len(unavailable)} item(s) have reached the maximum usage limit "
                    f"({self.max_uses} uses)"
                ),
            )
        return UsageCheck(valid=True, unavailable_ids=[])


__all__ = ["UsageLedger", "UsageCheck"]
