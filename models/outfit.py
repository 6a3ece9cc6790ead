"""Outfit request context, generated candidates and saved outfits."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, FrozenSet, List, Optional, Tuple

from models.wardrobe_item import WardrobeItem


@dataclass(frozen=True)
class OutfitContext:
    occasion: str = "casual"
    temperature: float = 20.0
    time_of_day: str = "afternoon"
    season: Optional[str] = None


@dataclass(frozen=True)
class OutfitCandidate:
    """A transient, scored outfit proposal."""

    items: Tuple[WardrobeItem, ...]
    context: OutfitContext
    score: float
    reasons: List[str] = field(default_factory=list)
    name: str = ""

    def __post_init__(self) -> None:
        ids = [item.item_id for item in self.items]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Outfit candidate repeats items: {ids}")

    @property
    def item_ids(self) -> List[str]:
        return [item.item_id for item in self.items]

    @property
    def item_key(self) -> FrozenSet[str]:
        return frozenset(self.item_ids)

    def categories(self) -> List[str]:
        return [item.category for item in self.items]

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "item_ids": self.item_ids,
            "items": [
                {
                    "item_id": item.item_id,
                    "name": item.name,
                    "category": item.category,
                    "color": item.color,
                    "usage": item.usage.display,
                }
                for item in self.items
            ],
            "occasion": self.context.occasion,
            "temperature": self.context.temperature,
            "time_of_day": self.context.time_of_day,
            "season": self.context.season,
            "score": self.score,
            "reasons": list(self.reasons),
        }


@dataclass
class Outfit:
    """A candidate the user chose to keep."""

    outfit_id: str
    user_id: str
    name: str
    occasion: str
    item_ids: List[str]
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


__all__ = ["OutfitContext", "OutfitCandidate", "Outfit"]
