"""Wardrobe item data model and helpers."""

from __future__ import annotations

from dataclasses import FrozenInstanceError, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from models.taxonomy import (
    coerce_occasion,
    garment_tags,
    infer_formality,
    normalize_color_name,
    validate_category,
)
from models.usage_counter import MAX_USES, UsageCounter

IMMUTABLE_FIELDS = frozenset({"item_id", "user_id", "fingerprint", "created_at"})


def _clean_optional(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = " ".join(str(value).split())
    return text.lower() or None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class WardrobeItem:
    """Represents an item in the user's wardrobe.

    ``color_family``, ``formality`` and ``garment_tags`` are derived from the
    descriptive fields whenever an item is built, so scoring reads structured
    attributes instead of re-parsing names.
    """

    item_id: str
    user_id: str
    name: str
    category: str
    color: str
    fingerprint: str
    subcategory: Optional[str] = None
    material: Optional[str] = None
    pattern: Optional[str] = None
    occasion: Optional[str] = None
    demographic: Optional[str] = None
    image_url: Optional[str] = None
    usage: UsageCounter = field(default_factory=UsageCounter)
    created_at: datetime = field(default_factory=_utcnow)
    color_family: str = field(init=False, default="")
    formality: str = field(init=False, default="neutral")
    garment_tags: List[str] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        self.name = " ".join(str(self.name).split())
        if not self.name:
            raise ValueError("WardrobeItem requires a non-empty name")
        self.category = validate_category(self.category)
        self.color = " ".join(str(self.color or "unknown").lower().split())
        self.subcategory = _clean_optional(self.subcategory)
        self.material = _clean_optional(self.material)
        self.pattern = _clean_optional(self.pattern)
        self.occasion = coerce_occasion(self.occasion)
        self.demographic = _clean_optional(self.demographic)
        if not isinstance(self.usage, UsageCounter):
            self.usage = UsageCounter.parse(self.usage)
        self.color_family = normalize_color_name(self.color)
        self.garment_tags = garment_tags(self.name)
        self.formality = infer_formality(self.occasion, self.garment_tags)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in IMMUTABLE_FIELDS and name in self.__dict__:
            raise FrozenInstanceError(f"cannot assign to field {name!r}")
        object.__setattr__(self, name, value)

    @property
    def usage_count(self) -> int:
        return self.usage.current


def from_raw_metadata(metadata: Dict[str, Any], max_uses: int = MAX_USES) -> WardrobeItem:
    """Factory to build a :class:`WardrobeItem` from loose stored metadata."""

    required_fields = ["item_id", "user_id", "name", "category", "fingerprint"]
    missing = [key for key in required_fields if not metadata.get(key)]
    if missing:
        raise ValueError(f"Missing required fields for WardrobeItem: {missing}")

    created_at = metadata.get("created_at")
    if isinstance(created_at, str):
        created_at = datetime.fromisoformat(created_at)

    usage_raw = metadata.get("usage", metadata.get("usage_count"))
    return WardrobeItem(
        item_id=str(metadata["item_id"]),
        user_id=str(metadata["user_id"]),
        name=str(metadata["name"]),
        category=str(metadata["category"]),
        color=str(metadata.get("color") or "unknown"),
        fingerprint=str(metadata["fingerprint"]),
        subcategory=metadata.get("subcategory"),
        material=metadata.get("material"),
        pattern=metadata.get("pattern"),
        occasion=metadata.get("occasion"),
        demographic=metadata.get("demographic"),
        image_url=metadata.get("image_url"),
        usage=UsageCounter.parse(usage_raw, maximum=max_uses),
        created_at=created_at or _utcnow(),
    )


__all__ = ["WardrobeItem", "from_raw_metadata", "IMMUTABLE_FIELDS"]
