"""Mapping logic from validated classifier attributes to :class:`WardrobeItem`."""

from __future__ import annotations

import logging
import re
import uuid
from typing import Optional

from models.taxonomy import coerce_category
from models.usage_counter import MAX_USES, UsageCounter
from models.wardrobe_item import WardrobeItem

logger = logging.getLogger(__name__)

KNOWN_MATERIALS = ["cotton", "linen", "wool", "denim", "leather", "silk", "cashmere", "polyester", "suede"]
KNOWN_PATTERNS = ["striped", "checkered", "plaid", "floral", "polka dot", "solid", "graphic"]


def _detect(text: str, vocabulary: list) -> Optional[str]:
    lowered = text.lower()
    for word in vocabulary:
        if re.search(rf"\b{re.escape(word)}\b", lowered):
            return word
    return None


def map_attributes_to_item(
    user_id: str,
    attributes,
    category: str,
    fingerprint: str,
    subcategory: Optional[str] = None,
    image_url: Optional[str] = None,
    item_id: Optional[str] = None,
    max_uses: int = MAX_USES,
) -> WardrobeItem:
    """Build a fresh, validated item from classifier attributes and a refined category.

    ``attributes`` is a :class:`logic.validation.ClassifierAttributes`. Missing
    material and pattern are filled from keywords in the item name.
    """

    material = attributes.material or _detect(attributes.name, KNOWN_MATERIALS)
    pattern = attributes.pattern or _detect(attributes.name, KNOWN_PATTERNS)
    item = WardrobeItem(
        item_id=item_id or str(uuid.uuid4()),
        user_id=user_id,
        name=attributes.name,
        category=coerce_category(category),
        color=attributes.color,
        fingerprint=fingerprint,
        subcategory=subcategory,
        material=material,
        pattern=pattern,
        occasion=attributes.occasion,
        demographic=attributes.demographic,
        image_url=image_url,
        usage=UsageCounter(0, max_uses),
    )
    logger.debug(
        "Mapped classifier attributes to WardrobeItem",
        extra={
            "category": item.category,
            "subcategory": item.subcategory,
            "formality": item.formality,
            "color_family": item.color_family,
        },
    )
    return item


__all__ = ["map_attributes_to_item", "KNOWN_MATERIALS", "KNOWN_PATTERNS"]
