"""Canonical taxonomy definitions for wardrobe items.

This module centralises the closed sets for categories, occasions, times of day
and seasons together with the color vocabulary. Raw classifier output is
narrowed through these helpers at the ingestion boundary so that free-text
labels never travel further into the core.
"""

import re
from typing import Dict, Iterable, List, Optional

FALLBACK_CATEGORY = "other"

CATEGORIES: List[str] = ["top", "bottom", "outerwear", "shoes", "accessory", "other"]

CATEGORY_ALIASES: Dict[str, str] = {
    "tops": "top",
    "shirt": "top",
    "tee": "top",
    "t_shirt": "top",
    "blouse": "top",
    "sweater": "top",
    "cardigan": "top",
    "hoodie": "top",
    "bottoms": "bottom",
    "pants": "bottom",
    "trousers": "bottom",
    "jeans": "bottom",
    "skirt": "bottom",
    "shorts": "bottom",
    "coat": "outerwear",
    "jacket": "outerwear",
    "blazer": "outerwear",
    "outer": "outerwear",
    "shoe": "shoes",
    "footwear": "shoes",
    "sneakers": "shoes",
    "boots": "shoes",
    "accessories": "accessory",
    "socks": "accessory",
    "sock": "accessory",
    "belt": "accessory",
    "bag": "accessory",
    "hat": "accessory",
    "scarf": "accessory",
    "underwear": "other",
}

OCCASIONS: List[str] = ["casual", "smart-casual", "formal", "party", "business", "athletic"]
TIMES_OF_DAY: List[str] = ["morning", "afternoon", "evening", "night"]
SEASONS: List[str] = ["spring", "summer", "autumn", "winter"]
FORMALITY_LEVELS: List[str] = ["formal", "smart", "casual", "neutral"]

OCCASION_ALIASES: Dict[str, str] = {
    "smart_casual": "smart-casual",
    "smart casual": "smart-casual",
    "sporty": "athletic",
    "sport": "athletic",
    "office": "business",
}

SEASON_ALIASES: Dict[str, str] = {"fall": "autumn"}

COLOR_MAP = {
    "navy blue": "navy",
    "navy": "navy",
    "dark blue": "navy",
    "light blue": "blue",
    "sky blue": "blue",
    "blue": "blue",
    "denim": "blue",
    "black": "black",
    "charcoal": "gray",
    "white": "white",
    "off white": "white",
    "ivory": "white",
    "cream": "beige",
    "beige": "beige",
    "tan": "beige",
    "khaki": "beige",
    "camel": "brown",
    "brown": "brown",
    "gray": "gray",
    "grey": "gray",
    "light gray": "gray",
    "dark gray": "gray",
    "green": "green",
    "olive": "green",
    "red": "red",
    "burgundy": "red",
    "maroon": "red",
    "pink": "pink",
    "yellow": "yellow",
    "mustard": "yellow",
    "orange": "orange",
    "purple": "purple",
}

# Colors read as dark for evening styling.
DARK_COLORS = {"black", "navy", "gray", "brown", "red"}

# Garment keywords recognised in item names. Each maps to a formality hint.
GARMENT_FORMALITY: Dict[str, str] = {
    "suit": "formal",
    "tie": "formal",
    "blazer": "formal",
    "sport coat": "formal",
    "dress shoes": "formal",
    "oxford": "formal",
    "loafers": "formal",
    "trousers": "formal",
    "dress": "formal",
    "shirt": "smart",
    "chinos": "smart",
    "polo": "smart",
    "cardigan": "smart",
    "sweater": "smart",
    "jacket": "smart",
    "skirt": "smart",
    "t-shirt": "casual",
    "tee": "casual",
    "jeans": "casual",
    "sneakers": "casual",
    "hoodie": "casual",
    "sweatshirt": "casual",
    "shorts": "casual",
    "joggers": "casual",
    "sandals": "casual",
}

OCCASION_FORMALITY: Dict[str, str] = {
    "formal": "formal",
    "business": "formal",
    "smart-casual": "smart",
    "party": "smart",
    "casual": "casual",
    "athletic": "casual",
}


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return value.strip().lower().replace(" ", "_").replace("-", "_")


def validate_category(value: str) -> str:
    """Validate and normalise a category value.

    Raises a :class:`ValueError` if the category is not part of the canonical
    taxonomy.
    """

    key = _normalize_key(value or "")
    if key not in CATEGORIES:
        raise ValueError(f"Unsupported category '{value}'. Allowed: {CATEGORIES}")
    return key


def coerce_category(value: Optional[str]) -> str:
    """Narrow a raw classifier label to the closed category set.

    Unknown labels fall back to ``other`` instead of failing.
    """

    key = _normalize_key(value or "")
    if key in CATEGORIES:
        return key
    return CATEGORY_ALIASES.get(key, FALLBACK_CATEGORY)


def coerce_occasion(value: Optional[str]) -> Optional[str]:
    """Return the canonical occasion for ``value`` or ``None`` if unknown."""

    key = (value or "").strip().lower()
    key = OCCASION_ALIASES.get(key, key)
    return key if key in OCCASIONS else None


def coerce_season(value: Optional[str]) -> Optional[str]:
    key = (value or "").strip().lower()
    key = SEASON_ALIASES.get(key, key)
    return key if key in SEASONS else None


def normalize_color_name(raw_string: str) -> str:
    """Map a raw color string to a canonical color name."""

    key = " ".join((raw_string or "").strip().lower().split())
    return COLOR_MAP.get(key, key)


# Name fragments that contain a garment keyword without naming that garment.
NON_GARMENT_PHRASES = re.compile(r"\btie[\s-]*dyed?\b")


def _keyword_pattern(keyword: str) -> str:
    return rf"(?<![a-z]){re.escape(keyword)}(?![a-z])"


def contains_keyword(text: str, keyword: str) -> bool:
    """Whole-word keyword lookup, tolerant of plural ``s``."""

    return re.search(_keyword_pattern(keyword) + "|" + _keyword_pattern(keyword + "s"), text.lower()) is not None


def garment_tags(name: str) -> List[str]:
    """Return recognised garment keywords in ``name``, longest phrases first."""

    text = NON_GARMENT_PHRASES.sub(" ", (name or "").lower())
    found: List[str] = []
    for keyword in sorted(GARMENT_FORMALITY, key=len, reverse=True):
        if contains_keyword(text, keyword):
            if any(keyword in longer for longer in found):
                continue
            found.append(keyword)
    return sorted(found)


def infer_formality(occasion: Optional[str], tags: Iterable[str]) -> str:
    """Derive a single formality level from the occasion tag or garment keywords."""

    if occasion and occasion in OCCASION_FORMALITY:
        return OCCASION_FORMALITY[occasion]
    levels = [GARMENT_FORMALITY[tag] for tag in tags if tag in GARMENT_FORMALITY]
    for level in ("formal", "smart", "casual"):
        if level in levels:
            return level
    return "neutral"


__all__ = [
    "CATEGORIES",
    "CATEGORY_ALIASES",
    "FALLBACK_CATEGORY",
    "OCCASIONS",
    "TIMES_OF_DAY",
    "SEASONS",
    "FORMALITY_LEVELS",
    "COLOR_MAP",
    "DARK_COLORS",
    "GARMENT_FORMALITY",
    "validate_category",
    "coerce_category",
    "coerce_occasion",
    "coerce_season",
    "normalize_color_name",
    "contains_keyword",
    "garment_tags",
    "infer_formality",
]
