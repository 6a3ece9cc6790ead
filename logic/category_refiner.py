"""Keyword rules that refine a raw classifier label into a canonical category."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from models.taxonomy import coerce_category, contains_keyword
from wardrobe_app.config import WardrobeConfig

logger = logging.getLogger(__name__)

RULE_CONFIDENCE = 90
WEATHER_OVERRIDE_CONFIDENCE = 95
FALLBACK_CONFIDENCE = 70
OPTIONAL_OUTERWEAR = "optional_outerwear"

HEAVY_INDICATORS = ("wool", "thick", "winter", "heavy", "chunky", "cable knit")
LIGHT_INDICATORS = ("cotton", "light", "lightweight", "summer", "thin", "fine knit")
LIGHT_JACKETS = ("bomber", "denim", "light")
WINTER_INDICATORS = ("fleece", "thermal", "winter")

Condition = Callable[[str, str], bool]


def _mentions_any(name: str, keywords: Sequence[str]) -> bool:
    return any(contains_keyword(name, keyword) for keyword in keywords)


def _is_heavy_knit(name: str, _color: str) -> bool:
    return _mentions_any(name, HEAVY_INDICATORS) and not _mentions_any(name, LIGHT_INDICATORS)


def _is_light_knit(name: str, color: str) -> bool:
    return not _is_heavy_knit(name, color)


def _is_structured_jacket(name: str, _color: str) -> bool:
    return not _mentions_any(name, LIGHT_JACKETS)


def _is_light_hoodie(name: str, _color: str) -> bool:
    return not _mentions_any(name, WINTER_INDICATORS)


@dataclass(frozen=True)
class CategoryRule:
    keywords: Sequence[str]
    category: str
    subcategory: Optional[str] = None
    condition: Optional[Condition] = None

    def matches(self, name: str, color: str) -> bool:
        if not _mentions_any(name, self.keywords):
            return False
        return self.condition is None or self.condition(name, color)


CATEGORY_RULES: List[CategoryRule] = [
    CategoryRule(keywords=("sock",), category="accessory", subcategory="socks"),
    CategoryRule(
        keywords=("cardigan",), category="outerwear", subcategory=OPTIONAL_OUTERWEAR, condition=_is_heavy_knit
    ),
    CategoryRule(keywords=("cardigan",), category="top", subcategory=OPTIONAL_OUTERWEAR, condition=_is_light_knit),
    CategoryRule(keywords=("blazer", "sport coat"), category="outerwear", subcategory="business"),
    CategoryRule(keywords=("jacket",), category="outerwear", condition=_is_structured_jacket),
    CategoryRule(keywords=("hoodie", "sweatshirt"), category="top", subcategory="casual", condition=_is_light_hoodie),
]


@dataclass(frozen=True)
class RefinedCategory:
    category: str
    subcategory: Optional[str]
    confidence: int
    ambiguous: bool = False


@dataclass(frozen=True)
class ConfirmationPrompt:
    should_prompt: bool
    suggestion: Optional[str] = None
    metadata: Dict[str, Optional[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class _AmbiguousKeyword:
    keywords: Sequence[str]
    suggestion: str
    kind: str
    subcategory: str
    category: Optional[str] = None


_AMBIGUOUS_KEYWORDS: List[_AmbiguousKeyword] = [
    _AmbiguousKeyword(
        keywords=("sock",),
        suggestion="Socks should be categorized as Accessories. Would you like to move this item?",
        kind="socks",
        subcategory="socks",
        category="accessory",
    ),
    _AmbiguousKeyword(
        keywords=("cardigan",),
        suggestion="Is this item categorized correctly? Cardigan as Top or Outerwear?",
        kind="cardigan",
        subcategory=OPTIONAL_OUTERWEAR,
    ),
    _AmbiguousKeyword(
        keywords=("vest",),
        suggestion="Is this a casual vest (Top) or formal vest (Outerwear)?",
        kind="vest",
        subcategory=OPTIONAL_OUTERWEAR,
    ),
    _AmbiguousKeyword(
        keywords=("hoodie", "sweatshirt"),
        suggestion="Is this a light hoodie (Top) or winter hoodie (Outerwear)?",
        kind="hoodie",
        subcategory=OPTIONAL_OUTERWEAR,
    ),
    _AmbiguousKeyword(
        keywords=("blazer", "sport coat"),
        suggestion="Is this a casual blazer (Top) or formal blazer (Outerwear)?",
        kind="blazer",
        subcategory="business",
    ),
]


class CategoryRefiner:
    """Apply ordered keyword rules with an optional cold-weather override."""

    def __init__(self, config: WardrobeConfig | None = None, rules: Sequence[CategoryRule] | None = None) -> None:
        self.config = config or WardrobeConfig()
        self.rules = list(rules) if rules is not None else list(CATEGORY_RULES)

    def refine(
        self, raw_category: str, name: str, color: str = "", temperature: float | None = None
    ) -> RefinedCategory:
        for rule in self.rules:
            if not rule.matches(name or "", color or ""):
                continue
            if (
                temperature is not None
                and temperature < self.config.winter_threshold_c
                and rule.subcategory == OPTIONAL_OUTERWEAR
            ):
                logger.info("Cold override for '%s' at %sC -> outerwear/winter", name, temperature)
                return RefinedCategory(category="outerwear", subcategory="winter", confidence=WEATHER_OVERRIDE_CONFIDENCE)
            return RefinedCategory(category=rule.category, subcategory=rule.subcategory, confidence=RULE_CONFIDENCE)

        category = coerce_category(raw_category)
        logger.debug("No category rule matched '%s'; keeping %s", name, category)
        return RefinedCategory(category=category, subcategory=None, confidence=FALLBACK_CONFIDENCE, ambiguous=True)

    @staticmethod
    def needs_confirmation(category: str, name: str) -> ConfirmationPrompt:
        """Advise whether the user should confirm an inherently ambiguous item."""

        for entry in _AMBIGUOUS_KEYWORDS:
            if _mentions_any(name or "", entry.keywords):
                return ConfirmationPrompt(
                    should_prompt=True,
                    suggestion=entry.suggestion,
                    metadata={
                        "type": entry.kind,
                        "category": entry.category or coerce_category(category),
                        "subcategory": entry.subcategory,
                    },
                )
        return ConfirmationPrompt(should_prompt=False)


__all__ = [
    "CategoryRefiner",
    "CategoryRule",
    "CATEGORY_RULES",
    "RefinedCategory",
    "ConfirmationPrompt",
]
