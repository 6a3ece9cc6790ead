"""Deterministic additive scoring for candidate outfits."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from memory.user_profile import StyleProfile
from models.color_theory import accent_count, distinct_colors, has_complementary_pair
from models.outfit import OutfitContext
from models.taxonomy import DARK_COLORS
from models.wardrobe_item import WardrobeItem
from wardrobe_app.config import WardrobeConfig

BASE_SCORE = 100.0

FORMAL_OCCASIONS = {"formal", "business"}
CLASSIC_GARMENTS = {"shirt", "chinos", "blazer", "polo"}
ATHLETIC_FRIENDLY_GARMENTS = {"polo", "chinos", "jacket"}
FEMININE_GARMENTS = {"dress", "skirt"}
COLOR_BONUS_CAP = 12.0
COLOR_PENALTY_FLOOR = -5.0

Component = Tuple[float, List[str]]


@dataclass(frozen=True)
class ScoreBreakdown:
    total: float
    components: Dict[str, float]
    reasons: List[str] = field(default_factory=list)


def _occasion_score(items: Sequence[WardrobeItem], occasion: str) -> Component:
    formal = sum(1 for item in items if item.formality == "formal")
    smart = sum(1 for item in items if item.formality == "smart")
    casual = sum(1 for item in items if item.formality == "casual")

    if occasion in FORMAL_OCCASIONS:
        score = 6.0 * formal + 3.0 * smart - 6.0 * casual
        if score > 0:
            return score, [f"Polished pieces suit a {occasion} occasion"]
        if casual:
            return score, [f"{casual} casual piece(s) lower the {occasion} fit"]
        return score, []
    if occasion == "casual":
        score = 4.0 * casual - 3.0 * formal
        return score, ["Relaxed pieces for a casual day"] if casual else []
    if occasion == "smart-casual":
        if (formal or smart) and casual:
            return 12.0, ["Balances smart and casual elements"]
        return 5.0, []
    if occasion == "party":
        if formal or smart:
            return 8.0, ["Dressed-up pieces for a party"]
        return 3.0, []
    if occasion == "athletic":
        sporty = sum(1 for item in items if item.occasion == "athletic")
        return 5.0 * sporty - 4.0 * formal, ["Sport-ready pieces"] if sporty else []
    return 5.0, []


def _color_score(items: Sequence[WardrobeItem]) -> Component:
    colors = [item.color_family for item in items if item.color_family and item.color_family != "unknown"]
    if not colors:
        return 0.0, []
    distinct = len(distinct_colors(colors))
    score = max(COLOR_PENALTY_FLOOR, min(COLOR_BONUS_CAP, 3.0 * (5 - distinct)))
    reasons: List[str] = []
    if distinct == 1:
        reasons.append("Monochrome palette")
    elif distinct <= 3:
        reasons.append("Cohesive color palette")
    else:
        reasons.append("Busy palette with many colors")
    if has_complementary_pair(colors):
        score += 2.0
        reasons.append("Complementary color pairing")
    if accent_count(colors) > 2:
        score -= 2.0
    return score, reasons


def _weather_score(items: Sequence[WardrobeItem], temperature: float, config: WardrobeConfig) -> Component:
    has_outerwear = any(item.category == "outerwear" for item in items)
    if temperature < config.layering_threshold_c:
        if has_outerwear:
            return 15.0, ["Outer layer added for cool weather"]
        return -10.0, []
    if temperature > config.hot_threshold_c:
        return (-5.0, ["Outer layer may be too warm"]) if has_outerwear else (5.0, ["Light layers for warm weather"])
    return 0.0, []


def _time_score(items: Sequence[WardrobeItem], time_of_day: str) -> Component:
    if time_of_day in {"evening", "night"}:
        if any(item.color_family in DARK_COLORS for item in items):
            return 5.0, [f"Darker tones suit the {time_of_day}"]
        return 0.0, []
    if time_of_day in {"morning", "afternoon"}:
        return 2.0, []
    return 0.0, []


def _profile_score(items: Sequence[WardrobeItem], profile: Optional[StyleProfile]) -> Component:
    if profile is None:
        return 0.0, []
    score = 0.0
    reasons: List[str] = []
    tags = {tag for item in items for tag in item.garment_tags}

    if profile.age is not None and profile.age >= 40 and tags & CLASSIC_GARMENTS:
        score += 15.0
        reasons.append("Age-appropriate styling with classic cuts")
    if profile.body_type == "athletic":
        navy_top = any(item.category == "top" and item.color_family == "navy" for item in items)
        if tags & ATHLETIC_FRIENDLY_GARMENTS or navy_top:
            score += 10.0
            reasons.append("Tailored pieces flatter an athletic build")
    flattering = set(profile.flattering_colors)
    if flattering:
        matches = sum(1 for item in items if item.color_family in flattering)
        if matches:
            score += 5.0 * matches
            reasons.append(f"Colors complement a {profile.skin_tone} skin tone")
    if profile.gender == "male" and not tags & FEMININE_GARMENTS:
        score += 10.0
    return score, reasons


def item_affinity(item: WardrobeItem, context: OutfitContext, profile: Optional[StyleProfile] = None) -> float:
    """Single-item score used to rank pools before enumeration."""

    occasion, _ = _occasion_score([item], context.occasion)
    affinity, _ = _profile_score([item], profile)
    return occasion + affinity - 0.5 * item.usage.current


def score_outfit(
    items: Sequence[WardrobeItem],
    context: OutfitContext,
    profile: Optional[StyleProfile] = None,
    config: WardrobeConfig | None = None,
) -> ScoreBreakdown:
    """Add occasion, color, weather, time-of-day and profile bonuses to the base score."""

    config = config or WardrobeConfig()
    parts = {
        "occasion": _occasion_score(items, context.occasion),
        "color": _color_score(items),
        "weather": _weather_score(items, context.temperature, config),
        "time_of_day": _time_score(items, context.time_of_day),
        "profile": _profile_score(items, profile),
    }
    components = {name: value for name, (value, _) in parts.items()}
    reasons = [reason for _, part_reasons in parts.values() for reason in part_reasons]
    total = BASE_SCORE + sum(components.values())
    return ScoreBreakdown(total=round(total, 2), components=components, reasons=reasons)


__all__ = ["score_outfit", "item_affinity", "ScoreBreakdown", "BASE_SCORE"]
