"""Lightweight color cohesion helpers for deterministic outfit scoring."""
from __future__ import annotations

import logging
from typing import Iterable, List, Set

from models.taxonomy import normalize_color_name

logger = logging.getLogger(__name__)

NEUTRAL_COLORS = {"black", "white", "gray", "navy", "beige", "brown"}

_COMPLEMENTARY_PAIRS = {
    ("red", "green"),
    ("blue", "orange"),
    ("yellow", "purple"),
    ("pink", "green"),
    ("navy", "beige"),
    ("black", "white"),
}


def _normalise_colors(colors: Iterable[str]) -> List[str]:
    return [normalize_color_name(color) for color in colors if color]


def distinct_colors(color_list: Iterable[str]) -> Set[str]:
    return {color for color in _normalise_colors(color_list) if color}


def complementary(color1: str, color2: str) -> bool:
    """Return True when the colors form a complementary pair."""

    c1, c2 = normalize_color_name(color1), normalize_color_name(color2)
    if c1 == c2:
        return False
    result = (c1, c2) in _COMPLEMENTARY_PAIRS or (c2, c1) in _COMPLEMENTARY_PAIRS
    logger.debug("complementary check (%s, %s) -> %s", c1, c2, result)
    return result


def has_complementary_pair(color_list: Iterable[str]) -> bool:
    unique = sorted(distinct_colors(color_list))
    return any(complementary(a, b) for i, a in enumerate(unique) for b in unique[i + 1 :])


def accent_count(color_list: Iterable[str]) -> int:
    """Number of distinct non-neutral colors."""

    return len(distinct_colors(color_list) - NEUTRAL_COLORS)


__all__ = [
    "NEUTRAL_COLORS",
    "distinct_colors",
    "complementary",
    "has_complementary_pair",
    "accent_count",
]
