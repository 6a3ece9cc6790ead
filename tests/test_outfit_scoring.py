"""Additive outfit scoring and style profiles."""

from __future__ import annotations

from logic.outfit_scoring import BASE_SCORE, item_affinity, score_outfit
from memory.user_profile import StyleProfile, UserProfileService
from models.outfit import OutfitContext


def test_total_is_base_plus_components(make_item) -> None:
    items = [
        make_item("a", "Black Tee", "top", color="black"),
        make_item("b", "Black Jeans", "bottom", color="black"),
        make_item("c", "Black Sneakers", "shoes", color="black"),
    ]

    breakdown = score_outfit(items, OutfitContext(occasion="casual", temperature=20))

    assert breakdown.total == BASE_SCORE + sum(breakdown.components.values())
    assert breakdown.components["color"] == 12.0
    assert "Monochrome palette" in breakdown.reasons


def test_casual_pieces_are_penalised_for_business(make_item) -> None:
    items = [
        make_item("a", "Graphic Tee", "top"),
        make_item("b", "Ripped Jeans", "bottom"),
        make_item("c", "White Sneakers", "shoes"),
    ]

    breakdown = score_outfit(items, OutfitContext(occasion="business"))

    assert breakdown.components["occasion"] == -18.0


def test_weather_component(make_item) -> None:
    base = [make_item("a", "Grey Tee", "top"), make_item("b", "Blue Jeans", "bottom")]
    coat = make_item("c", "Wool Coat", "outerwear")

    assert score_outfit(base + [coat], OutfitContext(temperature=5)).components["weather"] == 15.0
    assert score_outfit(base, OutfitContext(temperature=5)).components["weather"] == -10.0
    assert score_outfit(base + [coat], OutfitContext(temperature=30)).components["weather"] == -5.0
    assert score_outfit(base, OutfitContext(temperature=30)).components["weather"] == 5.0


def test_evening_rewards_dark_tones(make_item) -> None:
    items = [make_item("a", "Navy Shirt", "top", color="navy"), make_item("b", "White Shorts", "bottom", color="white")]

    assert score_outfit(items, OutfitContext(time_of_day="evening")).components["time_of_day"] == 5.0
    assert score_outfit(items, OutfitContext(time_of_day="morning")).components["time_of_day"] == 2.0


def test_profile_affinity(make_item) -> None:
    items = [
        make_item("a", "Navy Oxford Shirt", "top", color="navy"),
        make_item("b", "Beige Chinos", "bottom", color="beige"),
    ]
    profile = StyleProfile(user_id="u", age=45, skin_tone="Tan", gender="Male")

    breakdown = score_outfit(items, OutfitContext(), profile=profile)

    # classic cuts 15, two flattering colors 10, no dress or skirt 10
    assert breakdown.components["profile"] == 35.0
    assert score_outfit(items, OutfitContext()).components["profile"] == 0.0


def test_item_affinity_prefers_less_worn_items(make_item) -> None:
    fresh = make_item("a", "Grey Tee", "top", usage=0)
    worn = make_item("b", "Grey Tee", "top", usage=2)

    assert item_affinity(fresh, OutfitContext()) > item_affinity(worn, OutfitContext())


def test_profile_service_round_trip(tmp_path) -> None:
    service = UserProfileService(base_dir=str(tmp_path / "profiles"))

    assert service.get_profile("u1").age is None
    updated = service.update_profile("u1", {"age": 41, "body_type": "Athletic", "user_id": "ignored"})

    assert updated.user_id == "u1"
    assert service.get_profile("u1").body_type == "athletic"
    assert "navy" in StyleProfile(user_id="u1", skin_tone="olive").flattering_colors
