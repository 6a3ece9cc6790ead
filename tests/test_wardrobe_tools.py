"""End-to-end tool calls over a real SQLite store."""

from __future__ import annotations

from typing import Dict, List

import pytest

from logic.ingestion import UploadedImage
from memory.user_profile import UserProfileService
from tools.wardrobe_store import SQLiteWardrobeStore
from tools.wardrobe_tools import WardrobeTools
from wardrobe_app.config import WardrobeConfig

USER = "user-1"


@pytest.fixture()
def tools(tmp_path) -> WardrobeTools:
    return WardrobeTools(
        store=SQLiteWardrobeStore(tmp_path / "wardrobe.db"),
        config=WardrobeConfig(),
        profiles=UserProfileService(base_dir=str(tmp_path / "profiles")),
    )


def _classify_in_order(responses: List[Dict[str, object]]):
    queue = list(responses)
    return lambda _content: queue.pop(0)


@pytest.fixture()
def stocked(tools, make_image) -> Dict[str, str]:
    uploads = [
        UploadedImage(content=make_image("vertical"), filename="tee.png"),
        UploadedImage(content=make_image("horizontal"), filename="jeans.png"),
        UploadedImage(content=make_image("checker"), filename="sneakers.png"),
    ]
    result = tools.add_images(
        user_id=USER,
        uploads=uploads,
        classify=_classify_in_order(
            [
                {"name": "White Tee", "category": "top", "color": "white"},
                {"name": "Blue Jeans", "category": "bottom", "color": "blue"},
                {"name": "White Sneakers", "category": "shoes", "color": "white"},
            ]
        ),
    )
    assert result["message"] == "3 items added successfully"
    return {item["category"]: item["item_id"] for item in result["items"]}


def test_add_images_skips_repeat_upload(tools, stocked, make_image) -> None:
    result = tools.add_images(
        user_id=USER,
        uploads=[UploadedImage(content=make_image("vertical"), filename="again.png")],
        classify=_classify_in_order([{"name": "Plain White Tee", "category": "top", "color": "white"}]),
    )

    assert result["items"] == []
    assert result["duplicates"][0]["matched_item_id"] == stocked["top"]
    assert len(tools.list_items(user_id=USER)) == 3


def test_list_items_by_category(tools, stocked) -> None:
    items = tools.list_items(user_id=USER, category="top")

    assert [item["item_id"] for item in items] == [stocked["top"]]
    assert items[0]["usage"] == "0/3 uses"
    assert items[0]["usage_status"] == "available"


def test_generate_outfits(tools, stocked) -> None:
    result = tools.generate_outfits(user_id=USER, occasion="Smart Casual", temperature=21, time_of_day="Morning")

    assert result["status"] == "ok"
    outfit = result["outfits"][0]
    assert set(outfit["item_ids"]) == set(stocked.values())
    assert outfit["occasion"] == "smart-casual"
    assert outfit["reasons"]


def test_generate_outfits_reports_cold_weather_issue(tools, stocked) -> None:
    result = tools.generate_outfits(user_id=USER, temperature=5)

    assert result["status"] == "no_outfit"
    assert result["issue"]["condition"] == "cold_weather_without_outerwear"


def test_generate_outfits_rejects_invalid_request(tools) -> None:
    result = tools.generate_outfits(user_id=USER, temperature=500)

    assert result["status"] == "needs_review"
    assert result["details"][0]["loc"] == ["temperature"]


def test_save_outfit_counts_usage_until_limit(tools, stocked) -> None:
    ids = list(stocked.values())

    for _ in range(3):
        saved = tools.save_outfit(user_id=USER, name="Daily", occasion="casual", item_ids=ids)
        assert saved["status"] == "ok"

    assert set(saved["usage"].values()) == {"3/3 uses"}
    blocked = tools.save_outfit(user_id=USER, name="Again", occasion="casual", item_ids=ids)
    assert blocked["status"] == "error"
    assert sorted(blocked["unavailable_ids"]) == sorted(ids)

    exhausted = tools.generate_outfits(user_id=USER)
    assert exhausted["status"] == "no_outfit"
    assert exhausted["diagnostics"]["at_limit_ids"] == sorted(ids)

    assert tools.reset_usage(user_id=USER, item_id=stocked["top"]) == "0/3 uses"


def test_save_outfit_validation(tools, stocked) -> None:
    unknown = tools.save_outfit(user_id=USER, name="Ghost", occasion="casual", item_ids=["nope"])
    repeated = tools.save_outfit(user_id=USER, name="Twice", occasion="casual", item_ids=[stocked["top"]] * 2)

    assert unknown == {"status": "error", "message": "Unknown item ids", "unknown_ids": ["nope"]}
    assert repeated["status"] == "needs_review"


def test_check_category(tools) -> None:
    result = tools.check_category(category="top", name="Chunky Wool Cardigan")

    assert result["category"] == "outerwear"
    assert result["should_prompt"] is True
    assert tools.check_category(category="top", name="Cotton Cardigan", temperature=3)["subcategory"] == "winter"
