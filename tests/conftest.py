"""Shared fixtures for wardrobe core tests."""

from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import Callable

import pytest
from PIL import Image, ImageDraw

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.usage_counter import UsageCounter
from models.wardrobe_item import WardrobeItem


@pytest.fixture()
def make_item() -> Callable[..., WardrobeItem]:
    counter = {"n": 0}

    def _make(
        item_id: str,
        name: str,
        category: str,
        color: str = "black",
        usage: int = 0,
        occasion: str | None = None,
        fingerprint: str | None = None,
        user_id: str = "user-1",
    ) -> WardrobeItem:
        counter["n"] += 1
        return WardrobeItem(
            item_id=item_id,
            user_id=user_id,
            name=name,
            category=category,
            color=color,
            fingerprint=fingerprint or f"{counter['n']:064x}",
            occasion=occasion,
            usage=UsageCounter(usage),
        )

    return _make


def _draw(pattern: str, size: int) -> Image.Image:
    image = Image.new("RGB", (size, size), "white")
    draw = ImageDraw.Draw(image)
    half = size // 2
    if pattern == "vertical":
        draw.rectangle([0, 0, half - 1, size - 1], fill="black")
    elif pattern == "horizontal":
        draw.rectangle([0, 0, size - 1, half - 1], fill="black")
    elif pattern == "checker":
        draw.rectangle([0, 0, half - 1, half - 1], fill="black")
        draw.rectangle([half, half, size - 1, size - 1], fill="black")
    else:
        raise ValueError(pattern)
    return image


@pytest.fixture()
def make_image() -> Callable[..., bytes]:
    """PNG bytes with a two-tone layout; ``pattern`` is vertical, horizontal or checker."""

    def _make(pattern: str = "vertical", size: int = 64, fmt: str = "PNG") -> bytes:
        buffer = io.BytesIO()
        _draw(pattern, size).save(buffer, format=fmt)
        return buffer.getvalue()

    return _make
