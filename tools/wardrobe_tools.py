"""Tool facade tying the wardrobe store to ingestion, composition and usage."""

from __future__ import annotations

import uuid
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Sequence

from logic.category_refiner import CategoryRefiner
from logic.ingestion import Classifier, UploadedImage, ingest_batch
from logic.outfit_composer import OutfitComposer
from logic.usage_ledger import UsageLedger
from logic.validation import OutfitRequest, SaveOutfitRequest, validation_failure
from memory.user_profile import StyleProfile, UserProfileService
from models.outfit import Outfit
from models.usage_counter import usage_status
from models.wardrobe_item import WardrobeItem
from tools.observability import instrument_tool
from tools.wardrobe_store import SQLiteWardrobeStore, WardrobeStore
from wardrobe_app.config import WardrobeConfig


def _item_payload(item: WardrobeItem) -> Dict[str, Any]:
    payload = asdict(item)
    payload["usage"] = item.usage.display
    payload["usage_status"] = usage_status(item.usage).status
    payload["created_at"] = item.created_at.isoformat()
    return payload


class WardrobeTools:
    """Thin wrapper exposing wardrobe operations as plain-data tool calls."""

    def __init__(
        self,
        store: Optional[WardrobeStore] = None,
        config: Optional[WardrobeConfig] = None,
        profiles: Optional[UserProfileService] = None,
    ) -> None:
        self.config = config or WardrobeConfig.from_env()
        self.store = store or SQLiteWardrobeStore(self.config.wardrobe_db_path, max_uses=self.config.max_uses)
        self.profiles = profiles
        self.ledger = UsageLedger(self.config.max_uses)
        self.composer = OutfitComposer(self.config, self.ledger)
        self.refiner = CategoryRefiner(self.config)

    def _profile(self, user_id: str) -> Optional[StyleProfile]:
        return self.profiles.get_profile(user_id) if self.profiles else None

    @instrument_tool("add_images")
    def add_images(
        self,
        user_id: str,
        uploads: Sequence[UploadedImage],
        classify: Classifier,
        temperature: float | None = None,
    ) -> Dict[str, Any]:
        """Ingest a batch of uploads and persist the non-duplicates."""

        existing = self.store.list_items_for_user(user_id)
        report = ingest_batch(
            user_id=user_id,
            uploads=uploads,
            existing_items=existing,
            classify=classify,
            config=self.config,
            temperature=temperature,
        )
        stored = [self.store.create_item(item) for item in report.accepted]
        return {
            "message": report.summary(),
            "items": [_item_payload(item) for item in stored],
            "duplicates": report.duplicates,
            "failures": report.failures,
            "flagged": report.flagged,
            "issues": [issue.to_dict() for issue in report.issues],
        }

    @instrument_tool("list_items")
    def list_items(self, user_id: str, category: Optional[str] = None) -> List[Dict[str, Any]]:
        return [_item_payload(item) for item in self.store.list_items_for_user(user_id, category)]

    @instrument_tool(
        "generate_outfits",
        input_model=OutfitRequest,
        on_validation_error=lambda exc: validation_failure("Invalid outfit request", exc),
    )
    def generate_outfits(
        self,
        user_id: str,
        occasion: str = "casual",
        temperature: float = 20.0,
        time_of_day: str = "afternoon",
        season: Optional[str] = None,
        max_results: int = 3,
    ) -> Dict[str, Any]:
        request = OutfitRequest(
            user_id=user_id,
            occasion=occasion,
            temperature=temperature,
            time_of_day=time_of_day,
            season=season,
            max_results=max_results,
        )
        items = self.store.list_items_for_user(user_id)
        result = self.composer.compose(items, request.to_context(), request.max_results, self._profile(user_id))
        if not result.ok:
            return {
                "status": "no_outfit",
                "issue": result.issue.to_dict(),
                "outfits": [],
                "diagnostics": result.diagnostics,
            }
        return {
            "status": "ok",
            "outfits": [candidate.to_dict() for candidate in result.candidates],
            "diagnostics": result.diagnostics,
        }

    @instrument_tool(
        "save_outfit",
        input_model=SaveOutfitRequest,
        on_validation_error=lambda exc: validation_failure("Invalid outfit", exc),
    )
    def save_outfit(self, user_id: str, name: str, occasion: str, item_ids: List[str]) -> Dict[str, Any]:
        """Persist a chosen outfit and count one use for each of its items."""

        items = [self.store.get_item(user_id, item_id) for item_id in item_ids]
        unknown = [item_id for item_id, item in zip(item_ids, items) if item is None]
        if unknown:
            return {"status": "error", "message": "Unknown item ids", "unknown_ids": unknown}
        check = self.ledger.validate_for_outfit([item for item in items if item is not None])
        if not check.valid:
            return {"status": "error", "message": check.message, "unavailable_ids": check.unavailable_ids}

        outfit = self.store.create_outfit(
            Outfit(outfit_id=str(uuid.uuid4()), user_id=user_id, name=name, occasion=occasion, item_ids=list(item_ids))
        )
        usage = {item_id: self.store.increment_usage(user_id, item_id) for item_id in item_ids}
        return {
            "status": "ok",
            "outfit_id": outfit.outfit_id,
            "usage": {item_id: counter.display for item_id, counter in usage.items() if counter is not None},
        }

    @instrument_tool("reset_usage")
    def reset_usage(self, user_id: str, item_id: str) -> Optional[str]:
        counter = self.store.reset_usage(user_id, item_id)
        return counter.display if counter else None

    @instrument_tool("check_category")
    def check_category(
        self, category: str, name: str, color: str = "", temperature: float | None = None
    ) -> Dict[str, Any]:
        """Refine a category and surface any confirmation prompt, without storing anything."""

        refined = self.refiner.refine(category, name, color, temperature)
        prompt = self.refiner.needs_confirmation(refined.category, name)
        return {
            "category": refined.category,
            "subcategory": refined.subcategory,
            "confidence": refined.confidence,
            "ambiguous": refined.ambiguous,
            "should_prompt": prompt.should_prompt,
            "suggestion": prompt.suggestion,
        }


__all__ = ["WardrobeTools"]
