"""Pydantic schemas for classifier output and outfit requests."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from models.outfit import OutfitContext
from models.taxonomy import coerce_category, coerce_occasion, coerce_season

Occasion = Literal["casual", "smart-casual", "formal", "party", "business", "athletic"]
TimeOfDay = Literal["morning", "afternoon", "evening", "night"]
Season = Literal["spring", "summer", "autumn", "winter"]


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = " ".join(value.split())
        return value or None
    return value


class ClassifierAttributes(BaseModel):
    """Structured attributes emitted by the external image classifier.

    ``category`` is narrowed to the closed category set and unknown occasions
    are dropped, so free text never travels past this boundary.
    """

    name: str = Field(default="Untitled item", min_length=1)
    category: str = "other"
    color: str = "unknown"
    material: Optional[str] = None
    pattern: Optional[str] = None
    occasion: Optional[str] = None
    demographic: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _clean_name(cls, value: Any) -> Any:
        return _blank_to_none(value) or "Untitled item"

    @field_validator("category", mode="before")
    @classmethod
    def _narrow_category(cls, value: Any) -> str:
        return coerce_category(str(value) if value is not None else None)

    @field_validator("color", mode="before")
    @classmethod
    def _clean_color(cls, value: Any) -> str:
        cleaned = _blank_to_none(value)
        return str(cleaned).lower() if cleaned else "unknown"

    @field_validator("material", "pattern", "demographic", mode="before")
    @classmethod
    def _clean_optional(cls, value: Any) -> Any:
        cleaned = _blank_to_none(value)
        return str(cleaned).lower() if cleaned else None

    @field_validator("occasion", mode="before")
    @classmethod
    def _narrow_occasion(cls, value: Any) -> Optional[str]:
        return coerce_occasion(str(value)) if value else None


class OutfitRequest(BaseModel):
    """Envelope for an outfit generation request."""

    user_id: str = Field(min_length=1)
    occasion: Occasion = "casual"
    temperature: float = Field(default=20.0, ge=-60, le=60)
    time_of_day: TimeOfDay = "afternoon"
    season: Optional[Season] = None
    max_results: int = Field(default=3, ge=1, le=20)

    @field_validator("occasion", mode="before")
    @classmethod
    def _alias_occasion(cls, value: Any) -> Any:
        return coerce_occasion(str(value)) or value

    @field_validator("season", mode="before")
    @classmethod
    def _alias_season(cls, value: Any) -> Any:
        if value in (None, ""):
            return None
        return coerce_season(str(value)) or value

    @field_validator("time_of_day", mode="before")
    @classmethod
    def _lower_time(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    def to_context(self) -> OutfitContext:
        return OutfitContext(
            occasion=self.occasion,
            temperature=self.temperature,
            time_of_day=self.time_of_day,
            season=self.season,
        )


class SaveOutfitRequest(BaseModel):
    user_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    occasion: Occasion = "casual"
    item_ids: List[str] = Field(min_length=1)

    @field_validator("item_ids")
    @classmethod
    def _unique_ids(cls, value: List[str]) -> List[str]:
        if len(set(value)) != len(value):
            raise ValueError("item_ids must not repeat")
        return value

    @field_validator("occasion", mode="before")
    @classmethod
    def _alias_occasion(cls, value: Any) -> Any:
        return coerce_occasion(str(value)) or value


class ValidationResult(BaseModel):
    """Wrapper returned to callers when validation fails."""

    status: Literal["needs_review"] = "needs_review"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a consistent review payload."""

    details = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    return ValidationResult(message=message, details=details).model_dump()


__all__ = [
    "ClassifierAttributes",
    "OutfitRequest",
    "SaveOutfitRequest",
    "ValidationResult",
    "validation_failure",
]
