"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.issues import Issue, IssueKind
from models.outfit import Outfit, OutfitCandidate, OutfitContext
from models.usage_counter import MAX_USES, UsageCounter
from models.wardrobe_item import WardrobeItem, from_raw_metadata

__all__ = [
    "Issue",
    "IssueKind",
    "MAX_USES",
    "Outfit",
    "OutfitCandidate",
    "OutfitContext",
    "UsageCounter",
    "WardrobeItem",
    "from_raw_metadata",
]
