"""Structured, non-fatal outcomes reported back to callers.

None of these are raised. Components attach an :class:`Issue` to their
result and the calling layer decides how to present it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


class IssueKind(str, Enum):
    INPUT_INSUFFICIENT = "input_insufficient"
    INFEASIBLE = "infeasible"
    AMBIGUOUS_CLASSIFICATION = "ambiguous_classification"
    HASH_UNAVAILABLE = "hash_unavailable"


@dataclass(frozen=True)
class Issue:
    kind: IssueKind
    condition: str
    message: str
    missing: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "kind": self.kind.value,
            "condition": self.condition,
            "message": self.message,
            "missing": list(self.missing),
        }


def missing_categories(missing: List[str]) -> Issue:
    return Issue(
        kind=IssueKind.INPUT_INSUFFICIENT,
        condition="missing_required_categories",
        message="Every outfit must include at least one top and one bottom",
        missing=list(missing),
    )


def cold_without_outerwear(temperature: float) -> Issue:
    return Issue(
        kind=IssueKind.INFEASIBLE,
        condition="cold_weather_without_outerwear",
        message=f"No outerwear available for cold weather ({temperature:g}C)",
        missing=["outerwear"],
    )


def insufficient_variety(missing: List[str]) -> Issue:
    return Issue(
        kind=IssueKind.INPUT_INSUFFICIENT,
        condition="insufficient_variety",
        message="Not enough distinct items to build an outfit of at least three pieces",
        missing=list(missing),
    )


__all__ = [
    "IssueKind",
    "Issue",
    "missing_categories",
    "cold_without_outerwear",
    "insufficient_variety",
]
