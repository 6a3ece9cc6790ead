"""Bounded per-item usage counter."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Union

MAX_USES = 3

_USAGE_PATTERN = re.compile(r"(\d+)\s*/\s*(\d+)\s*uses?", re.IGNORECASE)


@dataclass(frozen=True)
class UsageCounter:
    """Immutable ``current/maximum`` counter.

    ``current`` is clamped into ``[0, maximum]`` on construction, so no code
    path can build a counter above its ceiling.
    """

    current: int = 0
    maximum: int = MAX_USES

    def __post_init__(self) -> None:
        maximum = max(0, int(self.maximum))
        current = max(0, min(int(self.current), maximum))
        object.__setattr__(self, "maximum", maximum)
        object.__setattr__(self, "current", current)

    @property
    def is_at_limit(self) -> bool:
        return self.current >= self.maximum

    @property
    def can_use(self) -> bool:
        return self.current < self.maximum

    @property
    def remaining(self) -> int:
        return self.maximum - self.current

    @property
    def display(self) -> str:
        return f"{self.current}/{self.maximum} uses"

    @classmethod
    def parse(
        cls, value: Union["UsageCounter", Dict[str, Any], int, str, None], maximum: int = MAX_USES
    ) -> "UsageCounter":
        """Normalise stored usage values into a counter.

        Accepts an existing counter, an integer, a ``"X/Y uses"`` string or a
        bare numeric string. Anything else yields a fresh counter.
        """

        if isinstance(value, UsageCounter):
            return cls(value.current, value.maximum)
        if isinstance(value, dict) and "current" in value:
            return cls(int(value["current"]), int(value.get("maximum", maximum)))
        if isinstance(value, bool):
            return cls(0, maximum)
        if isinstance(value, int):
            return cls(value, maximum)
        if isinstance(value, str):
            match = _USAGE_PATTERN.search(value)
            if match:
                return cls(int(match.group(1)), int(match.group(2)))
            stripped = value.strip()
            if stripped.lstrip("-").isdigit():
                return cls(int(stripped), maximum)
        return cls(0, maximum)


@dataclass(frozen=True)
class UsageStatus:
    status: str
    color: str
    message: str


def usage_status(counter: UsageCounter) -> UsageStatus:
    """Summarise a counter for display: available, warning or limit reached."""

    if counter.is_at_limit:
        return UsageStatus(status="limit_reached", color="red", message="Usage limit reached")
    if counter.current >= counter.maximum - 1:
        return UsageStatus(status="warning", color="orange", message="Last use available")
    return UsageStatus(status="available", color="green", message=f"{counter.remaining} uses remaining")


__all__ = ["MAX_USES", "UsageCounter", "UsageStatus", "usage_status"]
