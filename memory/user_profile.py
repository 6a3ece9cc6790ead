"""User style profile and its JSON-backed store."""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, List, Optional


SKIN_TONE_PALETTES: Dict[str, List[str]] = {
    "burnt tan": ["navy", "brown", "green", "beige"],
    "tan": ["navy", "brown", "green", "beige"],
    "olive": ["navy", "beige", "white", "green"],
    "fair": ["navy", "gray", "pink", "blue"],
    "medium": ["beige", "blue", "green", "white"],
    "dark": ["white", "yellow", "red", "beige"],
}


@dataclass
class StyleProfile:
    user_id: str
    age: Optional[int] = None
    body_type: Optional[str] = None
    skin_tone: Optional[str] = None
    gender: Optional[str] = None

    def __post_init__(self) -> None:
        self.body_type = self.body_type.strip().lower() if self.body_type else None
        self.skin_tone = self.skin_tone.strip().lower() if self.skin_tone else None
        self.gender = self.gender.strip().lower() if self.gender else None

    @property
    def flattering_colors(self) -> List[str]:
        return SKIN_TONE_PALETTES.get(self.skin_tone or "", [])


class UserProfileService:
    """Simple JSON-backed profile store."""

    def __init__(self, base_dir: str = "data/profiles") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _profile_path(self, user_id: str) -> Path:
        return self.base_dir / f"{user_id}.json"

    def get_profile(self, user_id: str) -> StyleProfile:
        path = self._profile_path(user_id)
        if not path.exists():
            profile = StyleProfile(user_id=user_id)
            path.write_text(json.dumps(asdict(profile), indent=2))
            return profile

        data = json.loads(path.read_text())
        return StyleProfile(**{**data, "user_id": user_id})

    def update_profile(self, user_id: str, updates: Dict[str, object]) -> StyleProfile:
        profile = self.get_profile(user_id)
        merged = {**asdict(profile), **{k: v for k, v in updates.items() if k != "user_id"}}
        updated = StyleProfile(**merged)
        self._profile_path(user_id).write_text(json.dumps(asdict(updated), indent=2))
        return updated
