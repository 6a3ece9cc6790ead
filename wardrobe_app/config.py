"""Configuration helpers for the wardrobe core."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Callable, TypeVar

T = TypeVar("T")

DEFAULT_MAX_USES = 3
DEFAULT_DB_PATH = "data/wardrobe.db"


@dataclass
class WardrobeConfig:
    """Tunable thresholds for duplicate detection and outfit composition.

    Defaults mirror the values the wardrobe has always shipped with; each one
    can be overridden through the environment or an environment YAML file.
    """

    max_uses: int = DEFAULT_MAX_USES
    layering_threshold_c: float = 14.0
    winter_threshold_c: float = 10.0
    hot_threshold_c: float = 25.0
    near_duplicate_threshold: float = 95.0
    filename_similarity_threshold: float = 85.0
    per_category_cap: int = 5
    max_results: int = 3
    combination_budget: int = 3125
    wardrobe_db_path: str = DEFAULT_DB_PATH
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "WardrobeConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables, which take precedence.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("WARDROBE_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, cast: Callable[[str], T], default: T) -> T:
            raw = os.getenv(f"WARDROBE_{key.upper()}", yaml_config.get(key))
            if raw is None or str(raw).strip() == "":
                return default
            try:
                return cast(raw)
            except ValueError:
                return default

        defaults = cls()
        return cls(
            max_uses=max(1, get_value("max_uses", int, defaults.max_uses)),
            layering_threshold_c=get_value("layering_threshold_c", float, defaults.layering_threshold_c),
            winter_threshold_c=get_value("winter_threshold_c", float, defaults.winter_threshold_c),
            hot_threshold_c=get_value("hot_threshold_c", float, defaults.hot_threshold_c),
            near_duplicate_threshold=get_value(
                "near_duplicate_threshold", float, defaults.near_duplicate_threshold
            ),
            filename_similarity_threshold=get_value(
                "filename_similarity_threshold", float, defaults.filename_similarity_threshold
            ),
            per_category_cap=max(1, get_value("per_category_cap", int, defaults.per_category_cap)),
            max_results=max(1, get_value("max_results", int, defaults.max_results)),
            combination_budget=max(1, get_value("combination_budget", int, defaults.combination_budget)),
            wardrobe_db_path=get_value("wardrobe_db_path", str, defaults.wardrobe_db_path),
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a minimal YAML/INI-style config without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config


__all__ = ["WardrobeConfig", "DEFAULT_MAX_USES"]
