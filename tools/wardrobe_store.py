"""Wardrobe storage abstractions and SQLite implementation."""
from __future__ import annotations

import dataclasses
import json
import sqlite3
import uuid
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from models.outfit import Outfit
from models.taxonomy import validate_category
from models.usage_counter import MAX_USES, UsageCounter
from models.wardrobe_item import IMMUTABLE_FIELDS, WardrobeItem


class WardrobeStore:
    """Persistence interface for wardrobe items and saved outfits."""

    def create_item(self, item: WardrobeItem) -> WardrobeItem:
        raise NotImplementedError

    def get_item(self, user_id: str, item_id: str) -> Optional[WardrobeItem]:
        raise NotImplementedError

    def get_item_by_fingerprint(self, user_id: str, fingerprint: str) -> Optional[WardrobeItem]:
        raise NotImplementedError

    def list_items_for_user(self, user_id: str, category: Optional[str] = None) -> List[WardrobeItem]:
        raise NotImplementedError

    def update_item(self, user_id: str, item_id: str, updated_fields: Dict[str, object]) -> Optional[WardrobeItem]:
        raise NotImplementedError

    def delete_item(self, user_id: str, item_id: str) -> bool:
        raise NotImplementedError

    def increment_usage(self, user_id: str, item_id: str) -> Optional[UsageCounter]:
        raise NotImplementedError

    def reset_usage(self, user_id: str, item_id: str) -> Optional[UsageCounter]:
        raise NotImplementedError

    def create_outfit(self, outfit: Outfit) -> Outfit:
        raise NotImplementedError

    def get_outfit(self, user_id: str, outfit_id: str) -> Optional[Outfit]:
        raise NotImplementedError

    def list_outfits_for_user(self, user_id: str) -> List[Outfit]:
        raise NotImplementedError

    def delete_outfit(self, user_id: str, outfit_id: str) -> bool:
        raise NotImplementedError


class SQLiteWardrobeStore(WardrobeStore):
    """Local SQLite-backed store for wardrobe items and outfits."""

    def __init__(self, database_path: str | Path = "data/wardrobe.db", max_uses: int = MAX_USES) -> None:
        self.database_path = Path(database_path)
        self.max_uses = max_uses
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS wardrobe_items (
                    user_id TEXT NOT NULL,
                    item_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    category TEXT NOT NULL,
                    subcategory TEXT,
                    color TEXT,
                    material TEXT,
                    pattern TEXT,
                    occasion TEXT,
                    demographic TEXT,
                    image_url TEXT,
                    fingerprint TEXT NOT NULL,
                    usage_count INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    PRIMARY KEY (user_id, item_id)
                );
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_items_fingerprint ON wardrobe_items (user_id, fingerprint)"
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS outfits (
                    user_id TEXT NOT NULL,
                    outfit_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    occasion TEXT NOT NULL,
                    item_ids TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    PRIMARY KEY (user_id, outfit_id)
                );
                """
            )

    def create_item(self, item: WardrobeItem) -> WardrobeItem:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO wardrobe_items (
                    user_id, item_id, name, category, subcategory, color, material, pattern,
                    occasion, demographic, image_url, fingerprint, usage_count, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    item.user_id,
                    item.item_id,
                    item.name,
                    item.category,
                    item.subcategory,
                    item.color,
                    item.material,
                    item.pattern,
                    item.occasion,
                    item.demographic,
                    item.image_url,
                    item.fingerprint,
                    min(item.usage.current, self.max_uses),
                    item.created_at.isoformat(),
                ),
            )
        return item

    def _row_to_item(self, row: sqlite3.Row) -> WardrobeItem:
        return WardrobeItem(
            item_id=row["item_id"],
            user_id=row["user_id"],
            name=row["name"],
            category=row["category"],
            subcategory=row["subcategory"],
            color=row["color"],
            material=row["material"],
            pattern=row["pattern"],
            occasion=row["occasion"],
            demographic=row["demographic"],
            image_url=row["image_url"],
            fingerprint=row["fingerprint"],
            usage=UsageCounter(row["usage_count"], self.max_uses),
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def get_item(self, user_id: str, item_id: str) -> Optional[WardrobeItem]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM wardrobe_items WHERE user_id = ? AND item_id = ?",
                (user_id, item_id),
            )
            row = cursor.fetchone()
            return self._row_to_item(row) if row else None

    def get_item_by_fingerprint(self, user_id: str, fingerprint: str) -> Optional[WardrobeItem]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM wardrobe_items WHERE user_id = ? AND fingerprint = ? ORDER BY item_id LIMIT 1",
                (user_id, fingerprint),
            )
            row = cursor.fetchone()
            return self._row_to_item(row) if row else None

    def list_items_for_user(self, user_id: str, category: Optional[str] = None) -> List[WardrobeItem]:
        with self._connect() as conn:
            if category:
                cursor = conn.execute(
                    "SELECT * FROM wardrobe_items WHERE user_id = ? AND category = ? ORDER BY created_at, item_id",
                    (user_id, validate_category(category)),
                )
            else:
                cursor = conn.execute(
                    "SELECT * FROM wardrobe_items WHERE user_id = ? ORDER BY created_at, item_id",
                    (user_id,),
                )
            return [self._row_to_item(row) for row in cursor.fetchall()]

    def update_item(self, user_id: str, item_id: str, updated_fields: Dict[str, object]) -> Optional[WardrobeItem]:
        current = self.get_item(user_id, item_id)
        if not current:
            return None

        blocked = IMMUTABLE_FIELDS.intersection(updated_fields)
        if blocked:
            raise ValueError(f"Fields cannot be changed after creation: {sorted(blocked)}")
        changes = {key: value for key, value in updated_fields.items() if key in _EDITABLE_FIELDS}
        if "usage" in changes:
            changes["usage"] = UsageCounter.parse(changes["usage"], self.max_uses)

        validated = dataclasses.replace(current, **changes)
        return self.create_item(validated)

    def delete_item(self, user_id: str, item_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM wardrobe_items WHERE user_id = ? AND item_id = ?",
                (user_id, item_id),
            )
            return cursor.rowcount > 0

    def _read_usage(self, conn: sqlite3.Connection, user_id: str, item_id: str) -> Optional[UsageCounter]:
        row = conn.execute(
            "SELECT usage_count FROM wardrobe_items WHERE user_id = ? AND item_id = ?",
            (user_id, item_id),
        ).fetchone()
        return UsageCounter(row["usage_count"], self.max_uses) if row else None

    def increment_usage(self, user_id: str, item_id: str) -> Optional[UsageCounter]:
        """Clamp-on-write increment; concurrent callers can never pass ``max_uses``."""

        with self._connect() as conn:
            conn.execute(
                "UPDATE wardrobe_items SET usage_count = MIN(usage_count + 1, ?) WHERE user_id = ? AND item_id = ?",
                (self.max_uses, user_id, item_id),
            )
            return self._read_usage(conn, user_id, item_id)

    def reset_usage(self, user_id: str, item_id: str) -> Optional[UsageCounter]:
        with self._connect() as conn:
            conn.execute(
                "UPDATE wardrobe_items SET usage_count = 0 WHERE user_id = ? AND item_id = ?",
                (user_id, item_id),
            )
            return self._read_usage(conn, user_id, item_id)

    def create_outfit(self, outfit: Outfit) -> Outfit:
        outfit_id = outfit.outfit_id or str(uuid.uuid4())
        stored = dataclasses.replace(outfit, outfit_id=outfit_id)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO outfits (user_id, outfit_id, name, occasion, item_ids, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    stored.user_id,
                    stored.outfit_id,
                    stored.name,
                    stored.occasion,
                    json.dumps(list(stored.item_ids)),
                    stored.created_at.isoformat(),
                ),
            )
        return stored

    @staticmethod
    def _row_to_outfit(row: sqlite3.Row) -> Outfit:
        return Outfit(
            outfit_id=row["outfit_id"],
            user_id=row["user_id"],
            name=row["name"],
            occasion=row["occasion"],
            item_ids=json.loads(row["item_ids"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def get_outfit(self, user_id: str, outfit_id: str) -> Optional[Outfit]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM outfits WHERE user_id = ? AND outfit_id = ?",
                (user_id, outfit_id),
            ).fetchone()
            return self._row_to_outfit(row) if row else None

    def list_outfits_for_user(self, user_id: str) -> List[Outfit]:
        with self._connect() as conn:
            cursor = conn.execute(
                "SELECT * FROM outfits WHERE user_id = ? ORDER BY created_at, outfit_id",
                (user_id,),
            )
            return [self._row_to_outfit(row) for row in cursor.fetchall()]

    def delete_outfit(self, user_id: str, outfit_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM outfits WHERE user_id = ? AND outfit_id = ?",
                (user_id, outfit_id),
            )
            return cursor.rowcount > 0


_EDITABLE_FIELDS = frozenset(
    {"name", "category", "subcategory", "color", "material", "pattern", "occasion", "demographic", "image_url", "usage"}
)


__all__ = ["WardrobeStore", "SQLiteWardrobeStore"]
