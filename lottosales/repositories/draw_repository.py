"""Repository layer for draw persistence."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pymongo import DESCENDING

from lottosales.db import DRAWS
from lottosales.models.draw import Draw
from lottosales.repositories.base import MongoRepository


def _to_record(doc: dict[str, Any]) -> Draw:
    return Draw(
        id=str(doc["_id"]),
        owner_id=str(doc.get("owner_id")),
        name=str(doc.get("name") or ""),
        number_of_digits=int(doc.get("number_of_digits") or 2),
        cost_per_fraction=float(doc.get("cost_per_fraction") or 0.0),
        schedules=tuple(str(s) for s in (doc.get("schedules") or [])),
        logo_url=doc.get("logo_url"),
        created_at=doc.get("created_at"),
    )


class DrawRepository(MongoRepository):
    """CRUD operations for draws."""

    collection_name = DRAWS

    def insert(self, doc: dict[str, Any]) -> Draw:
        self.collection.insert_one(doc)
        return _to_record(doc)

    def get(self, owner_id: str, draw_id: str) -> Draw | None:
        doc = self.collection.find_one({"_id": draw_id, "owner_id": owner_id})
        return _to_record(doc) if doc else None

    def get_any(self, draw_id: str) -> Draw | None:
        """Lookup without owner scoping (public verification)."""

        doc = self.collection.find_one({"_id": draw_id})
        return _to_record(doc) if doc else None

    def list_draws(self, owner_id: str) -> Sequence[Draw]:
        cur = self.collection.find({"owner_id": owner_id}).sort("created_at", DESCENDING)
        return [_to_record(d) for d in cur]

    def update(self, owner_id: str, draw_id: str, fields: dict[str, Any]) -> Draw | None:
        self.collection.update_one({"_id": draw_id, "owner_id": owner_id}, {"$set": fields})
        return self.get(owner_id, draw_id)

    def delete(self, owner_id: str, draw_id: str) -> bool:
        res = self.collection.delete_one({"_id": draw_id, "owner_id": owner_id})
        return res.deleted_count > 0
