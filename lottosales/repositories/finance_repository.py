"""Per-owner finance settings and daily cash closures."""

from __future__ import annotations

from typing import Any

from lottosales.db import DAILY_CLOSURES, SETTINGS
from lottosales.repositories.base import MongoRepository


class SettingsRepository(MongoRepository):
    collection_name = SETTINGS

    def get_commission_rate(self, owner_id: str) -> float | None:
        doc = self.collection.find_one({"_id": owner_id})
        if not doc or doc.get("commission_rate") is None:
            return None
        return float(doc["commission_rate"])

    def set_commission_rate(self, owner_id: str, rate: float) -> None:
        self.collection.update_one({"_id": owner_id}, {"$set": {"commission_rate": float(rate)}}, upsert=True)


class ClosureRepository(MongoRepository):
    """One document per owner and local calendar day."""

    collection_name = DAILY_CLOSURES

    @staticmethod
    def _doc_id(owner_id: str, date: str) -> str:
        return f"{owner_id}/{date}"

    def get(self, owner_id: str, date: str) -> dict[str, Any] | None:
        return self.collection.find_one({"_id": self._doc_id(owner_id, date)})

    def upsert(self, owner_id: str, date: str, fields: dict[str, Any]) -> dict[str, Any]:
        doc_id = self._doc_id(owner_id, date)
        self.collection.update_one(
            {"_id": doc_id},
            {"$set": {**fields, "owner_id": owner_id, "date": date}},
            upsert=True,
        )
        return self.collection.find_one({"_id": doc_id}) or {}

    def delete(self, owner_id: str, date: str) -> bool:
        res = self.collection.delete_one({"_id": self._doc_id(owner_id, date)})
        return res.deleted_count > 0
