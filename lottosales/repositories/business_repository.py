"""Shop profile (name, phone, logo URL)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from lottosales.db import BUSINESSES
from lottosales.repositories.base import MongoRepository


@dataclass(frozen=True)
class BusinessRecord:
    owner_id: str
    name: str
    phone: str | None = None
    logo_url: str | None = None


class BusinessRepository(MongoRepository):
    collection_name = BUSINESSES

    def get(self, owner_id: str) -> BusinessRecord | None:
        doc = self.collection.find_one({"_id": owner_id})
        if not doc:
            return None
        return BusinessRecord(
            owner_id=owner_id,
            name=str(doc.get("name") or ""),
            phone=doc.get("phone"),
            logo_url=doc.get("logo_url"),
        )

    def put(self, owner_id: str, fields: dict[str, Any]) -> BusinessRecord:
        self.collection.update_one({"_id": owner_id}, {"$set": fields}, upsert=True)
        return self.get(owner_id) or BusinessRecord(owner_id=owner_id, name=str(fields.get("name") or ""))
