"""Global ticket-id index (shared by all shops)."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from lottosales.db import TICKET_INDEX
from lottosales.models.sale import TicketIndexEntry
from lottosales.repositories.base import MongoRepository


def _to_record(doc: dict[str, Any]) -> TicketIndexEntry:
    return TicketIndexEntry(
        ticket_id=str(doc["_id"]),
        owner_id=str(doc.get("owner_id")),
        sale_id=str(doc.get("sale_id")),
        created_at=doc.get("created_at"),
    )


class TicketIndexRepository(MongoRepository):
    """Keys are normalized ticket ids; `_id` uniqueness makes ids global."""

    collection_name = TICKET_INDEX

    def reserve(self, ticket_id: str, owner_id: str, sale_id: str, now: datetime) -> None:
        """Insert a new entry. Raises DuplicateKeyError when the id is taken."""

        self.collection.insert_one(
            {"_id": ticket_id, "owner_id": owner_id, "sale_id": sale_id, "created_at": now}
        )

    def insert_if_missing(self, ticket_id: str, owner_id: str, sale_id: str, now: datetime) -> bool:
        res = self.collection.update_one(
            {"_id": ticket_id},
            {"$setOnInsert": {"owner_id": owner_id, "sale_id": sale_id, "created_at": now}},
            upsert=True,
        )
        return res.upserted_id is not None

    def get(self, ticket_id: str) -> TicketIndexEntry | None:
        doc = self.collection.find_one({"_id": ticket_id})
        return _to_record(doc) if doc else None

    def delete(self, owner_id: str, ticket_id: str) -> bool:
        res = self.collection.delete_one({"_id": ticket_id, "owner_id": owner_id})
        return res.deleted_count > 0

    def delete_many(self, owner_id: str, ticket_ids: list[str]) -> int:
        if not ticket_ids:
            return 0
        res = self.collection.delete_many({"owner_id": owner_id, "_id": {"$in": list(ticket_ids)}})
        return int(res.deleted_count)
