"""Shared plumbing for MongoDB repositories."""

from __future__ import annotations

import uuid

from pymongo.collection import Collection
from pymongo.database import Database

from lottosales.db import get_mongo_db


def new_id() -> str:
    return uuid.uuid4().hex


class MongoRepository:
    """Base class; resolves the app database lazily unless one is injected."""

    collection_name: str = ""

    def __init__(self, db: Database | None = None) -> None:
        self._db = db

    @property
    def db(self) -> Database:
        # pymongo Database objects refuse truth-value testing.
        if self._db is not None:
            return self._db
        return get_mongo_db()

    @property
    def collection(self) -> Collection:
        return self.db[self.collection_name]

    def fetch_batch(self, owner_id: str, limit: int, projection: dict | None = None) -> list[dict]:
        """Up to `limit` raw documents of the owner, for batched deletion."""

        cur = self.collection.find({"owner_id": owner_id}, projection or {"_id": 1}).limit(int(limit))
        return list(cur)

    def delete_ids(self, owner_id: str, ids: list[str]) -> int:
        if not ids:
            return 0
        res = self.collection.delete_many({"owner_id": owner_id, "_id": {"$in": list(ids)}})
        return int(res.deleted_count)
