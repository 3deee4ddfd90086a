"""Repository layer for draw results."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pymongo import DESCENDING

from lottosales.db import RESULTS
from lottosales.models.result import Result, WinningNumbers
from lottosales.repositories.base import MongoRepository


def _to_record(doc: dict[str, Any]) -> Result:
    wn = doc.get("winning_numbers") or {}
    return Result(
        id=str(doc["_id"]),
        owner_id=str(doc.get("owner_id")),
        draw_id=str(doc.get("draw_id") or ""),
        date=str(doc.get("date") or ""),
        schedule=str(doc.get("schedule") or ""),
        winning_numbers=WinningNumbers(
            first=str(wn.get("first") or ""),
            second=str(wn.get("second") or ""),
            third=str(wn.get("third") or ""),
        ),
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


class ResultRepository(MongoRepository):
    collection_name = RESULTS

    def insert(self, doc: dict[str, Any]) -> Result:
        self.collection.insert_one(doc)
        return _to_record(doc)

    def get(self, owner_id: str, result_id: str) -> Result | None:
        doc = self.collection.find_one({"_id": result_id, "owner_id": owner_id})
        return _to_record(doc) if doc else None

    def find_slot(self, owner_id: str, draw_id: str, date: str, schedule: str) -> Result | None:
        doc = self.collection.find_one(
            {"owner_id": owner_id, "draw_id": draw_id, "date": date, "schedule": schedule}
        )
        return _to_record(doc) if doc else None

    def list_results(
        self, owner_id: str, draw_id: str | None = None, date: str | None = None
    ) -> Sequence[Result]:
        query: dict[str, Any] = {"owner_id": owner_id}
        if draw_id:
            query["draw_id"] = draw_id
        if date:
            query["date"] = date
        cur = self.collection.find(query).sort([("date", DESCENDING), ("created_at", DESCENDING)])
        return [_to_record(d) for d in cur]

    def has_results_for_draw(self, owner_id: str, draw_id: str) -> bool:
        return self.collection.find_one({"owner_id": owner_id, "draw_id": draw_id}, {"_id": 1}) is not None

    def update(self, owner_id: str, result_id: str, fields: dict[str, Any]) -> Result | None:
        self.collection.update_one({"_id": result_id, "owner_id": owner_id}, {"$set": fields})
        return self.get(owner_id, result_id)

    def delete(self, owner_id: str, result_id: str) -> bool:
        res = self.collection.delete_one({"_id": result_id, "owner_id": owner_id})
        return res.deleted_count > 0
